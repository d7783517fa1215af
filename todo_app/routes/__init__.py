"""
Route blueprints for the todo API.

- auth: registration, login and the current-user profile
- tasks: ownership-scoped task CRUD and completion toggles
- health: liveness probe
"""
