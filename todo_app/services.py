"""
Business workflows for authentication and task management.

``AuthService`` orchestrates registration and login over the credential
store, password hasher and token service.  ``TaskService`` implements the
task CRUD operations and completion toggles, checking on every access that
the task belongs to the calling identity.

Both are plain classes built once by the application factory with their
collaborators passed explicitly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import IntegrityError

from .errors import DuplicateEmail, InvalidCredentials, NotFound
from .models import Task, User
from .passwords import PasswordHasher
from .stores import TaskQuery, TaskStore, UserStore
from .tokens import TokenService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """The authenticated caller attached to a request."""

    id: str
    email: str
    name: str


class AuthService:
    """Registration and login."""

    def __init__(
        self,
        users: UserStore,
        hasher: PasswordHasher,
        tokens: TokenService,
    ) -> None:
        self.users = users
        self.hasher = hasher
        self.tokens = tokens
        self._dummy_hash: str | None = None

    def register(self, email: str, password: str, name: str) -> User:
        """
        Create a new account.

        The returned ``User`` still carries ``password_hash``; callers must
        serialize it with ``User.to_dict`` before exposing it.

        Raises:
            DuplicateEmail: If a user with exactly this email exists.
        """
        if self.users.find_by_email(email) is not None:
            logger.info("Registration rejected: email already in use")
            raise DuplicateEmail()

        try:
            user = self.users.create(
                email=email,
                password_hash=self.hasher.hash(password),
                name=name,
            )
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            logger.info("Registration rejected: email already in use")
            raise DuplicateEmail() from None

        logger.info("Registered user_id=%s", user.id)
        return user

    def login(self, email: str, password: str) -> tuple[User, str]:
        """
        Authenticate by email and password and issue a bearer token.

        Raises:
            InvalidCredentials: If the email is unknown or the password is
                wrong.  Both cases raise the same error.
        """
        user = self.users.find_by_email(email)
        if user is None:
            # same hashing cost as a wrong password
            self.hasher.verify(password, self._unknown_user_hash())
            logger.info("Login failed")
            raise InvalidCredentials()
        if not self.hasher.verify(password, user.password_hash):
            logger.info("Login failed")
            raise InvalidCredentials()

        token = self.tokens.issue(user.id, user.email, user.name)
        logger.info("Login succeeded for user_id=%s", user.id)
        return user, token

    def _unknown_user_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self.hasher.hash("unknown-user-placeholder")
        return self._dummy_hash

    def get_user(self, user_id: str) -> User:
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFound("User not found")
        return user


class TaskService:
    """
    Ownership-enforcing task operations.

    Every operation that addresses a task by id loads it and compares its
    owner with the caller.  A missing task and a task owned by someone else
    raise the same ``NotFound`` so other users' ids cannot be probed.
    """

    def __init__(self, tasks: TaskStore) -> None:
        self.tasks = tasks

    def _owned(self, identity: Identity, task_id: str) -> Task:
        task = self.tasks.find_by_id(task_id)
        if task is None or task.user_id != identity.id:
            raise NotFound(f"Entity not found: Task with id {task_id!r}")
        return task

    def _query(self, identity: Identity, filters: dict[str, Any] | None) -> TaskQuery:
        # owner_id always comes from the identity, never from filters
        return TaskQuery(owner_id=identity.id, **(filters or {}))

    def create(self, identity: Identity, data: dict[str, Any]) -> Task:
        task = self.tasks.create(
            user_id=identity.id,
            title=data["title"],
            description=data.get("description"),
            completed=bool(data.get("completed", False)),
        )
        logger.info("Created task_id=%s for user_id=%s", task.id, identity.id)
        return task

    def list(self, identity: Identity, filters: dict[str, Any] | None = None) -> list[Task]:
        return self.tasks.find(self._query(identity, filters))

    def count(self, identity: Identity, filters: dict[str, Any] | None = None) -> int:
        return self.tasks.count(self._query(identity, filters))

    def get(self, identity: Identity, task_id: str) -> Task:
        return self._owned(identity, task_id)

    def update(self, identity: Identity, task_id: str, changes: dict[str, Any]) -> None:
        self._owned(identity, task_id)
        self.tasks.update_by_id(task_id, changes)

    def replace(self, identity: Identity, task_id: str, data: dict[str, Any]) -> None:
        """Overwrite a task's content; the owner is never transferable."""
        self._owned(identity, task_id)
        self.tasks.replace_by_id(task_id, data)

    def delete(self, identity: Identity, task_id: str) -> None:
        self._owned(identity, task_id)
        self.tasks.delete_by_id(task_id)
        logger.info("Deleted task_id=%s for user_id=%s", task_id, identity.id)

    def mark_completed(self, identity: Identity, task_id: str) -> None:
        self._owned(identity, task_id)
        self.tasks.update_by_id(task_id, {"completed": True})

    def mark_uncompleted(self, identity: Identity, task_id: str) -> None:
        self._owned(identity, task_id)
        self.tasks.update_by_id(task_id, {"completed": False})


@dataclass
class AppServices:
    """Workflows and shared collaborators wired up by ``create_app``."""

    auth: AuthService
    tasks: TaskService
    tokens: TokenService
