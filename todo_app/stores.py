"""
Persistence layer: repositories over the Flask-SQLAlchemy session.

``UserStore`` owns ``User`` rows and ``TaskStore`` owns ``Task`` rows.  Both
expose the small create / find / find_by_id / update_by_id / replace_by_id /
delete_by_id / count surface the workflows need.  Stores apply whatever
constraints they are given and never decide ownership themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import func, select

from . import db
from .models import Task, User, utcnow

# Columns a caller may sort on
SORTABLE_TASK_FIELDS = {
    "title": Task.title,
    "completed": Task.completed,
    "createdAt": Task.created_at,
    "updatedAt": Task.updated_at,
}


class UserStore:
    """Credential store for ``User`` records."""

    def create(self, *, email: str, password_hash: str, name: str) -> User:
        """
        Persist a new user.

        Raises:
            sqlalchemy.exc.IntegrityError: If the email is already taken.
                The session is rolled back before re-raising.
        """
        user = User(email=email, password_hash=password_hash, name=name)
        db.session.add(user)
        try:
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return user

    def find_by_email(self, email: str) -> User | None:
        return db.session.scalar(select(User).where(User.email == email))

    def find_by_id(self, user_id: str) -> User | None:
        return db.session.get(User, user_id)

    def count(self) -> int:
        return db.session.scalar(select(func.count()).select_from(User)) or 0


@dataclass
class TaskQuery:
    """
    Constraints for listing or counting tasks.

    ``owner_id`` is the ownership constraint set by the workflow.
    ``user_id`` is an optional caller-supplied filter on the same column;
    both are applied, so a foreign ``user_id`` simply matches nothing.
    """

    owner_id: str
    user_id: str | None = None
    completed: bool | None = None
    title: str | None = None
    sort: str = "createdAt"
    descending: bool = True
    limit: int | None = None
    offset: int = 0


class TaskStore:
    """Task store for ``Task`` records."""

    def _filtered(self, query: TaskQuery):
        stmt = select(Task).where(Task.user_id == query.owner_id)
        if query.user_id is not None:
            stmt = stmt.where(Task.user_id == query.user_id)
        if query.completed is not None:
            stmt = stmt.where(Task.completed == query.completed)
        if query.title:
            stmt = stmt.where(Task.title.contains(query.title, autoescape=True))
        return stmt

    def create(self, **fields: Any) -> Task:
        task = Task(**fields)
        db.session.add(task)
        db.session.commit()
        return task

    def find(self, query: TaskQuery) -> list[Task]:
        stmt = self._filtered(query)
        column = SORTABLE_TASK_FIELDS.get(query.sort, Task.created_at)
        stmt = stmt.order_by(column.desc() if query.descending else column.asc(), Task.id)
        if query.offset:
            stmt = stmt.offset(query.offset)
        if query.limit is not None:
            stmt = stmt.limit(query.limit)
        return list(db.session.scalars(stmt).all())

    def count(self, query: TaskQuery) -> int:
        stmt = select(func.count()).select_from(self._filtered(query).subquery())
        return db.session.scalar(stmt) or 0

    def find_by_id(self, task_id: str) -> Task | None:
        return db.session.get(Task, task_id)

    def update_by_id(self, task_id: str, fields: dict[str, Any]) -> Task | None:
        """Apply *fields* to an existing task and refresh ``updated_at``."""
        task = self.find_by_id(task_id)
        if task is None:
            return None
        for key, value in fields.items():
            setattr(task, key, value)
        task.updated_at = utcnow()
        db.session.commit()
        return task

    def replace_by_id(self, task_id: str, fields: dict[str, Any]) -> Task | None:
        """
        Overwrite every replaceable column of an existing task.

        Columns missing from *fields* are reset to their defaults.
        """
        task = self.find_by_id(task_id)
        if task is None:
            return None
        task.title = fields["title"]
        task.description = fields.get("description")
        task.completed = bool(fields.get("completed", False))
        task.updated_at = utcnow()
        db.session.commit()
        return task

    def delete_by_id(self, task_id: str) -> bool:
        task = self.find_by_id(task_id)
        if task is None:
            return False
        db.session.delete(task)
        db.session.commit()
        return True
