"""
Database models for the todo API.

Defines the two persisted records: :class:`User` (credentials and profile)
and :class:`Task` (a to-do item owned by exactly one user).  Identifiers are
opaque UUID strings generated at creation.

Serialisation helpers emit the camelCase wire representation used by the
HTTP layer and never include ``password_hash``.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from . import db


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


def to_utc_iso(value: datetime | None) -> str | None:
    """
    Serialize a datetime to an ISO-8601 UTC string.

    SQLite does not store timezone information, so values read back from
    the database may be naive even though they were written as UTC.  Naive
    values are assumed to be UTC; aware values are converted.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat()


class User(db.Model):
    """
    A registered account.

    Attributes:
        id: UUID string primary key.
        email: Unique, case-sensitive as stored.  Indexed because every
            login and registration looks users up by email.
        password_hash: Werkzeug hash of the password.  Never serialized.
        name: Display name carried in issued tokens.
        created_at: Creation time (UTC).
        updated_at: Last modification time (UTC).
    """

    __tablename__ = "users"

    id: str = db.Column(db.String(36), primary_key=True, default=new_id)
    email: str = db.Column(db.String(254), unique=True, nullable=False, index=True)
    password_hash: str = db.Column(db.String(256), nullable=False)
    name: str = db.Column(db.String(120), nullable=False)
    created_at: datetime = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: datetime = db.Column(
        db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    tasks = db.relationship("Task", back_populates="owner", cascade="all, delete-orphan")

    def to_dict(self) -> dict[str, Any]:
        """Public profile: ``id``, ``email``, ``name`` and ``createdAt``."""
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "createdAt": to_utc_iso(self.created_at),
        }

    def __repr__(self) -> str:
        return f"<User {self.id}: {self.email}>"


class Task(db.Model):
    """
    A to-do item owned by a single user.

    Attributes:
        id: UUID string primary key.
        user_id: Owner reference.  Every query in the task workflow filters
            on this column so users only ever see their own rows.
        title: Required short summary.
        description: Optional free text.
        completed: Completion flag, ``False`` on creation.
        created_at: Creation time (UTC).
        updated_at: Refreshed by every mutation (UTC).
    """

    __tablename__ = "tasks"

    id: str = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id: str = db.Column(
        db.String(36), db.ForeignKey("users.id"), nullable=False, index=True
    )
    title: str = db.Column(db.String(200), nullable=False)
    description: str | None = db.Column(db.Text, nullable=True)
    completed: bool = db.Column(db.Boolean, nullable=False, default=False)
    created_at: datetime = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: datetime = db.Column(
        db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    owner = db.relationship("User", back_populates="tasks")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "completed": bool(self.completed),
            "userId": self.user_id,
            "createdAt": to_utc_iso(self.created_at),
            "updatedAt": to_utc_iso(self.updated_at),
        }

    def __repr__(self) -> str:
        return f"<Task {self.id}: {self.title}>"
