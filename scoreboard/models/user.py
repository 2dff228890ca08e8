"""Database model for registered players."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class User(SQLModel, table=True):
    """Player account authenticated by email and password."""

    id: Optional[int] = ORMField(default=None, primary_key=True)
    username: str = ORMField(index=True, unique=True)
    email: str = ORMField(index=True, unique=True)
    password_hash: str
    role: str = ORMField(default="user")
    created_at: datetime = ORMField(default_factory=utcnow)
    updated_at: datetime = ORMField(default_factory=utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


__all__ = ["User"]
