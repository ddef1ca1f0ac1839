"""User model: an organisation administrator who can log in."""

from datetime import datetime
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import UUIDMixin, _utcnow


class User(UUIDMixin, SQLModel, table=True):
    __tablename__ = "users"

    organisation_id: uuid.UUID = Field(
        foreign_key="organisations.id", ondelete="CASCADE", nullable=False, index=True
    )
    email: str = Field(unique=True, index=True, nullable=False)  # unique system-wide
    password_hash: str = Field(nullable=False)  # bcrypt
    name: str = Field(nullable=False)
    created_at: datetime = Field(
        default_factory=_utcnow,
        nullable=False,
        sa_column_kwargs={"server_default": sa.func.now()},
        sa_type=sa.DateTime(timezone=True),
    )
