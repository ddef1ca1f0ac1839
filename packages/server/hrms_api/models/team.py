"""Team model."""

from typing import Optional
import uuid

from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class Team(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "teams"

    organisation_id: uuid.UUID = Field(
        foreign_key="organisations.id", ondelete="CASCADE", nullable=False, index=True
    )
    name: str = Field(nullable=False)
    description: Optional[str] = None
