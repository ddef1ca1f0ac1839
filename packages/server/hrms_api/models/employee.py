"""Employee directory record (not a login identity)."""

from typing import Optional
import uuid

from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class Employee(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "employees"

    organisation_id: uuid.UUID = Field(
        foreign_key="organisations.id", ondelete="CASCADE", nullable=False, index=True
    )
    first_name: str = Field(nullable=False)
    last_name: str = Field(nullable=False)
    email: str = Field(nullable=False)
    phone: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
