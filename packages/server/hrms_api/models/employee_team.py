"""Employee <-> Team association entity."""

from datetime import datetime
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import UUIDMixin, _utcnow


class EmployeeTeam(UUIDMixin, SQLModel, table=True):
    __tablename__ = "employee_teams"
    __table_args__ = (
        sa.UniqueConstraint("employee_id", "team_id", name="uq_employee_teams_employee_team"),
    )

    employee_id: uuid.UUID = Field(
        foreign_key="employees.id", ondelete="CASCADE", nullable=False, index=True
    )
    team_id: uuid.UUID = Field(
        foreign_key="teams.id", ondelete="CASCADE", nullable=False, index=True
    )
    assigned_at: datetime = Field(
        default_factory=_utcnow,
        nullable=False,
        sa_column_kwargs={"server_default": sa.func.now()},
        sa_type=sa.DateTime(timezone=True),
    )
