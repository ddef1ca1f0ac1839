"""Audit log model (append-only, never updated or deleted)."""

from datetime import datetime
from typing import Optional
import uuid

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from .base import UUIDMixin, _utcnow


class Log(UUIDMixin, SQLModel, table=True):
    __tablename__ = "logs"
    __table_args__ = (
        sa.Index("ix_logs_org_timestamp", "organisation_id", "timestamp"),
    )

    # Plain columns, not foreign keys: audit rows outlive what they describe.
    organisation_id: Optional[uuid.UUID] = Field(default=None, nullable=True)
    user_id: Optional[uuid.UUID] = Field(default=None, nullable=True)
    action: str = Field(nullable=False, max_length=255)  # AuditAction value
    meta: dict = Field(
        default_factory=dict,
        sa_type=sa.JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        nullable=False,
        sa_column_kwargs={"server_default": sa.func.now()},
        sa_type=sa.DateTime(timezone=True),
    )
