"""
Audit logger: append-only record of every state-changing action.

``record`` is the single entry point. It runs after the primary mutation has
been committed and commits the audit row on its own, so a failed audit write
is rolled back and logged without undoing the change it describes.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Any, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from hrms_api.core.auth import Identity
from hrms_api.models.log import Log
from hrms_shared.schemas.common import AuditAction

log = structlog.get_logger()

MAX_LOGS = 100


def _json_safe(value: Any) -> Any:
    """Convert UUIDs and datetimes (recursively) so meta can be stored as JSON."""
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


async def record(
    session: AsyncSession,
    organisation_id: Optional[uuid.UUID],
    user_id: Optional[uuid.UUID],
    action: AuditAction,
    meta: dict[str, Any],
) -> Optional[Log]:
    """Append one audit row. Returns None if the write failed.

    The row is written through its own session on the caller's engine so a
    rollback here never expires or undoes the caller's objects.
    """
    entry = Log(
        organisation_id=organisation_id,
        user_id=user_id,
        action=action.value,
        meta=_json_safe(meta),
    )
    async with AsyncSession(session.bind, expire_on_commit=False) as audit_session:
        audit_session.add(entry)
        try:
            await audit_session.commit()
        except SQLAlchemyError:
            await audit_session.rollback()
            log.error(
                "audit.write_failed",
                action=action.value,
                organisation_id=str(organisation_id) if organisation_id else None,
                exc_info=True,
            )
            return None
    log.debug("audit.recorded", action=action.value)
    return entry


async def record_for(
    session: AsyncSession,
    identity: Identity,
    action: AuditAction,
    meta: dict[str, Any],
) -> Optional[Log]:
    """Shorthand for actions performed by an authenticated caller."""
    return await record(session, identity.organisation_id, identity.user_id, action, meta)


async def list_logs(
    session: AsyncSession,
    identity: Identity,
    *,
    limit: int = MAX_LOGS,
) -> list[Log]:
    """The caller's organisation's audit trail, newest first."""
    stmt = (
        select(Log)
        .where(Log.organisation_id == identity.organisation_id)
        .order_by(Log.timestamp.desc())
        .limit(min(limit, MAX_LOGS))
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())
