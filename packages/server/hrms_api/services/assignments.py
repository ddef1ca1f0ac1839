"""
Team membership: assigning employees to teams and removing them.

Both sides of an assignment must belong to the caller's organisation. The
team is resolved first, so an unknown team wins over an unknown employee.
"""

from __future__ import annotations

import uuid
from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from hrms_api.core.auth import Identity
from hrms_api.core.errors import Conflict, NotFound, ValidationFailed, is_unique_violation
from hrms_api.models.employee import Employee
from hrms_api.models.employee_team import EmployeeTeam
from hrms_api.services import audit
from hrms_api.services.teams import get_team_or_404
from hrms_shared.schemas.common import AuditAction

log = structlog.get_logger()

ALREADY_ASSIGNED = "Employee already assigned to this team"


async def _find_assignment(
    session: AsyncSession, team_id: uuid.UUID, employee_id: uuid.UUID
) -> Optional[EmployeeTeam]:
    result = await session.execute(
        select(EmployeeTeam).where(
            EmployeeTeam.team_id == team_id,
            EmployeeTeam.employee_id == employee_id,
        )
    )
    return result.scalar_one_or_none()


async def assign(
    session: AsyncSession,
    identity: Identity,
    team_id: uuid.UUID,
    employee_id: Optional[uuid.UUID],
) -> EmployeeTeam:
    if employee_id is None:
        raise ValidationFailed("Employee ID is required")

    team = await get_team_or_404(session, identity, team_id)

    result = await session.execute(
        select(Employee).where(
            Employee.id == employee_id,
            Employee.organisation_id == identity.organisation_id,
        )
    )
    employee = result.scalar_one_or_none()
    if not employee:
        raise NotFound("Employee not found")

    if await _find_assignment(session, team.id, employee.id):
        raise Conflict(ALREADY_ASSIGNED)

    assignment = EmployeeTeam(employee_id=employee.id, team_id=team.id)
    session.add(assignment)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        if not is_unique_violation(exc):
            raise
        # A concurrent request inserted the same pair first
        raise Conflict(ALREADY_ASSIGNED)

    log.info("team.member_added", team_id=str(team.id), employee_id=str(employee.id))
    await audit.record_for(
        session,
        identity,
        AuditAction.EMPLOYEE_ASSIGNED_TO_TEAM,
        {
            "employeeId": employee.id,
            "teamId": team.id,
            "employeeName": employee.full_name,
            "teamName": team.name,
        },
    )
    return assignment


async def unassign(
    session: AsyncSession,
    identity: Identity,
    team_id: uuid.UUID,
    employee_id: Optional[uuid.UUID],
) -> None:
    if employee_id is None:
        raise ValidationFailed("Employee ID is required")

    team = await get_team_or_404(session, identity, team_id)

    assignment = await _find_assignment(session, team.id, employee_id)
    if not assignment:
        raise NotFound("Employee not assigned to this team")

    await session.delete(assignment)
    await session.commit()

    log.info("team.member_removed", team_id=str(team.id), employee_id=str(employee_id))
    await audit.record_for(
        session,
        identity,
        AuditAction.EMPLOYEE_UNASSIGNED_FROM_TEAM,
        {"employeeId": employee_id, "teamId": team.id},
    )
