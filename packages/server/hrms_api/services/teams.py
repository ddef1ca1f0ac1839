"""
Team service: tenant-scoped CRUD over an organisation's teams.
"""

from __future__ import annotations

import uuid
from collections import defaultdict

import structlog
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from hrms_api.core.auth import Identity
from hrms_api.core.errors import NotFound, ValidationFailed
from hrms_api.models.employee import Employee
from hrms_api.models.employee_team import EmployeeTeam
from hrms_api.models.team import Team
from hrms_api.services import audit
from hrms_shared.schemas.common import AuditAction
from hrms_shared.schemas.teams import TeamCreate, TeamUpdate

log = structlog.get_logger()


def _team_dict(team: Team) -> dict:
    return {
        "id": team.id,
        "organisation_id": team.organisation_id,
        "name": team.name,
        "description": team.description,
        "created_at": team.created_at,
        "updated_at": team.updated_at,
    }


async def get_team_or_404(
    session: AsyncSession, identity: Identity, team_id: uuid.UUID
) -> Team:
    result = await session.execute(
        select(Team).where(
            Team.id == team_id,
            Team.organisation_id == identity.organisation_id,
        )
    )
    team = result.scalar_one_or_none()
    if not team:
        raise NotFound("Team not found")
    return team


async def list_teams(session: AsyncSession, identity: Identity) -> list[dict]:
    """All teams of the caller's organisation, newest first, with their members."""
    result = await session.execute(
        select(Team)
        .where(Team.organisation_id == identity.organisation_id)
        .order_by(Team.created_at.desc())
    )
    teams = list(result.scalars().all())
    if not teams:
        return []

    members = await session.execute(
        select(
            EmployeeTeam.team_id,
            Employee.id,
            Employee.first_name,
            Employee.last_name,
            Employee.email,
        )
        .join(Employee, Employee.id == EmployeeTeam.employee_id)
        .where(EmployeeTeam.team_id.in_([t.id for t in teams]))
        .order_by(EmployeeTeam.assigned_at)
    )
    employees_by_team: dict[uuid.UUID, list[dict]] = defaultdict(list)
    for team_id, employee_id, first_name, last_name, email in members:
        employees_by_team[team_id].append(
            {
                "id": employee_id,
                "first_name": first_name,
                "last_name": last_name,
                "email": email,
            }
        )

    results = []
    for t in teams:
        d = _team_dict(t)
        d["employees"] = employees_by_team.get(t.id, [])
        results.append(d)
    return results


async def get_team(
    session: AsyncSession, identity: Identity, team_id: uuid.UUID
) -> dict:
    team = await get_team_or_404(session, identity, team_id)

    members = await session.execute(
        select(
            Employee.id,
            Employee.first_name,
            Employee.last_name,
            Employee.email,
            Employee.phone,
            EmployeeTeam.assigned_at,
        )
        .join(EmployeeTeam, EmployeeTeam.employee_id == Employee.id)
        .where(EmployeeTeam.team_id == team.id)
        .order_by(EmployeeTeam.assigned_at)
    )
    d = _team_dict(team)
    d["employees"] = [dict(row._mapping) for row in members]
    return d


async def create_team(
    session: AsyncSession, identity: Identity, body: TeamCreate
) -> Team:
    if not body.name:
        raise ValidationFailed("Team name is required")

    team = Team(
        organisation_id=identity.organisation_id,
        name=body.name,
        description=body.description,
    )
    session.add(team)
    await session.commit()

    log.info("team.created", team_id=str(team.id))
    await audit.record_for(
        session,
        identity,
        AuditAction.TEAM_CREATED,
        {"teamId": team.id, "name": team.name, "description": team.description},
    )
    return team


async def update_team(
    session: AsyncSession,
    identity: Identity,
    team_id: uuid.UUID,
    body: TeamUpdate,
) -> Team:
    """An empty name keeps the current one; a supplied description always wins."""
    team = await get_team_or_404(session, identity, team_id)

    team.name = body.name or team.name
    if "description" in body.model_fields_set:
        team.description = body.description
    session.add(team)
    await session.commit()

    log.info("team.updated", team_id=str(team.id))
    await audit.record_for(
        session,
        identity,
        AuditAction.TEAM_UPDATED,
        {
            "teamId": team.id,
            "updates": {"name": body.name, "description": body.description},
        },
    )
    return team


async def delete_team(
    session: AsyncSession, identity: Identity, team_id: uuid.UUID
) -> None:
    """Remove a team and its memberships. The employees themselves stay."""
    team = await get_team_or_404(session, identity, team_id)
    snapshot = team.model_dump(mode="json")

    await session.execute(delete(EmployeeTeam).where(EmployeeTeam.team_id == team.id))
    result = await session.execute(
        delete(Team).where(
            Team.id == team.id,
            Team.organisation_id == identity.organisation_id,
        )
    )
    if result.rowcount == 0:
        # Deleted by a concurrent request after it was loaded
        await session.rollback()
        raise NotFound("Team not found")
    await session.commit()

    log.info("team.deleted", team_id=str(team_id))
    await audit.record_for(
        session,
        identity,
        AuditAction.TEAM_DELETED,
        {"teamId": team_id, **snapshot},
    )
