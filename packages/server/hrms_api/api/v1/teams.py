"""
Team endpoints: CRUD, membership and the organisation's audit trail.

``/logs`` is declared before ``/{team_id}`` so it is not parsed as a team id.
"""

from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hrms_api.core.auth import Identity, get_identity
from hrms_api.core.database import get_session
from hrms_api.services import assignments as assignment_service
from hrms_api.services import audit
from hrms_api.services import teams as team_service
from hrms_shared.schemas.common import MessageResponse
from hrms_shared.schemas.logs import LogRead
from hrms_shared.schemas.teams import (
    AssignmentRequest,
    TeamCreate,
    TeamDetail,
    TeamListItem,
    TeamRead,
    TeamUpdate,
)

router = APIRouter()


@router.get("", response_model=List[TeamListItem])
async def list_teams(
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    """List the organisation's teams, newest first, with their members."""
    return await team_service.list_teams(session, identity)


@router.get("/logs", response_model=List[LogRead])
async def list_logs(
    limit: int = Query(audit.MAX_LOGS, ge=1, le=audit.MAX_LOGS),
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    """Most recent audit entries for the organisation, newest first."""
    return await audit.list_logs(session, identity, limit=limit)


@router.get("/{team_id}", response_model=TeamDetail)
async def get_team(
    team_id: uuid.UUID,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    return await team_service.get_team(session, identity, team_id)


@router.post("", response_model=TeamRead, status_code=201)
async def create_team(
    body: TeamCreate,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    return await team_service.create_team(session, identity, body)


@router.put("/{team_id}", response_model=TeamRead)
async def update_team(
    team_id: uuid.UUID,
    body: TeamUpdate,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    return await team_service.update_team(session, identity, team_id, body)


@router.delete("/{team_id}", response_model=MessageResponse)
async def delete_team(
    team_id: uuid.UUID,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    await team_service.delete_team(session, identity, team_id)
    return MessageResponse(message="Team deleted successfully")


# ---------------------------------------------------------------------------
# Membership
# ---------------------------------------------------------------------------


@router.post("/{team_id}/assign", response_model=MessageResponse)
async def assign_employee(
    team_id: uuid.UUID,
    body: AssignmentRequest,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    await assignment_service.assign(session, identity, team_id, body.employee_id)
    return MessageResponse(message="Employee assigned to team successfully")


@router.post("/{team_id}/unassign", response_model=MessageResponse)
async def unassign_employee(
    team_id: uuid.UUID,
    body: AssignmentRequest,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    await assignment_service.unassign(session, identity, team_id, body.employee_id)
    return MessageResponse(message="Employee unassigned from team successfully")
