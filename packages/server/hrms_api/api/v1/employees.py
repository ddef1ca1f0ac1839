"""
Employee endpoints. Every route requires a token and is scoped to its organisation.
"""

from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hrms_api.core.auth import Identity, get_identity
from hrms_api.core.database import get_session
from hrms_api.services import employees as employee_service
from hrms_shared.schemas.common import MessageResponse
from hrms_shared.schemas.employees import (
    EmployeeCreate,
    EmployeeDetail,
    EmployeeListItem,
    EmployeeRead,
    EmployeeUpdate,
)

router = APIRouter()


@router.get("", response_model=List[EmployeeListItem])
async def list_employees(
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    """List the organisation's employees, newest first, with their teams."""
    return await employee_service.list_employees(session, identity)


@router.get("/{employee_id}", response_model=EmployeeDetail)
async def get_employee(
    employee_id: uuid.UUID,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    return await employee_service.get_employee(session, identity, employee_id)


@router.post("", response_model=EmployeeRead, status_code=201)
async def create_employee(
    body: EmployeeCreate,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    return await employee_service.create_employee(session, identity, body)


@router.put("/{employee_id}", response_model=EmployeeRead)
async def update_employee(
    employee_id: uuid.UUID,
    body: EmployeeUpdate,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    return await employee_service.update_employee(session, identity, employee_id, body)


@router.delete("/{employee_id}", response_model=MessageResponse)
async def delete_employee(
    employee_id: uuid.UUID,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    await employee_service.delete_employee(session, identity, employee_id)
    return MessageResponse(message="Employee deleted successfully")
