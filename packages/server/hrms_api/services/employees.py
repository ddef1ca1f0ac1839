"""
Employee service: tenant-scoped CRUD over an organisation's staff records.

Every query filters on the caller's organisation, so a record belonging to
another tenant is indistinguishable from one that does not exist.
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
from hrms_shared.schemas.employees import EmployeeCreate, EmployeeUpdate

log = structlog.get_logger()


def _employee_dict(employee: Employee) -> dict:
    return {
        "id": employee.id,
        "organisation_id": employee.organisation_id,
        "first_name": employee.first_name,
        "last_name": employee.last_name,
        "email": employee.email,
        "phone": employee.phone,
        "created_at": employee.created_at,
        "updated_at": employee.updated_at,
    }


async def _get_employee_or_404(
    session: AsyncSession, identity: Identity, employee_id: uuid.UUID
) -> Employee:
    result = await session.execute(
        select(Employee).where(
            Employee.id == employee_id,
            Employee.organisation_id == identity.organisation_id,
        )
    )
    employee = result.scalar_one_or_none()
    if not employee:
        raise NotFound("Employee not found")
    return employee


async def list_employees(session: AsyncSession, identity: Identity) -> list[dict]:
    """All employees of the caller's organisation, newest first, with their teams."""
    result = await session.execute(
        select(Employee)
        .where(Employee.organisation_id == identity.organisation_id)
        .order_by(Employee.created_at.desc())
    )
    employees = list(result.scalars().all())
    if not employees:
        return []

    memberships = await session.execute(
        select(EmployeeTeam.employee_id, Team.id, Team.name)
        .join(Team, Team.id == EmployeeTeam.team_id)
        .where(EmployeeTeam.employee_id.in_([e.id for e in employees]))
        .order_by(EmployeeTeam.assigned_at)
    )
    teams_by_employee: dict[uuid.UUID, list[dict]] = defaultdict(list)
    for employee_id, team_id, team_name in memberships:
        teams_by_employee[employee_id].append({"id": team_id, "name": team_name})

    results = []
    for e in employees:
        d = _employee_dict(e)
        d["teams"] = teams_by_employee.get(e.id, [])
        results.append(d)
    return results


async def get_employee(
    session: AsyncSession, identity: Identity, employee_id: uuid.UUID
) -> dict:
    """One employee with the teams it belongs to and when it joined them."""
    employee = await _get_employee_or_404(session, identity, employee_id)

    memberships = await session.execute(
        select(Team.id, Team.name, Team.description, EmployeeTeam.assigned_at)
        .join(EmployeeTeam, EmployeeTeam.team_id == Team.id)
        .where(EmployeeTeam.employee_id == employee.id)
        .order_by(EmployeeTeam.assigned_at)
    )
    d = _employee_dict(employee)
    d["teams"] = [
        {
            "id": team_id,
            "name": name,
            "description": description,
            "assigned_at": assigned_at,
        }
        for team_id, name, description, assigned_at in memberships
    ]
    return d


async def create_employee(
    session: AsyncSession, identity: Identity, body: EmployeeCreate
) -> Employee:
    if not (body.first_name and body.last_name and body.email):
        raise ValidationFailed("First name, last name, and email are required")

    employee = Employee(
        organisation_id=identity.organisation_id,
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        phone=body.phone,
    )
    session.add(employee)
    await session.commit()

    log.info("employee.created", employee_id=str(employee.id))
    await audit.record_for(
        session,
        identity,
        AuditAction.EMPLOYEE_CREATED,
        {
            "employeeId": employee.id,
            "first_name": employee.first_name,
            "last_name": employee.last_name,
            "email": employee.email,
        },
    )
    return employee


async def update_employee(
    session: AsyncSession,
    identity: Identity,
    employee_id: uuid.UUID,
    body: EmployeeUpdate,
) -> Employee:
    """Apply a partial update.

    Omitted or empty name/email fields keep their current value. ``phone`` is
    written whenever the client sent it, so it can be cleared with null.
    """
    employee = await _get_employee_or_404(session, identity, employee_id)

    employee.first_name = body.first_name or employee.first_name
    employee.last_name = body.last_name or employee.last_name
    employee.email = body.email or employee.email
    if "phone" in body.model_fields_set:
        employee.phone = body.phone
    session.add(employee)
    await session.commit()

    log.info("employee.updated", employee_id=str(employee.id))
    await audit.record_for(
        session,
        identity,
        AuditAction.EMPLOYEE_UPDATED,
        {
            "employeeId": employee.id,
            "updates": {
                "first_name": body.first_name,
                "last_name": body.last_name,
                "email": body.email,
                "phone": body.phone,
            },
        },
    )
    return employee


async def delete_employee(
    session: AsyncSession, identity: Identity, employee_id: uuid.UUID
) -> None:
    """Remove an employee and all of its team memberships."""
    employee = await _get_employee_or_404(session, identity, employee_id)
    snapshot = employee.model_dump(mode="json")

    await session.execute(
        delete(EmployeeTeam).where(EmployeeTeam.employee_id == employee.id)
    )
    result = await session.execute(
        delete(Employee).where(
            Employee.id == employee.id,
            Employee.organisation_id == identity.organisation_id,
        )
    )
    if result.rowcount == 0:
        # Deleted by a concurrent request after it was loaded
        await session.rollback()
        raise NotFound("Employee not found")
    await session.commit()

    log.info("employee.deleted", employee_id=str(employee_id))
    await audit.record_for(
        session,
        identity,
        AuditAction.EMPLOYEE_DELETED,
        {"employeeId": employee_id, **snapshot},
    )
