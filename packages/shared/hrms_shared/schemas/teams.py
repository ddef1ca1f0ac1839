from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TeamCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    description: Optional[str] = None


class TeamUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    description: Optional[str] = None


class AssignmentRequest(BaseModel):
    """Body of assign/unassign. Presence of the id is checked by the service."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    employee_id: Optional[uuid.UUID] = Field(default=None, alias="employeeId")


class EmployeeRef(BaseModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str


class TeamMemberRead(EmployeeRef):
    phone: Optional[str] = None
    assigned_at: datetime


class TeamBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    organisation_id: uuid.UUID
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TeamRead(TeamBase):
    pass


class TeamListItem(TeamBase):
    employees: List[EmployeeRef] = []


class TeamDetail(TeamBase):
    employees: List[TeamMemberRead] = []
