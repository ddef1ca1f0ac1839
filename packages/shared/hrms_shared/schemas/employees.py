from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class EmployeeCreate(BaseModel):
    """What clients send. The organisation always comes from the token."""

    model_config = ConfigDict(extra="forbid")

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class EmployeeUpdate(BaseModel):
    """Partial update; only supplied fields are considered."""

    model_config = ConfigDict(extra="forbid")

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class TeamRef(BaseModel):
    id: uuid.UUID
    name: str


class EmployeeTeamRead(TeamRef):
    description: Optional[str] = None
    assigned_at: datetime


class EmployeeBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    organisation_id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class EmployeeRead(EmployeeBase):
    pass


class EmployeeListItem(EmployeeBase):
    teams: List[TeamRef] = []


class EmployeeDetail(EmployeeBase):
    teams: List[EmployeeTeamRead] = []
