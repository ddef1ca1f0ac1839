"""Registration and login schemas.

Request fields are optional at the schema level: presence is a business rule
checked by the auth service so that a missing field produces the same
message the client has always received.
"""

from __future__ import annotations

import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, validate_email


class RegisterRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    org_name: Optional[str] = Field(default=None, alias="orgName")
    admin_name: Optional[str] = Field(default=None, alias="adminName")
    email: Optional[str] = None
    password: Optional[str] = None

    @field_validator("email")
    @classmethod
    def _check_email_format(cls, v: Optional[str]) -> Optional[str]:
        # "" is reported as a missing field, not as a malformed address.
        # The address is stored as typed so login can match it exactly.
        if not v:
            return None
        validate_email(v)
        return v


class LoginRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: Optional[str] = None
    password: Optional[str] = None


class AuthUser(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID
    name: str
    email: str
    organisation_id: uuid.UUID = Field(alias="organisationId")
    organisation_name: str = Field(alias="organisationName")


class AuthResponse(BaseModel):
    message: str
    token: str
    user: AuthUser
