from enum import Enum

from pydantic import BaseModel


class AuditAction(str, Enum):
    """Closed vocabulary of audit log actions."""

    ORGANISATION_CREATED = "organisation_created"
    USER_LOGIN = "user_login"
    USER_LOGOUT = "user_logout"
    EMPLOYEE_CREATED = "employee_created"
    EMPLOYEE_UPDATED = "employee_updated"
    EMPLOYEE_DELETED = "employee_deleted"
    TEAM_CREATED = "team_created"
    TEAM_UPDATED = "team_updated"
    TEAM_DELETED = "team_deleted"
    EMPLOYEE_ASSIGNED_TO_TEAM = "employee_assigned_to_team"
    EMPLOYEE_UNASSIGNED_FROM_TEAM = "employee_unassigned_from_team"


class MessageResponse(BaseModel):
    message: str


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    message: str
    errors: list[FieldError] | None = None
