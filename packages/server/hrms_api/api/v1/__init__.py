"""
API Router

Mounted under /api. Everything except register and login requires a bearer token.
"""

from fastapi import APIRouter
from hrms_shared.schemas.common import ErrorResponse
from . import auth, employees, teams

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Validation failed or conflict"},
    401: {"model": ErrorResponse, "description": "Missing, invalid or revoked token"},
    404: {"model": ErrorResponse, "description": "Not found in the caller's organisation"},
}

router = APIRouter(responses=ERROR_RESPONSES)

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(employees.router, prefix="/employees", tags=["Employees"])
router.include_router(teams.router, prefix="/teams", tags=["Teams"])
