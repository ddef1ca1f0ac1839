"""
Authentication endpoints.

- Registration creates an organisation together with its first admin user
- Email/password login
- Logout (advisory unless revocation on logout is enabled)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hrms_api.core.auth import Identity, TokenService, get_identity, get_token_service
from hrms_api.core.database import get_session
from hrms_api.services import auth as auth_service
from hrms_api.services.auth import AuthResult
from hrms_shared.schemas.auth import AuthResponse, AuthUser, LoginRequest, RegisterRequest
from hrms_shared.schemas.common import MessageResponse

router = APIRouter()


def _auth_response(message: str, result: AuthResult) -> AuthResponse:
    return AuthResponse(
        message=message,
        token=result.token,
        user=AuthUser(
            id=result.user.id,
            name=result.user.name,
            email=result.user.email,
            organisation_id=result.organisation.id,
            organisation_name=result.organisation.name,
        ),
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    body: RegisterRequest,
    tokens: TokenService = Depends(get_token_service),
    session: AsyncSession = Depends(get_session),
):
    """Create an organisation and its administrator; returns a token."""
    result = await auth_service.register(body, tokens, session)
    return _auth_response("Organisation created successfully", result)


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    tokens: TokenService = Depends(get_token_service),
    session: AsyncSession = Depends(get_session),
):
    result = await auth_service.login(body, tokens, session)
    return _auth_response("Login successful", result)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    await auth_service.logout(identity, session)
    return MessageResponse(message="Logout successful")
