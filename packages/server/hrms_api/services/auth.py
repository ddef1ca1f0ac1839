"""
Registration, login and logout.

Registration is the only place an Organisation is created. Login looks users
up system-wide (the caller has no tenant yet) and fails identically for an
unknown email and a wrong password.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from hrms_api.core.auth import (
    Identity,
    TokenService,
    hash_password,
    revoke_token,
    verify_password,
)
from hrms_api.core.config import get_settings
from hrms_api.core.errors import (
    Conflict,
    InvalidCredentials,
    ValidationFailed,
    is_unique_violation,
)
from hrms_api.models.organisation import Organisation
from hrms_api.models.user import User
from hrms_api.services import audit
from hrms_shared.schemas.auth import LoginRequest, RegisterRequest
from hrms_shared.schemas.common import AuditAction

log = structlog.get_logger()
settings = get_settings()

MIN_PASSWORD_LENGTH = 6

# Used when the email is unknown so both login failure paths cost a bcrypt check.
_DUMMY_HASH = hash_password("not-a-real-password")


@dataclass
class AuthResult:
    token: str
    user: User
    organisation: Organisation


async def register(
    body: RegisterRequest,
    tokens: TokenService,
    session: AsyncSession,
) -> AuthResult:
    """Create an organisation and its first administrator, then sign them in."""
    if not (body.org_name and body.admin_name and body.email and body.password):
        raise ValidationFailed("All fields are required")

    if len(body.password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )

    email = str(body.email)
    result = await session.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        raise Conflict("Email already registered")

    organisation = Organisation(name=body.org_name)
    session.add(organisation)
    await session.flush()

    user = User(
        organisation_id=organisation.id,
        email=email,
        password_hash=hash_password(body.password),
        name=body.admin_name,
    )
    session.add(user)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        if not is_unique_violation(exc):
            raise
        # Lost a race with a concurrent registration for the same email
        raise Conflict("Email already registered")

    log.info("auth.registered", user_id=str(user.id), organisation_id=str(organisation.id))
    await audit.record(
        session,
        organisation.id,
        user.id,
        AuditAction.ORGANISATION_CREATED,
        {"orgName": body.org_name, "adminName": body.admin_name, "email": email},
    )

    token, _jti = tokens.issue(user.id, organisation.id, user.email)
    return AuthResult(token=token, user=user, organisation=organisation)


async def login(
    body: LoginRequest,
    tokens: TokenService,
    session: AsyncSession,
) -> AuthResult:
    """Authenticate with email/password and issue a token."""
    if not (body.email and body.password):
        raise ValidationFailed("Email and password are required")

    result = await session.execute(
        select(User, Organisation)
        .join(Organisation, Organisation.id == User.organisation_id)
        .where(User.email == body.email)
    )
    row = result.one_or_none()

    if row is None:
        verify_password(body.password, _DUMMY_HASH)
        log.warning("auth.login_failure", reason="unknown_email")
        raise InvalidCredentials()

    user, organisation = row
    if not verify_password(body.password, user.password_hash):
        log.warning("auth.login_failure", user_id=str(user.id), reason="bad_password")
        raise InvalidCredentials()

    await audit.record(
        session,
        user.organisation_id,
        user.id,
        AuditAction.USER_LOGIN,
        {"email": user.email},
    )

    token, _jti = tokens.issue(user.id, organisation.id, user.email)
    log.info("auth.login_success", user_id=str(user.id))
    return AuthResult(token=token, user=user, organisation=organisation)


async def logout(identity: Identity, session: AsyncSession) -> None:
    """Record the logout.

    The token itself stays valid until it expires unless revocation on logout
    is switched on, in which case its jti goes on the revocation list.
    """
    await audit.record_for(
        session, identity, AuditAction.USER_LOGOUT, {"email": identity.email}
    )
    if settings.revoke_on_logout:
        await revoke_token(identity)
    log.info("auth.logout", user_id=str(identity.user_id), revoked=settings.revoke_on_logout)
