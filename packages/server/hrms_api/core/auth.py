"""
Authentication for the HRMS API.

- Password hashing (bcrypt)
- Signed, time-limited identity tokens (JWT) carrying user, organisation and email
- Optional Redis revocation list, consulted only when logout revocation is enabled
- The access guard dependency that resolves the caller's identity for every
  protected route
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

import bcrypt
import jwt
import structlog
from fastapi import Depends
from fastapi.security import APIKeyHeader

from hrms_api.core.config import get_settings
from hrms_api.core.errors import Unauthenticated
from hrms_api.core.redis import get_redis

log = structlog.get_logger()
settings = get_settings()

bearer_header = APIKeyHeader(name="Authorization", auto_error=False)

REVOKED_KEY_PREFIX = "jwt:revoked:"

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

def hash_password(password: str) -> str:
    """Hash a password using bcrypt with cost factor 12."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=12)).decode()


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode(), hashed.encode())
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

class InvalidToken(Exception):
    """Signature mismatch, malformed payload or expired token."""


@dataclass(frozen=True)
class Identity:
    """Verified caller identity. The organisation id is the only tenant scope."""

    user_id: uuid.UUID
    organisation_id: uuid.UUID
    email: str
    jti: Optional[str] = None
    expires_at: Optional[datetime] = None


class TokenService:
    """Issues and verifies signed identity tokens.

    The signing secret is handed in once at construction and never read from
    the environment afterwards.
    """

    def __init__(self, secret_key: str, *, algorithm: str = "HS256", expire_minutes: int = 60):
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    def issue(
        self,
        user_id: uuid.UUID,
        organisation_id: uuid.UUID,
        email: str,
        *,
        expires_delta: timedelta | None = None,
    ) -> tuple[str, str]:
        """Create a signed token. Returns (token, jti)."""
        jti = str(uuid.uuid4())
        now = datetime.now(timezone.utc)
        exp = now + (expires_delta or timedelta(minutes=self._expire_minutes))
        payload = {
            "sub": str(user_id),
            "org": str(organisation_id),
            "email": email,
            "iat": now,
            "exp": exp,
            "jti": jti,
        }
        token = jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
        return token, jti

    def verify(self, token: str) -> Identity:
        """Decode and verify a token. Raises InvalidToken on any failure."""
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": ["sub", "org", "email", "exp"]},
            )
        except jwt.PyJWTError as exc:
            raise InvalidToken(str(exc)) from exc

        try:
            return Identity(
                user_id=uuid.UUID(payload["sub"]),
                organisation_id=uuid.UUID(payload["org"]),
                email=str(payload["email"]),
                jti=payload.get("jti"),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise InvalidToken("Malformed token payload") from exc


@lru_cache
def get_token_service() -> TokenService:
    return TokenService(
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.jwt_expire_minutes,
    )


# ---------------------------------------------------------------------------
# Revocation (Redis)
# ---------------------------------------------------------------------------

async def revoke_token(identity: Identity) -> None:
    """Put a token's jti on the revocation list until it would have expired."""
    if not identity.jti:
        return
    ttl_seconds = 1
    if identity.expires_at is not None:
        remaining = identity.expires_at - datetime.now(timezone.utc)
        ttl_seconds = max(int(remaining.total_seconds()), 1)
    redis = await get_redis()
    await redis.setex(f"{REVOKED_KEY_PREFIX}{identity.jti}", ttl_seconds, "1")


async def is_token_revoked(jti: str) -> bool:
    redis = await get_redis()
    return await redis.exists(f"{REVOKED_KEY_PREFIX}{jti}") > 0


# ---------------------------------------------------------------------------
# Access guard
# ---------------------------------------------------------------------------

async def get_identity(
    authorization: Optional[str] = Depends(bearer_header),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    """Resolve the caller from the bearer token or reject the request."""
    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthenticated("Authentication required")

    token = authorization[7:].strip()
    try:
        identity = tokens.verify(token)
    except InvalidToken as exc:
        log.info("auth.invalid_token", reason=str(exc))
        raise Unauthenticated("Invalid or expired token")

    if settings.revoke_on_logout and identity.jti and await is_token_revoked(identity.jti):
        raise Unauthenticated("Token has been revoked")

    return identity
