"""Redis client for the token revocation list.

The client is created on first use, so a deployment that leaves logout
revocation off never opens a Redis connection.
"""

from __future__ import annotations

import redis.asyncio as redis

from hrms_api.core.config import get_settings

settings = get_settings()

_client: redis.Redis | None = None


async def get_redis() -> redis.Redis:
    global _client
    if _client is None:
        _client = redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_timeout=settings.redis_timeout_seconds,
            socket_connect_timeout=settings.redis_timeout_seconds,
        )
    return _client


async def close_redis() -> None:
    """Release the client at shutdown; a no-op if it was never created."""
    global _client
    client, _client = _client, None
    if client is not None:
        await client.aclose()
