"""
Database engine and per-request sessions.

One async engine per process; each request gets its own ``AsyncSession``
that is committed when the handler returns and rolled back if it raises.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from hrms_api.core.config import get_settings

settings = get_settings()


def _engine_options(database_url: str) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": settings.debug}
    if make_url(database_url).get_backend_name() != "sqlite":
        # SQLite (tests, local runs) keeps SQLAlchemy's default pool
        options.update(pool_size=settings.database_pool_size, pool_pre_ping=True)
    return options


engine = create_async_engine(settings.database_url, **_engine_options(settings.database_url))

async_session_factory = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db() -> None:
    """Create any missing tables. Deployed databases are managed by Alembic."""
    import hrms_api.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def dispose_engine() -> None:
    await engine.dispose()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
