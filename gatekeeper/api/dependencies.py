"""FastAPI dependency injection: DB session, event and admin repositories, metrics."""

from typing import Annotated, AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gatekeeper.infrastructure.database.admin_repository_db import DbDoorRepository, DbUserRepository
from gatekeeper.infrastructure.database.event_repository_db import DbAccessEventRepository
from gatekeeper.infrastructure.database.session import get_db
from gatekeeper.observability.metrics import MetricsCollector

_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Return singleton metrics collector (shared with the gateway)."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


async def get_session() -> AsyncIterator[AsyncSession]:
    async for session in get_db():
        yield session


def get_event_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DbAccessEventRepository:
    return DbAccessEventRepository(session)


def get_user_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DbUserRepository:
    return DbUserRepository(session)


def get_door_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DbDoorRepository:
    return DbDoorRepository(session)
