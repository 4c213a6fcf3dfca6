"""DB-backed read side of the audit trail (events table) for the admin API."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gatekeeper.infrastructure.database.models import AccessEventRecord


class DbAccessEventRepository:
    """Read-only queries over persisted access events. Newest first."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_events(
        self,
        *,
        limit: int,
        result: Optional[str] = None,
        credential_type: Optional[str] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> List[AccessEventRecord]:
        """Return at most `limit` events matching every filter given."""
        stmt = select(AccessEventRecord)
        if result:
            stmt = stmt.where(AccessEventRecord.result == result)
        if credential_type:
            stmt = stmt.where(AccessEventRecord.credential_type == credential_type)
        if since:
            stmt = stmt.where(AccessEventRecord.ts >= since)
        if until:
            stmt = stmt.where(AccessEventRecord.ts <= until)
        stmt = stmt.order_by(AccessEventRecord.id.desc()).limit(limit)

        rows = await self._session.execute(stmt)
        return list(rows.scalars().all())
