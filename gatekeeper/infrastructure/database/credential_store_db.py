"""DB-backed credential store. Bound-parameter lookups against users, doors, cards and pins."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from gatekeeper.application.exceptions import StoreUnavailableError
from gatekeeper.domain.models.access import AccessEvent, CredentialKind, CredentialRecord
from gatekeeper.infrastructure.database.models import (
    AccessEventRecord,
    Door,
    DoorAccess,
    Pin,
    RfidCard,
    User,
)
from gatekeeper.infrastructure.database.session import AsyncSessionLocal

# Driver-level connection errors (refused, reset) surface as OSError before SQLAlchemy wraps them.
STORE_ERRORS = (SQLAlchemyError, OSError)


class SqlCredentialStore:
    """Implements CredentialStore protocol over one AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_door_allow_list(self, door_id: str) -> List[int]:
        stmt = (
            select(DoorAccess.user_id)
            .join(Door, Door.id == DoorAccess.door_id)
            .where(
                DoorAccess.door_id == door_id,
                DoorAccess.allowed == True,
                Door.active == True,
            )
            .order_by(DoorAccess.id)
        )
        try:
            result = await self._session.execute(stmt)
        except STORE_ERRORS as e:
            raise StoreUnavailableError(f"allow-list lookup failed: {e}") from e
        return [int(user_id) for user_id in result.scalars().all()]

    async def find_active_rfid(self, uid: str) -> Optional[CredentialRecord]:
        stmt = (
            select(RfidCard.uid, RfidCard.user_id)
            .join(User, User.id == RfidCard.user_id)
            .where(
                RfidCard.uid == uid,
                RfidCard.active == True,
                User.active == True,
            )
            .limit(1)
        )
        try:
            result = await self._session.execute(stmt)
        except STORE_ERRORS as e:
            raise StoreUnavailableError(f"rfid lookup failed: {e}") from e
        row = result.first()
        if row is None:
            return None
        return CredentialRecord(kind=CredentialKind.RFID, secret=row.uid, user_id=int(row.user_id))

    async def list_active_pins(self) -> List[CredentialRecord]:
        stmt = (
            select(Pin.pin_hash, Pin.user_id)
            .join(User, User.id == Pin.user_id)
            .where(
                Pin.active == True,
                User.active == True,
            )
            .order_by(Pin.id)
        )
        try:
            result = await self._session.execute(stmt)
        except STORE_ERRORS as e:
            raise StoreUnavailableError(f"pin listing failed: {e}") from e
        return [
            CredentialRecord(kind=CredentialKind.PIN, secret=row.pin_hash, user_id=int(row.user_id))
            for row in result.all()
        ]

    async def insert_access_event(self, event: AccessEvent) -> None:
        is_pin = event.credential_kind is CredentialKind.PIN
        orm = AccessEventRecord(
            ts=event.timestamp,
            door_id=event.door_id,
            user_id=event.user_id,
            credential_type=event.credential_kind.value,
            presented_uid=None if is_pin else event.credential_payload,
            pin_sha=event.credential_payload if is_pin else None,
            result=event.decision.value,
            reason=event.reason.value if event.reason else None,
        )
        try:
            self._session.add(orm)
            await self._session.commit()
        except STORE_ERRORS as e:
            # Session close in credential_store_scope rolls the transaction back.
            raise StoreUnavailableError(f"access event insert failed: {e}") from e


@asynccontextmanager
async def credential_store_scope(
    session_factory: async_sessionmaker = AsyncSessionLocal,
) -> AsyncIterator[SqlCredentialStore]:
    """One session per event; closed (connection returned to the pool) on every exit path."""
    try:
        async with session_factory() as session:
            yield SqlCredentialStore(session)
    except STORE_ERRORS as e:
        raise StoreUnavailableError(f"store session failed: {e}") from e
