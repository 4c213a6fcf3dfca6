"""DB-backed user and door administration. Door allow-lists are the door_access rows."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gatekeeper.application.exceptions import ConflictError, NotFoundError, StoreUnavailableError
from gatekeeper.infrastructure.database.credential_store_db import STORE_ERRORS
from gatekeeper.infrastructure.database.models import Door, DoorAccess, User

logger = logging.getLogger(__name__)

USER_PAGE_SIZE = 100
DOOR_PAGE_SIZE = 200


async def _commit(session: AsyncSession, action: str) -> None:
    # Uncommitted work is rolled back when the request's session closes.
    try:
        await session.commit()
    except IntegrityError as e:
        raise ConflictError(f"{action} violates a constraint: {e.orig}") from e
    except STORE_ERRORS as e:
        raise StoreUnavailableError(f"{action} failed: {e}") from e


class DbUserRepository:
    """Users. Deactivating a user disables all of their cards and PINs at resolution time."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_users(self, limit: int = USER_PAGE_SIZE) -> List[User]:
        stmt = select(User).order_by(User.id.desc()).limit(limit)
        try:
            rows = await self._session.execute(stmt)
        except STORE_ERRORS as e:
            raise StoreUnavailableError(f"user listing failed: {e}") from e
        return list(rows.scalars().all())

    async def create_user(self, *, full_name: str, active: bool = True) -> User:
        user = User(full_name=full_name, active=active)
        self._session.add(user)
        await _commit(self._session, "user create")
        try:
            await self._session.refresh(user)
        except STORE_ERRORS as e:
            raise StoreUnavailableError(f"user reload failed: {e}") from e
        logger.info("user_created", extra={"user_id": user.id, "active": user.active})
        return user

    async def update_user(self, user_id: int, changes: Dict[str, Any]) -> User:
        user = await self._get(user_id)
        for field, value in changes.items():
            setattr(user, field, value)
        await _commit(self._session, f"user {user_id} update")
        logger.info("user_updated", extra={"user_id": user_id, "fields": sorted(changes)})
        return user

    async def delete_user(self, user_id: int) -> None:
        """Cards, PINs and allow-list rows go with the user; audit rows keep the id."""
        user = await self._get(user_id)
        await self._session.delete(user)
        await _commit(self._session, f"user {user_id} delete")
        logger.info("user_deleted", extra={"user_id": user_id})

    async def _get(self, user_id: int) -> User:
        try:
            user = await self._session.get(User, user_id)
        except STORE_ERRORS as e:
            raise StoreUnavailableError(f"user lookup failed: {e}") from e
        if user is None:
            raise NotFoundError(f"user {user_id} not found")
        return user


class DbDoorRepository:
    """Doors and their allow-lists. Views are plain dicts shaped like DoorResponse."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_doors(self, limit: int = DOOR_PAGE_SIZE) -> List[Dict[str, Any]]:
        stmt = select(Door).order_by(Door.id).limit(limit)
        try:
            rows = await self._session.execute(stmt)
        except STORE_ERRORS as e:
            raise StoreUnavailableError(f"door listing failed: {e}") from e
        return [await self._view(door) for door in rows.scalars().all()]

    async def get_door(self, door_id: str) -> Dict[str, Any]:
        door = await self._get(door_id)
        return await self._view(door)

    async def create_door(
        self,
        *,
        door_id: str,
        name: Optional[str] = None,
        location: Optional[str] = None,
        active: bool = True,
        allowed_user_ids: Optional[List[int]] = None,
    ) -> Dict[str, Any]:
        try:
            existing = await self._session.get(Door, door_id)
        except STORE_ERRORS as e:
            raise StoreUnavailableError(f"door lookup failed: {e}") from e
        if existing is not None:
            raise ConflictError(f"door {door_id} already exists")
        allowed = list(allowed_user_ids or [])
        await self._require_users(allowed)

        door = Door(id=door_id, name=name, location=location, active=active)
        self._session.add(door)
        try:
            # Door row must exist before door_access rows reference it.
            await self._session.flush()
        except IntegrityError as e:
            raise ConflictError(f"door {door_id} violates a constraint: {e.orig}") from e
        except STORE_ERRORS as e:
            raise StoreUnavailableError(f"door create failed: {e}") from e
        self._add_access(door_id, allowed)
        await _commit(self._session, f"door {door_id} create")
        logger.info("door_created", extra={"allowed_users": len(allowed), "active": active})
        return self._render(door, allowed)

    async def update_door(
        self,
        door_id: str,
        changes: Dict[str, Any],
        allowed_user_ids: Optional[List[int]] = None,
    ) -> Dict[str, Any]:
        """Apply column changes; a non-None `allowed_user_ids` replaces the allow-list."""
        door = await self._get(door_id)
        for field, value in changes.items():
            setattr(door, field, value)
        if allowed_user_ids is not None:
            await self._require_users(allowed_user_ids)
            try:
                await self._session.execute(delete(DoorAccess).where(DoorAccess.door_id == door_id))
            except STORE_ERRORS as e:
                raise StoreUnavailableError(f"allow-list reset failed: {e}") from e
            self._add_access(door_id, allowed_user_ids)
        await _commit(self._session, f"door {door_id} update")
        logger.info("door_updated", extra={"fields": sorted(changes), "allow_list_replaced": allowed_user_ids is not None})
        if allowed_user_ids is not None:
            return self._render(door, allowed_user_ids)
        return await self._view(door)

    async def delete_door(self, door_id: str) -> None:
        door = await self._get(door_id)
        try:
            await self._session.execute(delete(DoorAccess).where(DoorAccess.door_id == door_id))
        except STORE_ERRORS as e:
            raise StoreUnavailableError(f"allow-list reset failed: {e}") from e
        await self._session.delete(door)
        await _commit(self._session, f"door {door_id} delete")
        logger.info("door_deleted")

    async def _get(self, door_id: str) -> Door:
        try:
            door = await self._session.get(Door, door_id)
        except STORE_ERRORS as e:
            raise StoreUnavailableError(f"door lookup failed: {e}") from e
        if door is None:
            raise NotFoundError(f"door {door_id} not found")
        return door

    async def _require_users(self, user_ids: List[int]) -> None:
        if not user_ids:
            return
        stmt = select(User.id).where(User.id.in_(user_ids))
        try:
            rows = await self._session.execute(stmt)
        except STORE_ERRORS as e:
            raise StoreUnavailableError(f"user lookup failed: {e}") from e
        missing = set(user_ids) - set(rows.scalars().all())
        if missing:
            raise NotFoundError(f"unknown user ids: {sorted(missing)}")

    def _add_access(self, door_id: str, user_ids: List[int]) -> None:
        self._session.add_all(
            [DoorAccess(door_id=door_id, user_id=user_id, allowed=True) for user_id in user_ids]
        )

    async def _view(self, door: Door) -> Dict[str, Any]:
        stmt = (
            select(DoorAccess.user_id)
            .where(DoorAccess.door_id == door.id, DoorAccess.allowed == True)
            .order_by(DoorAccess.id)
        )
        try:
            rows = await self._session.execute(stmt)
        except STORE_ERRORS as e:
            raise StoreUnavailableError(f"allow-list lookup failed: {e}") from e
        return self._render(door, [int(user_id) for user_id in rows.scalars().all()])

    @staticmethod
    def _render(door: Door, allowed_user_ids: List[int]) -> Dict[str, Any]:
        return {
            "id": door.id,
            "name": door.name,
            "location": door.location,
            "active": door.active,
            "allowed_user_ids": list(allowed_user_ids),
        }
