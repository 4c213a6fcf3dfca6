"""Fixtures for API unit tests: in-memory repositories, fresh metrics, AsyncClient."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient

from gatekeeper.application.exceptions import ConflictError, NotFoundError
from gatekeeper.main import app
from gatekeeper.observability.metrics import MetricsCollector


class FakeEventRepository:
    """In-memory stand-in for DbAccessEventRepository; records the last query."""

    def __init__(self, rows=None):
        self.rows = list(rows or [])
        self.last_query: dict | None = None

    async def list_events(self, *, limit, result=None, credential_type=None, since=None, until=None):
        self.last_query = {
            "limit": limit,
            "result": result,
            "credential_type": credential_type,
            "since": since,
            "until": until,
        }
        rows = [
            r
            for r in self.rows
            if (result is None or r.result == result)
            and (credential_type is None or r.credential_type == credential_type)
            and (since is None or r.ts >= since)
            and (until is None or r.ts <= until)
        ]
        return sorted(rows, key=lambda r: r.id, reverse=True)[:limit]


class FakeUserRepository:
    """In-memory stand-in for DbUserRepository."""

    def __init__(self):
        self.users: dict[int, SimpleNamespace] = {}
        self._next_id = 1

    async def list_users(self, limit=100):
        return sorted(self.users.values(), key=lambda u: u.id, reverse=True)[:limit]

    async def create_user(self, *, full_name, active=True):
        user = SimpleNamespace(
            id=self._next_id,
            full_name=full_name,
            active=active,
            created_at=datetime(2026, 3, 1, tzinfo=timezone.utc),
        )
        self.users[user.id] = user
        self._next_id += 1
        return user

    async def update_user(self, user_id, changes):
        user = self._get(user_id)
        for field, value in changes.items():
            setattr(user, field, value)
        return user

    async def delete_user(self, user_id):
        self._get(user_id)
        del self.users[user_id]

    def _get(self, user_id):
        if user_id not in self.users:
            raise NotFoundError(f"user {user_id} not found")
        return self.users[user_id]


class FakeDoorRepository:
    """In-memory stand-in for DbDoorRepository; allow-list user ids must exist in `users`."""

    def __init__(self, users: FakeUserRepository):
        self._users = users
        self.doors: dict[str, dict] = {}

    async def list_doors(self, limit=200):
        return [dict(self.doors[k]) for k in sorted(self.doors)][:limit]

    async def get_door(self, door_id):
        return dict(self._get(door_id))

    async def create_door(self, *, door_id, name=None, location=None, active=True, allowed_user_ids=None):
        if door_id in self.doors:
            raise ConflictError(f"door {door_id} already exists")
        self._require_users(allowed_user_ids or [])
        self.doors[door_id] = {
            "id": door_id,
            "name": name,
            "location": location,
            "active": active,
            "allowed_user_ids": list(allowed_user_ids or []),
        }
        return dict(self.doors[door_id])

    async def update_door(self, door_id, changes, allowed_user_ids=None):
        door = self._get(door_id)
        door.update(changes)
        if allowed_user_ids is not None:
            self._require_users(allowed_user_ids)
            door["allowed_user_ids"] = list(allowed_user_ids)
        return dict(door)

    async def delete_door(self, door_id):
        self._get(door_id)
        del self.doors[door_id]

    def _get(self, door_id):
        if door_id not in self.doors:
            raise NotFoundError(f"door {door_id} not found")
        return self.doors[door_id]

    def _require_users(self, user_ids):
        missing = set(user_ids) - set(self._users.users)
        if missing:
            raise NotFoundError(f"unknown user ids: {sorted(missing)}")


def _row(id, result, credential_type, user_id, presented_uid=None, minutes_ago=0, reason=None):
    return SimpleNamespace(
        id=id,
        ts=datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc) - timedelta(minutes=minutes_ago),
        door_id="3",
        user_id=user_id,
        credential_type=credential_type,
        presented_uid=presented_uid,
        pin_sha=None if credential_type == "RFID" else "pbkdf2_sha256$1000$c2FsdA==$a2V5",
        result=result,
        reason=reason,
    )


@pytest.fixture
def event_repository():
    return FakeEventRepository(
        [
            _row(1, "granted", "RFID", 22, presented_uid="AB12", minutes_ago=30),
            _row(2, "denied", "RFID", None, presented_uid="FFFF", minutes_ago=20, reason="rfid_not_found"),
            _row(3, "denied", "PIN", 22, minutes_ago=10, reason="no_access_to_door"),
        ]
    )


@pytest.fixture
def user_repository():
    return FakeUserRepository()


@pytest.fixture
def door_repository(user_repository):
    return FakeDoorRepository(user_repository)


@pytest.fixture
def metrics_collector():
    return MetricsCollector()


@pytest.fixture
def app_with_overrides(event_repository, metrics_collector, user_repository, door_repository):
    """App with repositories and metrics overridden; lifespan (gateway) is not run."""
    from gatekeeper.api import dependencies

    app.dependency_overrides[dependencies.get_event_repository] = lambda: event_repository
    app.dependency_overrides[dependencies.get_metrics] = lambda: metrics_collector
    app.dependency_overrides[dependencies.get_user_repository] = lambda: user_repository
    app.dependency_overrides[dependencies.get_door_repository] = lambda: door_repository
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app_with_overrides):
    transport = ASGITransport(app=app_with_overrides)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
