"""Shared fixtures: in-memory credential store, scoped acquisition, PIN hasher, mock publisher."""

from contextlib import asynccontextmanager
from typing import Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from gatekeeper.application.exceptions import StoreUnavailableError
from gatekeeper.domain.models.access import AccessEvent, CredentialKind, CredentialRecord
from gatekeeper.security.pin_hashing import Pbkdf2PinHasher

# Low iteration count keeps hashing fast in tests; format is identical.
TEST_ITERATIONS = 1_000


class FakeCredentialStore:
    """In-memory CredentialStore. `fail_on` names operations that raise StoreUnavailableError."""

    def __init__(self):
        self.allow_lists: Dict[str, List[int]] = {}
        self.rfid: Dict[str, CredentialRecord] = {}
        self.pins: List[CredentialRecord] = []
        self.events: List[AccessEvent] = []
        self.fail_on: set[str] = set()
        self.calls: List[str] = []
        self.scopes_opened = 0
        self.scopes_closed = 0

    def _call(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise StoreUnavailableError(f"{name}: connection refused")

    def add_rfid(self, uid: str, user_id: int, active: bool = True) -> None:
        self.rfid[uid] = CredentialRecord(CredentialKind.RFID, uid, user_id, active)

    def add_pin(self, pin_hash: str, user_id: int, active: bool = True) -> None:
        self.pins.append(CredentialRecord(CredentialKind.PIN, pin_hash, user_id, active))

    async def get_door_allow_list(self, door_id: str) -> List[int]:
        self._call("get_door_allow_list")
        return list(self.allow_lists.get(door_id, []))

    async def find_active_rfid(self, uid: str) -> Optional[CredentialRecord]:
        self._call("find_active_rfid")
        record = self.rfid.get(uid)
        return record if record and record.active else None

    async def list_active_pins(self) -> List[CredentialRecord]:
        self._call("list_active_pins")
        return [r for r in self.pins if r.active]

    async def insert_access_event(self, event: AccessEvent) -> None:
        self._call("insert_access_event")
        self.events.append(event)


@pytest.fixture
def store():
    return FakeCredentialStore()


@pytest.fixture
def store_scope(store):
    @asynccontextmanager
    async def scope():
        store.scopes_opened += 1
        try:
            yield store
        finally:
            store.scopes_closed += 1

    return scope


@pytest.fixture
def hasher():
    return Pbkdf2PinHasher(iterations=TEST_ITERATIONS)


@pytest.fixture
def counting_verifier(hasher):
    """Delegates to the real hasher while recording every verify() call."""
    return MagicMock(wraps=hasher)


@pytest.fixture
def message_publisher():
    p = AsyncMock()
    p.publish = AsyncMock(return_value=None)
    return p


@pytest.fixture
def logger():
    return MagicMock()
