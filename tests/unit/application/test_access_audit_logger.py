"""Audit tests: one immutable record per decision, PIN payloads hashed, unknown users NULL."""

import asyncio
import time
from datetime import timezone

import pytest

from gatekeeper.application.audit_logger import AccessAuditLogger
from gatekeeper.application.exceptions import StoreUnavailableError
from gatekeeper.domain.models.access import (
    UNKNOWN_IDENTITY,
    AccessEvent,
    CredentialKind,
    Decision,
    DenialReason,
    PinCredential,
    ResolvedIdentity,
    RfidCredential,
)


@pytest.fixture
def audit_logger(hasher):
    return AccessAuditLogger(hasher=hasher)


async def test_rfid_event_stores_raw_uid(audit_logger, store):
    await audit_logger.record(
        store,
        door_id="3",
        identity=ResolvedIdentity(22),
        credential=RfidCredential("AB12"),
        decision=Decision.GRANTED,
    )
    assert len(store.events) == 1
    event = store.events[0]
    assert isinstance(event, AccessEvent)
    assert event.door_id == "3"
    assert event.user_id == 22
    assert event.credential_kind is CredentialKind.RFID
    assert event.credential_payload == "AB12"
    assert event.decision is Decision.GRANTED
    assert event.timestamp.tzinfo == timezone.utc


async def test_pin_event_stores_hash_never_raw(audit_logger, store, hasher):
    await audit_logger.record(
        store,
        door_id="3",
        identity=ResolvedIdentity(22),
        credential=PinCredential("4321"),
        decision=Decision.DENIED,
        reason=DenialReason.NO_ACCESS_TO_DOOR,
    )
    event = store.events[0]
    assert event.credential_payload != "4321"
    assert "4321" not in event.credential_payload
    assert hasher.verify("4321", event.credential_payload)


async def test_unknown_identity_stored_as_null_user(audit_logger, store):
    await audit_logger.record(
        store,
        door_id="3",
        identity=UNKNOWN_IDENTITY,
        credential=RfidCredential("FFFF"),
        decision=Decision.DENIED,
        reason=DenialReason.RFID_NOT_FOUND,
    )
    event = store.events[0]
    assert event.user_id is None
    assert event.reason is DenialReason.RFID_NOT_FOUND


async def test_event_is_immutable(audit_logger, store):
    event = await audit_logger.record(
        store,
        door_id="3",
        identity=ResolvedIdentity(22),
        credential=RfidCredential("AB12"),
        decision=Decision.GRANTED,
    )
    with pytest.raises(AttributeError):
        event.decision = Decision.DENIED  # type: ignore[misc]


async def test_store_failure_propagates(audit_logger, store):
    store.fail_on.add("insert_access_event")
    with pytest.raises(StoreUnavailableError):
        await audit_logger.record(
            store,
            door_id="3",
            identity=ResolvedIdentity(22),
            credential=RfidCredential("AB12"),
            decision=Decision.GRANTED,
        )
    assert store.events == []


async def test_pin_hashing_runs_off_event_loop(store):
    class SlowHasher:
        def hash(self, plaintext):
            time.sleep(0.2)
            return "pbkdf2_sha256$1$c2FsdA==$a2V5"

    ticks = 0

    async def heartbeat():
        nonlocal ticks
        while True:
            ticks += 1
            await asyncio.sleep(0.01)

    beat = asyncio.create_task(heartbeat())
    try:
        await AccessAuditLogger(hasher=SlowHasher()).record(
            store,
            door_id="3",
            identity=ResolvedIdentity(22),
            credential=PinCredential("4321"),
            decision=Decision.GRANTED,
        )
    finally:
        beat.cancel()

    assert store.events[0].credential_payload.startswith("pbkdf2_sha256$")
    assert ticks >= 5
