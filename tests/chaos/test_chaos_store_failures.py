"""
Chaos: credential store failing mid-stream.
System must: never grant while the store is down, keep consuming, release every
scope it opened, and go back to normal decisions once the store recovers.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

import pytest

from gatekeeper.application.access_service import AccessService
from gatekeeper.application.audit_logger import AccessAuditLogger
from gatekeeper.application.authorization import AuthorizationEngine
from gatekeeper.application.credential_resolver import CredentialResolver
from gatekeeper.application.decision_publisher import DecisionPublisher
from gatekeeper.application.exceptions import StoreUnavailableError
from gatekeeper.application.ingestion import IngestionLoop
from gatekeeper.domain.models.access import CredentialKind, Decision, DenialReason, InboundMessage
from gatekeeper.observability import metrics as m
from gatekeeper.observability.metrics import MetricsCollector

CARD_TOPIC = "access.card_input"
PIN_TOPIC = "access.code_input"


def _service(store_scope, hasher, message_publisher, metrics):
    return AccessService(
        store_scope=store_scope,
        resolver=CredentialResolver(verifier=hasher),
        authorizer=AuthorizationEngine(),
        audit_logger=AccessAuditLogger(hasher=hasher),
        publisher=DecisionPublisher(message_publisher, "access.granted.", "access.denied."),
        topic_kinds={CARD_TOPIC: CredentialKind.RFID, PIN_TOPIC: CredentialKind.PIN},
        metrics=metrics,
        logger=logging.getLogger(__name__),
    )


@pytest.mark.asyncio
async def test_store_outage_denies_then_recovers(store, store_scope, hasher, message_publisher):
    """Events during an outage are denied; the loop keeps running and grants resume afterwards."""
    metrics = MetricsCollector()
    store.allow_lists["3"] = [22]
    store.add_rfid("AB12", user_id=22)
    service = _service(store_scope, hasher, message_publisher, metrics)
    loop = IngestionLoop(service.handle)
    loop.start()

    await loop.submit(InboundMessage(CARD_TOPIC, "AB12,3"))
    await asyncio.wait_for(loop.join(), timeout=2)

    store.fail_on.update({"find_active_rfid", "list_active_pins"})
    await loop.submit(InboundMessage(CARD_TOPIC, "AB12,3"))
    await loop.submit(InboundMessage(PIN_TOPIC, "4321,3"))
    await asyncio.wait_for(loop.join(), timeout=2)

    store.fail_on.clear()
    await loop.submit(InboundMessage(CARD_TOPIC, "AB12,3"))
    await asyncio.wait_for(loop.join(), timeout=2)
    await loop.stop()

    topics = [c.args[0] for c in message_publisher.publish.await_args_list]
    assert topics == [
        "access.granted.3",
        "access.denied.3",
        "access.denied.3",
        "access.granted.3",
    ]
    assert [e.decision for e in store.events] == [Decision.GRANTED, Decision.GRANTED]
    assert store.scopes_opened == store.scopes_closed == 4
    assert metrics.export_metrics()["counters"][m.STORE_FAILURES] == 2


@pytest.mark.asyncio
async def test_scope_acquisition_failure_denies(hasher, message_publisher):
    """Store cannot even be opened: decision is denied for store_unavailable, nothing audited."""

    @asynccontextmanager
    async def broken_scope():
        raise StoreUnavailableError("could not connect to server")
        yield

    service = _service(broken_scope, hasher, message_publisher, MetricsCollector())

    outcome = await service.handle(InboundMessage(CARD_TOPIC, "AB12,3"))

    assert outcome.decision is Decision.DENIED
    assert outcome.reason is DenialReason.STORE_UNAVAILABLE
    assert outcome.audited is False
    message_publisher.publish.assert_awaited_once_with("access.denied.3", "denied")


@pytest.mark.asyncio
async def test_unexpected_error_isolated_to_one_event(store, store_scope, hasher, message_publisher):
    """A non-store bug in one event is logged by the loop; the next event is still decided."""
    store.allow_lists["3"] = [22]
    store.add_rfid("AB12", user_id=22)
    service = _service(store_scope, hasher, message_publisher, MetricsCollector())
    calls = 0

    async def handler(message):
        nonlocal calls
        calls += 1
        if calls == 1:
            raise ValueError("bug")
        await service.handle(message)

    loop = IngestionLoop(handler)
    loop.start()
    await loop.submit(InboundMessage(CARD_TOPIC, "AB12,3"))
    await loop.submit(InboundMessage(CARD_TOPIC, "AB12,3"))
    await asyncio.wait_for(loop.join(), timeout=2)
    await loop.stop()

    message_publisher.publish.assert_awaited_once_with("access.granted.3", "granted")
    assert len(store.events) == 1
