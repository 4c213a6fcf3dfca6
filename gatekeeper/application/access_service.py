"""Access service: the per-event boundary. Orchestrates parse, resolve, authorize, audit and publish."""

import logging
import time
from typing import Dict, Optional

from gatekeeper.application.audit_logger import AccessAuditLogger
from gatekeeper.application.authorization import AuthorizationEngine
from gatekeeper.application.credential_resolver import CredentialResolver
from gatekeeper.application.credential_store import CredentialStoreScope
from gatekeeper.application.decision_publisher import DecisionPublisher
from gatekeeper.application.exceptions import MessagingFailureError, StoreUnavailableError
from gatekeeper.core.context import door_id_ctx
from gatekeeper.domain.exceptions import DomainError
from gatekeeper.domain.models.access import (
    UNKNOWN_IDENTITY,
    AccessOutcome,
    AccessRequest,
    CredentialKind,
    Decision,
    DenialReason,
    InboundMessage,
    Verdict,
)
from gatekeeper.domain.validators.payload_validator import parse_access_request
from gatekeeper.observability import metrics as m
from gatekeeper.observability.metrics import MetricsCollector


class AccessService:
    """
    Application-layer orchestration only. No transport, no SQL.
    Failure strategy: any store failure before a verdict exists fails safe to
    denied; an audit write failure is reported but never blocks the publish;
    a publish failure is reported and the event is finished.
    """

    def __init__(
        self,
        store_scope: CredentialStoreScope,
        resolver: CredentialResolver,
        authorizer: AuthorizationEngine,
        audit_logger: AccessAuditLogger,
        publisher: DecisionPublisher,
        topic_kinds: Dict[str, CredentialKind],
        metrics: MetricsCollector,
        logger: logging.Logger,
    ) -> None:
        self._store_scope = store_scope
        self._resolver = resolver
        self._authorizer = authorizer
        self._audit_logger = audit_logger
        self._publisher = publisher
        self._topic_kinds = dict(topic_kinds)
        self._metrics = metrics
        self._logger = logger

    async def handle(self, message: InboundMessage) -> Optional[AccessOutcome]:
        """
        Single entry point for one inbound message. Returns None when the
        message is dropped as malformed (nothing audited, nothing published).
        """
        # Step 1: parse
        try:
            request = parse_access_request(message, self._topic_kinds)
        except DomainError as e:
            self._logger.warning(
                "payload_malformed",
                extra={"topic": message.topic, "error": e.message},
            )
            self._metrics.increment(m.PAYLOAD_MALFORMED)
            return None

        door_token = door_id_ctx.set(request.door_id)
        started = time.perf_counter()
        try:
            return await self._process(request)
        finally:
            self._metrics.observe_latency(
                m.PIPELINE_LATENCY, (time.perf_counter() - started) * 1000.0
            )
            door_id_ctx.reset(door_token)

    async def _process(self, request: AccessRequest) -> AccessOutcome:
        kind = request.credential.kind
        identity = UNKNOWN_IDENTITY
        verdict: Optional[Verdict] = None
        audited = False

        # Steps 2-4: resolve, authorize and audit inside one store scope
        try:
            async with self._store_scope() as store:
                identity = await self._resolver.resolve(store, request.credential)
                verdict = await self._authorizer.evaluate(store, request.door_id, identity, kind)
                audited = await self._record(store, request, identity, verdict)
        except StoreUnavailableError as e:
            if verdict is None:
                self._logger.error(
                    "store_unavailable",
                    extra={"credential_kind": kind.value, "error": e.message},
                )
                self._metrics.increment(m.STORE_FAILURES)
                verdict = Verdict(Decision.DENIED, DenialReason.STORE_UNAVAILABLE)
            else:
                self._logger.error("store_release_failed", extra={"error": e.message})

        # Step 5: publish, whether or not the audit landed
        published = await self._publish(request.door_id, verdict.decision)

        self._metrics.increment(
            m.ACCESS_DECISIONS,
            labels={"decision": verdict.decision.value, "credential_kind": kind.value},
        )
        self._logger.info(
            "access_decided",
            extra={
                "credential_kind": kind.value,
                "user_id": identity.user_id,
                "decision": verdict.decision.value,
                "reason": verdict.reason.value if verdict.reason else None,
                "audited": audited,
                "published": published,
            },
        )
        return AccessOutcome(
            door_id=request.door_id,
            decision=verdict.decision,
            identity=identity,
            reason=verdict.reason,
            audited=audited,
            published=published,
        )

    async def _record(self, store, request: AccessRequest, identity, verdict: Verdict) -> bool:
        try:
            await self._audit_logger.record(
                store,
                door_id=request.door_id,
                identity=identity,
                credential=request.credential,
                decision=verdict.decision,
                reason=verdict.reason,
            )
        except StoreUnavailableError as e:
            self._logger.error(
                "audit_write_failed",
                extra={"decision": verdict.decision.value, "error": e.message},
            )
            self._metrics.increment(m.AUDIT_WRITE_FAILURES)
            return False
        return True

    async def _publish(self, door_id: str, decision: Decision) -> bool:
        try:
            await self._publisher.publish(door_id, decision)
        except MessagingFailureError as e:
            self._logger.error(
                "decision_publish_failed",
                extra={"decision": decision.value, "error": e.message},
            )
            self._metrics.increment(m.PUBLISH_FAILURES)
            return False
        return True
