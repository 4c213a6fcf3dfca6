"""Immutable audit logging of access decisions."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from gatekeeper.application.credential_store import CredentialStore
from gatekeeper.domain.models.access import (
    AccessEvent,
    Credential,
    CredentialKind,
    Decision,
    DenialReason,
    ResolvedIdentity,
)
from gatekeeper.security.pin_hashing import HashVerifier

logger = logging.getLogger(__name__)


class AccessAuditLogger:
    """
    Writes one immutable AccessEvent per decision via the store.
    RFID payloads are stored as presented; PIN payloads only as a fresh salted
    hash. Unknown identities are stored with a NULL user. Store failures propagate
    as StoreUnavailableError for the caller to report.
    """

    def __init__(self, hasher: HashVerifier) -> None:
        self._hasher = hasher

    async def audit_payload(self, credential: Credential) -> str:
        if credential.kind is CredentialKind.PIN:
            return await asyncio.to_thread(self._hasher.hash, credential.value)
        return credential.value

    async def record(
        self,
        store: CredentialStore,
        *,
        door_id: str,
        identity: ResolvedIdentity,
        credential: Credential,
        decision: Decision,
        reason: Optional[DenialReason] = None,
    ) -> AccessEvent:
        """Build and persist the audit record. Timestamp is UTC."""
        payload = await self.audit_payload(credential)
        event = AccessEvent(
            door_id=door_id,
            user_id=identity.user_id,
            credential_kind=credential.kind,
            credential_payload=payload,
            decision=decision,
            timestamp=datetime.now(timezone.utc),
            reason=reason,
        )
        await store.insert_access_event(event)
        logger.info("access_event_recorded", extra=event.to_dict())
        return event
