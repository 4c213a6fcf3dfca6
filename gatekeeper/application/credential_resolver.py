"""Maps a presented credential to a user identity."""

import asyncio
import logging

from gatekeeper.application.credential_store import CredentialStore
from gatekeeper.domain.models.access import (
    UNKNOWN_IDENTITY,
    Credential,
    PinCredential,
    ResolvedIdentity,
    RfidCredential,
)
from gatekeeper.security.pin_hashing import HashVerifier

logger = logging.getLogger(__name__)


class CredentialResolver:
    """
    RFID: indexed lookup of an active card by uid.
    PIN: codes are stored only as salted hashes, so resolution is a linear scan
    over every active PIN record in store order; the first record that verifies
    wins and no later record is checked.
    """

    def __init__(self, verifier: HashVerifier) -> None:
        self._verifier = verifier

    async def resolve(self, store: CredentialStore, credential: Credential) -> ResolvedIdentity:
        if isinstance(credential, RfidCredential):
            return await self._resolve_rfid(store, credential)
        if isinstance(credential, PinCredential):
            return await self._resolve_pin(store, credential)
        raise TypeError(f"unsupported credential type {type(credential).__name__}")

    async def _resolve_rfid(self, store: CredentialStore, credential: RfidCredential) -> ResolvedIdentity:
        record = await store.find_active_rfid(credential.uid)
        if record is None or not record.active:
            logger.info("rfid_not_recognized")
            return UNKNOWN_IDENTITY
        return ResolvedIdentity(user_id=record.user_id)

    async def _resolve_pin(self, store: CredentialStore, credential: PinCredential) -> ResolvedIdentity:
        records = await store.list_active_pins()
        for record in records:
            if not record.active:
                continue
            # PBKDF2 is CPU-bound; run it off the event loop.
            if await asyncio.to_thread(self._verifier.verify, credential.code, record.secret):
                return ResolvedIdentity(user_id=record.user_id)
        logger.info("pin_not_recognized", extra={"active_pins_scanned": len(records)})
        return UNKNOWN_IDENTITY
