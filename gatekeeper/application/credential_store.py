"""Credential store protocol. Application layer depends on this; infrastructure implements it."""

from typing import AsyncContextManager, Callable, List, Optional, Protocol

from gatekeeper.domain.models.access import AccessEvent, CredentialRecord


class CredentialStore(Protocol):
    """
    Lookups against persisted users, doors and credentials, plus the audit insert.
    Every failure surfaces as StoreUnavailableError.
    """

    async def get_door_allow_list(self, door_id: str) -> List[int]:
        """Return user ids allowed at door_id, in store order. Empty if the door is unknown."""
        ...

    async def find_active_rfid(self, uid: str) -> Optional[CredentialRecord]:
        """Return the active card record with this uid, or None."""
        ...

    async def list_active_pins(self) -> List[CredentialRecord]:
        """Return every active PIN record, in store iteration order."""
        ...

    async def insert_access_event(self, event: AccessEvent) -> None:
        """Persist one immutable access event."""
        ...


# Opens one store scope per event; the connection is released when the context exits.
CredentialStoreScope = Callable[[], AsyncContextManager[CredentialStore]]
