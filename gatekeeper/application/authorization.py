"""Door allow-list authorization."""

from gatekeeper.application.credential_store import CredentialStore
from gatekeeper.domain.models.access import (
    CredentialKind,
    Decision,
    DenialReason,
    ResolvedIdentity,
    Verdict,
)

_UNKNOWN_REASONS = {
    CredentialKind.RFID: DenialReason.RFID_NOT_FOUND,
    CredentialKind.PIN: DenialReason.PIN_NO_MATCH,
}


class AuthorizationEngine:
    """Granted iff the identity is known and listed on the door's allow-list. Flat list, no wildcards."""

    async def evaluate(
        self,
        store: CredentialStore,
        door_id: str,
        identity: ResolvedIdentity,
        credential_kind: CredentialKind,
    ) -> Verdict:
        if not identity.is_known:
            return Verdict(Decision.DENIED, _UNKNOWN_REASONS[credential_kind])
        # Fetched per event, never cached.
        allow_list = await store.get_door_allow_list(door_id)
        if identity.user_id in allow_list:
            return Verdict(Decision.GRANTED)
        return Verdict(Decision.DENIED, DenialReason.NO_ACCESS_TO_DOOR)
