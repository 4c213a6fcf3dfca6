from gatekeeper.domain.models.access import (
    UNKNOWN_IDENTITY,
    AccessEvent,
    AccessOutcome,
    AccessRequest,
    Credential,
    CredentialKind,
    CredentialRecord,
    Decision,
    DenialReason,
    InboundMessage,
    PinCredential,
    ResolvedIdentity,
    RfidCredential,
    Verdict,
)

__all__ = [
    "UNKNOWN_IDENTITY",
    "AccessEvent",
    "AccessOutcome",
    "AccessRequest",
    "Credential",
    "CredentialKind",
    "CredentialRecord",
    "Decision",
    "DenialReason",
    "InboundMessage",
    "PinCredential",
    "ResolvedIdentity",
    "RfidCredential",
    "Verdict",
]
