"""Domain model for access decisions. Pure business semantics. No ORM or infrastructure."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union


class CredentialKind(str, Enum):
    """Kind of credential presented at a door. Value is what the audit trail stores."""

    RFID = "RFID"
    PIN = "PIN"


class Decision(str, Enum):
    """Outcome of one authorization. Value is the literal published payload."""

    GRANTED = "granted"
    DENIED = "denied"


class DenialReason(str, Enum):
    """Why a presentation was denied. Persisted alongside the audit record."""

    RFID_NOT_FOUND = "rfid_not_found"
    PIN_NO_MATCH = "pin_no_match"
    NO_ACCESS_TO_DOOR = "no_access_to_door"
    STORE_UNAVAILABLE = "store_unavailable"


@dataclass(frozen=True)
class RfidCredential:
    uid: str

    @property
    def kind(self) -> CredentialKind:
        return CredentialKind.RFID

    @property
    def value(self) -> str:
        return self.uid


@dataclass(frozen=True)
class PinCredential:
    code: str = field(repr=False)

    @property
    def kind(self) -> CredentialKind:
        return CredentialKind.PIN

    @property
    def value(self) -> str:
        return self.code


Credential = Union[RfidCredential, PinCredential]


@dataclass(frozen=True)
class CredentialRecord:
    """
    Persisted credential. `secret` is the card uid for RFID records and the
    stored salted hash for PIN records. Only active records take part in resolution.
    """

    kind: CredentialKind
    secret: str
    user_id: int
    active: bool = True


@dataclass(frozen=True)
class ResolvedIdentity:
    """Concrete user id, or unknown when user_id is None."""

    user_id: Optional[int] = None

    @property
    def is_known(self) -> bool:
        return self.user_id is not None


UNKNOWN_IDENTITY = ResolvedIdentity()


@dataclass(frozen=True)
class InboundMessage:
    """One message as delivered by the transport: routing topic plus raw payload text."""

    topic: str
    payload: str
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class AccessRequest:
    """Parsed inbound presentation."""

    credential: Credential
    door_id: str


@dataclass(frozen=True)
class Verdict:
    decision: Decision
    reason: Optional[DenialReason] = None

    @property
    def granted(self) -> bool:
        return self.decision is Decision.GRANTED


@dataclass(frozen=True)
class AccessEvent:
    """
    Immutable audit record of one decision. credential_payload is the raw uid
    for RFID and a one-way hash for PIN, never the presented code.
    """

    door_id: str
    user_id: Optional[int]
    credential_kind: CredentialKind
    credential_payload: str
    decision: Decision
    timestamp: datetime
    reason: Optional[DenialReason] = None

    def to_dict(self) -> Dict[str, Any]:
        """Structured representation for JSON logging."""
        return {
            "door_id": self.door_id,
            "user_id": self.user_id,
            "credential_kind": self.credential_kind.value,
            "decision": self.decision.value,
            "reason": self.reason.value if self.reason else None,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class AccessOutcome:
    """What the pipeline did with one inbound message."""

    door_id: str
    decision: Decision
    identity: ResolvedIdentity
    reason: Optional[DenialReason] = None
    audited: bool = True
    published: bool = True
