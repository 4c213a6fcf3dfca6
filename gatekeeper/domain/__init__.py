"""Domain layer: models, schemas, payload parsing, exceptions. Pure business logic only."""

from gatekeeper.domain.exceptions import DomainError, MalformedPayloadError, UnknownTopicError
from gatekeeper.domain.models import (
    AccessEvent,
    AccessRequest,
    CredentialKind,
    Decision,
    DenialReason,
    InboundMessage,
    PinCredential,
    ResolvedIdentity,
    RfidCredential,
)
from gatekeeper.domain.schemas import AccessEventResponse
from gatekeeper.domain.validators import parse_access_request

__all__ = [
    "AccessEvent",
    "AccessEventResponse",
    "AccessRequest",
    "CredentialKind",
    "Decision",
    "DenialReason",
    "DomainError",
    "InboundMessage",
    "MalformedPayloadError",
    "PinCredential",
    "ResolvedIdentity",
    "RfidCredential",
    "UnknownTopicError",
    "parse_access_request",
]
