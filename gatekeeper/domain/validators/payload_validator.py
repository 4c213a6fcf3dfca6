"""Parsing of inbound presentation payloads. Pure functions, no infrastructure or DB access."""

from typing import Dict

from gatekeeper.domain.exceptions import MalformedPayloadError, UnknownTopicError
from gatekeeper.domain.models.access import (
    AccessRequest,
    Credential,
    CredentialKind,
    InboundMessage,
    PinCredential,
    RfidCredential,
)

PAYLOAD_SEPARATOR = ","
PAYLOAD_FIELDS = 2


def split_payload(payload: str) -> tuple[str, str]:
    """
    Split "<identifier>,<door_id>" into its two fields. Fields past the second
    are ignored. Raises MalformedPayloadError on fewer fields or empty values.
    """
    text = (payload or "").strip()
    if not text:
        raise MalformedPayloadError("payload is empty")
    fields = text.split(PAYLOAD_SEPARATOR)
    if len(fields) < PAYLOAD_FIELDS:
        raise MalformedPayloadError(
            f"payload must have {PAYLOAD_FIELDS} comma-separated fields, got {len(fields)}"
        )
    identifier, door_id = fields[0].strip(), fields[1].strip()
    if not identifier:
        raise MalformedPayloadError("credential identifier must not be empty")
    if not door_id:
        raise MalformedPayloadError("door id must not be empty")
    return identifier, door_id


def build_credential(kind: CredentialKind, identifier: str) -> Credential:
    if kind is CredentialKind.RFID:
        return RfidCredential(uid=identifier)
    return PinCredential(code=identifier)


def parse_access_request(
    message: InboundMessage,
    topic_kinds: Dict[str, CredentialKind],
) -> AccessRequest:
    """
    Map an inbound message to an AccessRequest. topic_kinds maps each
    subscribed topic to the credential kind it carries.
    """
    kind = topic_kinds.get(message.topic)
    if kind is None:
        raise UnknownTopicError(f"no credential kind for topic {message.topic!r}")
    identifier, door_id = split_payload(message.payload)
    return AccessRequest(credential=build_credential(kind, identifier), door_id=door_id)
