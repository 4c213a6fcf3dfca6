from gatekeeper.domain.validators.payload_validator import (
    build_credential,
    parse_access_request,
    split_payload,
)

__all__ = [
    "build_credential",
    "parse_access_request",
    "split_payload",
]
