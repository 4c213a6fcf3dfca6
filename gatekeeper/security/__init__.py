# Security: PIN hashing and verification.

from gatekeeper.security.exceptions import HashFormatError, SecurityError
from gatekeeper.security.pin_hashing import HashVerifier, Pbkdf2PinHasher

__all__ = [
    "HashFormatError",
    "HashVerifier",
    "Pbkdf2PinHasher",
    "SecurityError",
]
