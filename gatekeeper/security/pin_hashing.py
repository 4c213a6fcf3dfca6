"""Salted PBKDF2 hashing of PIN codes. Used to verify presented PINs and to audit them one-way."""

import base64
import os
from typing import Protocol

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from gatekeeper.security.exceptions import HashFormatError

ALGORITHM = "pbkdf2_sha256"
DEFAULT_ITERATIONS = 200_000
SALT_BYTES = 16
KEY_LENGTH = 32


class HashVerifier(Protocol):
    """Protocol for the password-hashing primitive the resolver and audit logger depend on."""

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Return True if plaintext matches the stored salted hash."""
        ...

    def hash(self, plaintext: str) -> str:
        """Return a freshly salted one-way hash of plaintext."""
        ...


def _b64encode(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


def _kdf(salt: bytes, iterations: int) -> PBKDF2HMAC:
    return PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=salt,
        iterations=iterations,
    )


def decode_hash(hashed: str) -> tuple[int, bytes, bytes]:
    """Split an encoded hash into (iterations, salt, derived key). Raises HashFormatError."""
    parts = (hashed or "").split("$")
    if len(parts) != 4 or parts[0] != ALGORITHM:
        raise HashFormatError(f"unsupported hash format, expected {ALGORITHM}$iterations$salt$hash")
    try:
        iterations = int(parts[1])
        salt = base64.b64decode(parts[2], validate=True)
        key = base64.b64decode(parts[3], validate=True)
    except ValueError as e:
        raise HashFormatError(f"corrupt hash: {e}") from e
    if iterations <= 0 or not salt or len(key) != KEY_LENGTH:
        raise HashFormatError("corrupt hash: bad iterations, salt or key length")
    return iterations, salt, key


class Pbkdf2PinHasher:
    """
    PBKDF2-HMAC-SHA256 with a random per-hash salt. Encoded as
    pbkdf2_sha256$<iterations>$<salt b64>$<key b64> so the iteration count
    travels with each stored hash. No global state.
    """

    def __init__(self, iterations: int = DEFAULT_ITERATIONS) -> None:
        if iterations <= 0:
            raise ValueError("iterations must be positive")
        self._iterations = iterations

    def hash(self, plaintext: str) -> str:
        salt = os.urandom(SALT_BYTES)
        key = _kdf(salt, self._iterations).derive(plaintext.encode("utf-8"))
        return f"{ALGORITHM}${self._iterations}${_b64encode(salt)}${_b64encode(key)}"

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Constant-time check. A stored hash in an unknown format never verifies."""
        try:
            iterations, salt, key = decode_hash(hashed)
        except HashFormatError:
            return False
        try:
            _kdf(salt, iterations).verify(plaintext.encode("utf-8"), key)
        except InvalidKey:
            return False
        return True
