"""Security-layer exceptions. Typed, no HTTP."""


class SecurityError(Exception):
    """Base for all security-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class HashFormatError(SecurityError):
    """Raised when a stored PIN hash is not in the pbkdf2_sha256$iterations$salt$hash format."""
