"""Domain-specific exceptions. Pure domain layer. No infrastructure."""


class DomainError(Exception):
    """Base for all domain-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MalformedPayloadError(DomainError):
    """Raised when an inbound payload does not split into identifier and door id."""


class UnknownTopicError(DomainError):
    """Raised when an inbound message arrives on a topic that carries no credential kind."""
