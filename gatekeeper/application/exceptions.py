"""Application-layer exceptions. Do not reuse domain exceptions."""


class ApplicationError(Exception):
    """Base for all application-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class StoreUnavailableError(ApplicationError):
    """Raised when a query or insert against the credential store fails. Decisions fail safe to denied."""


class MessagingFailureError(ApplicationError):
    """Raised when publishing a decision to the message broker fails."""


class NotFoundError(ApplicationError):
    """Raised when an admin operation targets a user or door that does not exist."""


class ConflictError(ApplicationError):
    """Raised when an admin write would violate a uniqueness or integrity constraint."""
