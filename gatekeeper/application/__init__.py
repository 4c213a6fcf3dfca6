# Application layer: services that orchestrate domain and infrastructure.

from gatekeeper.application.access_service import AccessService
from gatekeeper.application.audit_logger import AccessAuditLogger
from gatekeeper.application.authorization import AuthorizationEngine
from gatekeeper.application.credential_resolver import CredentialResolver
from gatekeeper.application.credential_store import CredentialStore, CredentialStoreScope
from gatekeeper.application.decision_publisher import DecisionPublisher, MessagePublisher
from gatekeeper.application.exceptions import (
    ApplicationError,
    ConflictError,
    MessagingFailureError,
    NotFoundError,
    StoreUnavailableError,
)
from gatekeeper.application.ingestion import IngestionLoop

__all__ = [
    "AccessAuditLogger",
    "AccessService",
    "ApplicationError",
    "AuthorizationEngine",
    "ConflictError",
    "CredentialResolver",
    "CredentialStore",
    "CredentialStoreScope",
    "DecisionPublisher",
    "IngestionLoop",
    "MessagePublisher",
    "MessagingFailureError",
    "NotFoundError",
    "StoreUnavailableError",
]
