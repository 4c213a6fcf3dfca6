"""Gateway runtime: wires consumer -> ingestion loop -> access service -> publisher."""

import logging

from gatekeeper.application.access_service import AccessService
from gatekeeper.application.audit_logger import AccessAuditLogger
from gatekeeper.application.authorization import AuthorizationEngine
from gatekeeper.application.credential_resolver import CredentialResolver
from gatekeeper.application.credential_store import CredentialStoreScope
from gatekeeper.application.decision_publisher import DecisionPublisher
from gatekeeper.application.ingestion import IngestionLoop
from gatekeeper.config.settings import AppSettings
from gatekeeper.domain.models.access import CredentialKind
from gatekeeper.infrastructure.messaging.rabbitmq_consumer import RabbitMQConsumer
from gatekeeper.infrastructure.messaging.rabbitmq_publisher import RabbitMQPublisher
from gatekeeper.observability.metrics import MetricsCollector
from gatekeeper.security.pin_hashing import Pbkdf2PinHasher

logger = logging.getLogger(__name__)


class AccessGateway:
    """
    Owns the bus connections and the single ingestion task.
    start() raises if the broker cannot be reached; that is the only fatal path.
    """

    def __init__(
        self,
        consumer: RabbitMQConsumer,
        publisher: RabbitMQPublisher,
        ingestion: IngestionLoop,
        service: AccessService,
    ) -> None:
        self.consumer = consumer
        self.publisher = publisher
        self.ingestion = ingestion
        self.service = service

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        store_scope: CredentialStoreScope,
        metrics: MetricsCollector,
    ) -> "AccessGateway":
        hasher = Pbkdf2PinHasher(iterations=settings.pin_hash_iterations)
        publisher = RabbitMQPublisher(
            url=settings.rabbitmq_url,
            exchange_name=settings.exchange_name,
        )
        topic_kinds = {
            settings.card_topic: CredentialKind.RFID,
            settings.pin_topic: CredentialKind.PIN,
        }
        service = AccessService(
            store_scope=store_scope,
            resolver=CredentialResolver(verifier=hasher),
            authorizer=AuthorizationEngine(),
            audit_logger=AccessAuditLogger(hasher=hasher),
            publisher=DecisionPublisher(
                publisher,
                granted_prefix=settings.granted_topic_prefix,
                denied_prefix=settings.denied_topic_prefix,
            ),
            topic_kinds=topic_kinds,
            metrics=metrics,
            logger=logging.getLogger("gatekeeper.access"),
        )
        ingestion = IngestionLoop(handler=service.handle, maxsize=settings.inbox_maxsize)
        consumer = RabbitMQConsumer(
            submit=ingestion.submit,
            topics=topic_kinds.keys(),
            url=settings.rabbitmq_url,
            exchange_name=settings.exchange_name,
            queue_name=settings.queue_name,
        )
        return cls(consumer=consumer, publisher=publisher, ingestion=ingestion, service=service)

    async def start(self) -> None:
        await self.publisher.connect()
        self.ingestion.start()
        try:
            await self.consumer.start()
        except Exception:
            await self.ingestion.stop()
            await self.publisher.close()
            raise
        logger.info("gateway_started")

    async def stop(self) -> None:
        await self.consumer.stop()
        await self.ingestion.stop()
        await self.publisher.close()
        logger.info("gateway_stopped")
