# gatekeeper/infrastructure/messaging/rabbitmq_publisher.py

import logging

import aio_pika

from gatekeeper.config.settings import settings

logger = logging.getLogger(__name__)


class RabbitMQPublisher:
    """
    Publishes text bodies on a topic exchange. The channel runs with publisher
    confirms, so publish() returns only once the broker has acknowledged the
    message (at-least-once).
    """

    def __init__(
        self,
        url: str | None = None,
        exchange_name: str | None = None,
    ):
        self._url = url or settings.rabbitmq_url
        self._exchange_name = exchange_name or settings.exchange_name
        self._connection = None
        self._channel = None
        self._exchange = None

    async def connect(self):
        self._connection = await aio_pika.connect_robust(self._url)
        self._connection.close_callbacks.add(self._on_connection_closed)
        self._connection.reconnect_callbacks.add(self._on_reconnected)
        self._channel = await self._connection.channel(publisher_confirms=True)
        self._exchange = await self._channel.declare_exchange(
            self._exchange_name,
            aio_pika.ExchangeType.TOPIC,
            durable=True,
        )

    async def publish(self, topic: str, body: str) -> None:
        if not self._exchange:
            await self.connect()

        msg = aio_pika.Message(
            body=body.encode("utf-8"),
            content_type="text/plain",
            delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
        )

        await self._exchange.publish(msg, routing_key=topic)

    async def close(self) -> None:
        if self._connection is not None:
            await self._connection.close()
        self._connection = None
        self._channel = None
        self._exchange = None

    def _on_connection_closed(self, sender, exc=None) -> None:
        logger.error("publisher_connection_lost", extra={"error": str(exc) if exc else None})

    def _on_reconnected(self, sender) -> None:
        logger.info("publisher_reconnected")
