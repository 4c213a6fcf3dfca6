# gatekeeper/infrastructure/messaging/rabbitmq_consumer.py

import logging
from typing import Awaitable, Callable, Iterable

import aio_pika
from aio_pika.abc import AbstractIncomingMessage

from gatekeeper.config.settings import settings
from gatekeeper.domain.models.access import InboundMessage

logger = logging.getLogger(__name__)

Submit = Callable[[InboundMessage], Awaitable[None]]


class RabbitMQConsumer:
    """
    Subscribes a durable queue to the presentation topics and hands every
    delivery to `submit` (the ingestion loop). Only enqueues; processing
    happens on the loop's single consumer task. Reconnection is left to
    aio-pika's robust connection; losses are logged.
    """

    def __init__(
        self,
        submit: Submit,
        topics: Iterable[str],
        url: str | None = None,
        exchange_name: str | None = None,
        queue_name: str | None = None,
    ):
        self._submit = submit
        self._topics = list(topics)
        self._url = url or settings.rabbitmq_url
        self._exchange_name = exchange_name or settings.exchange_name
        self._queue_name = queue_name or settings.queue_name
        self._connection = None
        self._channel = None
        self._queue = None
        self._consumer_tag = None

    async def start(self):
        self._connection = await aio_pika.connect_robust(self._url)
        self._connection.close_callbacks.add(self._on_connection_closed)
        self._connection.reconnect_callbacks.add(self._on_reconnected)
        self._channel = await self._connection.channel()
        await self._channel.set_qos(prefetch_count=1)

        exchange = await self._channel.declare_exchange(
            self._exchange_name,
            aio_pika.ExchangeType.TOPIC,
            durable=True,
        )
        self._queue = await self._channel.declare_queue(self._queue_name, durable=True)
        for topic in self._topics:
            await self._queue.bind(exchange, routing_key=topic)

        self._consumer_tag = await self._queue.consume(self.on_message)
        logger.info("consumer_started", extra={"queue": self._queue_name, "topics": self._topics})

    async def on_message(self, message: AbstractIncomingMessage) -> None:
        # Acked once handed to the ingestion queue, which is drained on shutdown.
        async with message.process():
            inbound = InboundMessage(
                topic=message.routing_key or "",
                payload=message.body.decode("utf-8", errors="replace"),
            )
            await self._submit(inbound)

    async def stop(self):
        if self._queue is not None and self._consumer_tag is not None:
            await self._queue.cancel(self._consumer_tag)
        if self._connection is not None:
            await self._connection.close()
        self._connection = None
        self._channel = None
        self._queue = None
        self._consumer_tag = None

    def _on_connection_closed(self, sender, exc=None) -> None:
        logger.error("consumer_connection_lost", extra={"error": str(exc) if exc else None})

    def _on_reconnected(self, sender) -> None:
        logger.info("consumer_reconnected")
