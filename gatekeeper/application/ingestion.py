"""Ingestion loop: one bounded queue, one consumer task. At most one event in flight."""

import asyncio
import logging
import uuid
from typing import Any, Awaitable, Callable, Optional

from gatekeeper.core.context import correlation_id_ctx
from gatekeeper.domain.models.access import InboundMessage

Handler = Callable[[InboundMessage], Awaitable[Any]]


class IngestionLoop:
    """
    The transport only calls submit(); a single consumer task takes messages off
    the queue and awaits the handler to completion before taking the next one.
    A failure in one event is logged and never stops the loop.
    """

    def __init__(
        self,
        handler: Handler,
        maxsize: int = 100,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._handler = handler
        self._queue: asyncio.Queue[InboundMessage] = asyncio.Queue(maxsize=maxsize)
        self._logger = logger or logging.getLogger(__name__)
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def submit(self, message: InboundMessage) -> None:
        """Enqueue one message; waits while the queue is full."""
        await self._queue.put(message)

    async def run(self) -> None:
        while True:
            message = await self._queue.get()
            try:
                await self._process(message)
            finally:
                self._queue.task_done()

    async def _process(self, message: InboundMessage) -> None:
        token = correlation_id_ctx.set(str(uuid.uuid4()))
        try:
            await self._handler(message)
        except Exception:
            self._logger.exception("event_processing_failed", extra={"topic": message.topic})
        finally:
            correlation_id_ctx.reset(token)

    def start(self) -> asyncio.Task:
        if self.running:
            raise RuntimeError("ingestion loop already running")
        self._task = asyncio.create_task(self.run(), name="gatekeeper-ingestion")
        return self._task

    async def join(self) -> None:
        """Wait until every queued message has been processed."""
        await self._queue.join()

    async def stop(self) -> None:
        """Process every message already queued, then cancel the consumer."""
        if self._task is None:
            return
        if self.running:
            await self._queue.join()
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
