"""Publishes granted/denied decisions on door-scoped topics."""

from typing import Protocol

from gatekeeper.application.exceptions import MessagingFailureError
from gatekeeper.domain.models.access import Decision


class MessagePublisher(Protocol):
    """Transport seam: publish a text body under a topic and wait for broker acknowledgement."""

    async def publish(self, topic: str, body: str) -> None:
        ...


class DecisionPublisher:
    """Topic is the per-outcome prefix followed by the door id; body is the literal decision."""

    def __init__(
        self,
        publisher: MessagePublisher,
        granted_prefix: str,
        denied_prefix: str,
    ) -> None:
        self._publisher = publisher
        self._prefixes = {
            Decision.GRANTED: granted_prefix,
            Decision.DENIED: denied_prefix,
        }

    def topic_for(self, decision: Decision, door_id: str) -> str:
        return f"{self._prefixes[decision]}{door_id}"

    async def publish(self, door_id: str, decision: Decision) -> str:
        """Publish and await acknowledgement. Returns the topic used. No retry here."""
        topic = self.topic_for(decision, door_id)
        try:
            await self._publisher.publish(topic, decision.value)
        except MessagingFailureError:
            raise
        except Exception as e:
            raise MessagingFailureError(f"Publish to {topic} failed: {e}") from e
        return topic
