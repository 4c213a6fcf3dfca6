# scripts/publish_presentation.py
"""Publish one credential presentation, e.g.: python scripts/publish_presentation.py card AB12 3"""

import sys
from pathlib import Path

# Ensure project root is on the path when running this script directly
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import asyncio
from gatekeeper.config.settings import get_settings
from gatekeeper.infrastructure.messaging.rabbitmq_publisher import RabbitMQPublisher

async def publish(kind: str, identifier: str, door_id: str):
    settings = get_settings()
    topic = settings.card_topic if kind == "card" else settings.pin_topic
    publisher = RabbitMQPublisher()
    try:
        await publisher.publish(topic, f"{identifier},{door_id}")
    finally:
        await publisher.close()
    print("Published on", topic)

if len(sys.argv) != 4 or sys.argv[1] not in ("card", "pin"):
    print("usage: publish_presentation.py card|pin <identifier> <door_id>")
    sys.exit(2)

asyncio.run(publish(sys.argv[1], sys.argv[2], sys.argv[3]))
