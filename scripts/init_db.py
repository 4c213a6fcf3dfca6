# scripts/init_db.py
"""Create the gatekeeper tables and seed one door, one user, one card and one PIN."""

import sys
from pathlib import Path

# Ensure project root is on the path when running this script directly
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import asyncio
from sqlalchemy import select
from gatekeeper.config.settings import get_settings
from gatekeeper.infrastructure.database.session import AsyncSessionLocal, engine, Base
from gatekeeper.infrastructure.database.models import Door, DoorAccess, Pin, RfidCard, User
from gatekeeper.security.pin_hashing import Pbkdf2PinHasher

DEMO_DOOR = "3"
DEMO_CARD = "AB12"
DEMO_PIN = "4321"


async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        existing = await db.execute(select(Door).where(Door.id == DEMO_DOOR))
        if existing.scalar_one_or_none() is not None:
            print("Demo data already present")
            return

        user = User(full_name="Demo User", active=True)
        db.add(user)
        db.add(Door(id=DEMO_DOOR, name="Main entrance", active=True))
        await db.flush()

        hasher = Pbkdf2PinHasher(iterations=get_settings().pin_hash_iterations)
        db.add_all(
            [
                DoorAccess(door_id=DEMO_DOOR, user_id=user.id, allowed=True),
                RfidCard(uid=DEMO_CARD, user_id=user.id, active=True),
                Pin(pin_hash=hasher.hash(DEMO_PIN), user_id=user.id, active=True),
            ]
        )
        await db.commit()
        print("Seeded user", user.id, "on door", DEMO_DOOR)

asyncio.run(init_db())
