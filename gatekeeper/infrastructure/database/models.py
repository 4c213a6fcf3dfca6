# gatekeeper/infrastructure/database/models.py

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.sql import func

from gatekeeper.infrastructure.database.session import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(255), nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Door(Base):
    __tablename__ = "doors"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=True)
    location = Column(String(255), nullable=True)
    active = Column(Boolean, nullable=False, default=True)


class DoorAccess(Base):
    """Allow-list entry: one row per (door, user)."""

    __tablename__ = "door_access"
    __table_args__ = (UniqueConstraint("door_id", "user_id", name="uq_door_access_door_user"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    door_id = Column(String(64), ForeignKey("doors.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    allowed = Column(Boolean, nullable=False, default=True)


class RfidCard(Base):
    __tablename__ = "rfid_cards"

    id = Column(Integer, primary_key=True, autoincrement=True)
    uid = Column(String(64), nullable=False, unique=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    active = Column(Boolean, nullable=False, default=True)


class Pin(Base):
    __tablename__ = "pins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    pin_hash = Column(String(255), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    active = Column(Boolean, nullable=False, default=True)


class AccessEventRecord(Base):
    """Append-only audit trail. Rows are inserted once and never updated by the gateway."""

    __tablename__ = "events"

    id = Column(BigInteger, primary_key=True, autoincrement=True)
    ts = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)
    door_id = Column(String(64), nullable=False, index=True)
    user_id = Column(Integer, nullable=True)
    credential_type = Column(String(16), nullable=False)
    presented_uid = Column(String(64), nullable=True)
    pin_sha = Column(String(255), nullable=True)
    result = Column(String(16), nullable=False)
    reason = Column(String(64), nullable=True)
