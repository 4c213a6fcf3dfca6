"""Pydantic schemas for the audit events API. Strict validation, no DB or infrastructure."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from gatekeeper.domain.models.access import CredentialKind, Decision


class AccessEventResponse(BaseModel):
    """One persisted audit event as returned by GET /events."""

    id: int
    ts: datetime
    door_id: str
    user_id: Optional[int] = None
    credential_type: CredentialKind
    presented_uid: Optional[str] = Field(None, description="Raw card uid; RFID only")
    result: Decision
    reason: Optional[str] = None

    model_config = {"from_attributes": True}
