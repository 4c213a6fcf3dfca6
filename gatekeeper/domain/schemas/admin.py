"""Pydantic schemas for user and door administration. Strict validation, no DB or infrastructure."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

# Door ids travel as the second payload field and as the last routing-key word.
DOOR_ID_PATTERN = r"^[A-Za-z0-9_-]+$"


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class UserCreateRequest(BaseModel):
    model_config = {"str_strip_whitespace": True}

    full_name: str = Field(..., min_length=1, max_length=255)
    active: bool = True


class UserUpdateRequest(BaseModel):
    """Partial update: only the fields sent are changed."""

    model_config = {"str_strip_whitespace": True}

    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    active: Optional[bool] = None

    @model_validator(mode="after")
    def at_least_one_non_null_field(self) -> "UserUpdateRequest":
        changes = self.changes()
        if not changes:
            raise ValueError("at least one of full_name, active is required")
        if any(value is None for value in changes.values()):
            raise ValueError("full_name and active cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class UserResponse(BaseModel):
    id: int
    full_name: str
    active: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# ---------------------------------------------------------------------------
# Doors
# ---------------------------------------------------------------------------

class DoorCreateRequest(BaseModel):
    model_config = {"str_strip_whitespace": True}

    id: str = Field(..., min_length=1, max_length=64, pattern=DOOR_ID_PATTERN)
    name: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    active: bool = True
    allowed_user_ids: List[int] = Field(default_factory=list, description="Door allow-list")

    @field_validator("allowed_user_ids")
    @classmethod
    def dedupe_user_ids(cls, v: List[int]) -> List[int]:
        return list(dict.fromkeys(v))


class DoorUpdateRequest(BaseModel):
    """Partial update. `allowed_user_ids`, when sent, replaces the whole allow-list."""

    model_config = {"str_strip_whitespace": True}

    name: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    active: Optional[bool] = None
    allowed_user_ids: Optional[List[int]] = None

    @field_validator("allowed_user_ids")
    @classmethod
    def dedupe_user_ids(cls, v: Optional[List[int]]) -> Optional[List[int]]:
        return None if v is None else list(dict.fromkeys(v))

    @model_validator(mode="after")
    def at_least_one_field(self) -> "DoorUpdateRequest":
        changes = self.model_dump(exclude_unset=True)
        if not changes:
            raise ValueError("at least one field is required")
        if any(field in changes and changes[field] is None for field in ("active", "allowed_user_ids")):
            raise ValueError("active and allowed_user_ids cannot be null")
        return self

    def changes(self) -> dict:
        """Column changes only; name/location may be cleared with null."""
        return self.model_dump(exclude_unset=True, exclude={"allowed_user_ids"})


class DoorResponse(BaseModel):
    id: str
    name: Optional[str] = None
    location: Optional[str] = None
    active: bool
    allowed_user_ids: List[int] = Field(default_factory=list)
