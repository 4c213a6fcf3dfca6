from gatekeeper.domain.schemas.access_event import AccessEventResponse
from gatekeeper.domain.schemas.admin import (
    DoorCreateRequest,
    DoorResponse,
    DoorUpdateRequest,
    UserCreateRequest,
    UserResponse,
    UserUpdateRequest,
)

__all__ = [
    "AccessEventResponse",
    "DoorCreateRequest",
    "DoorResponse",
    "DoorUpdateRequest",
    "UserCreateRequest",
    "UserResponse",
    "UserUpdateRequest",
]
