"""Doors API router: list, create, patch and delete doors with their allow-lists."""

from typing import Annotated, List

from fastapi import APIRouter, Depends

from gatekeeper.api.dependencies import get_door_repository
from gatekeeper.domain.schemas.admin import DoorCreateRequest, DoorResponse, DoorUpdateRequest
from gatekeeper.infrastructure.database.admin_repository_db import DbDoorRepository

router = APIRouter()

DoorRepository = Annotated[DbDoorRepository, Depends(get_door_repository)]


@router.get("", response_model=List[DoorResponse])
async def list_doors(repository: DoorRepository):
    return [DoorResponse.model_validate(d) for d in await repository.list_doors()]


@router.get("/{door_id}", response_model=DoorResponse)
async def get_door(door_id: str, repository: DoorRepository):
    return DoorResponse.model_validate(await repository.get_door(door_id))


@router.post("", response_model=DoorResponse, status_code=201)
async def create_door(body: DoorCreateRequest, repository: DoorRepository):
    """Create a door; `allowed_user_ids` becomes its allow-list."""
    door = await repository.create_door(
        door_id=body.id,
        name=body.name,
        location=body.location,
        active=body.active,
        allowed_user_ids=body.allowed_user_ids,
    )
    return DoorResponse.model_validate(door)


@router.patch("/{door_id}", response_model=DoorResponse)
async def update_door(door_id: str, body: DoorUpdateRequest, repository: DoorRepository):
    """Partial update. Sending `allowed_user_ids` replaces the allow-list; the next event sees it."""
    door = await repository.update_door(door_id, body.changes(), allowed_user_ids=body.allowed_user_ids)
    return DoorResponse.model_validate(door)


@router.delete("/{door_id}")
async def delete_door(door_id: str, repository: DoorRepository):
    await repository.delete_door(door_id)
    return {"ok": True}
