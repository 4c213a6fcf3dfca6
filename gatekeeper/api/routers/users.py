"""Users API router: list, create, patch and delete users."""

from typing import Annotated, List

from fastapi import APIRouter, Depends

from gatekeeper.api.dependencies import get_user_repository
from gatekeeper.domain.schemas.admin import UserCreateRequest, UserResponse, UserUpdateRequest
from gatekeeper.infrastructure.database.admin_repository_db import DbUserRepository

router = APIRouter()

UserRepository = Annotated[DbUserRepository, Depends(get_user_repository)]


@router.get("", response_model=List[UserResponse])
async def list_users(repository: UserRepository):
    """Newest users first."""
    return [UserResponse.model_validate(u) for u in await repository.list_users()]


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(body: UserCreateRequest, repository: UserRepository):
    user = await repository.create_user(full_name=body.full_name, active=body.active)
    return UserResponse.model_validate(user)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(user_id: int, body: UserUpdateRequest, repository: UserRepository):
    """Partial update. An inactive user's cards and PINs stop resolving immediately."""
    user = await repository.update_user(user_id, body.changes())
    return UserResponse.model_validate(user)


@router.delete("/{user_id}")
async def delete_user(user_id: int, repository: UserRepository):
    await repository.delete_user(user_id)
    return {"ok": True}
