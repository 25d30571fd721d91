"""
FastAPI routes for user profiles and ban lookups.
"""

import logging
from typing import Any

from fastapi import APIRouter, status

from ummah_api.api.schemas import UserCreate, UserUpdate
from ummah_api.core.dependencies import StorageDep
from ummah_api.core.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Register a user")
async def create_user(payload: UserCreate, storage: StorageDep) -> dict[str, Any]:
    """
    Create a user after checking that the username and email are free.

    The check and the insert are separate calls; the unique constraints on
    the table still reject a concurrent duplicate.
    """
    if await storage.get_user_by_username(payload.username) is not None:
        raise ConflictError("Username already taken", details={"username": payload.username})
    if await storage.get_user_by_email(payload.email) is not None:
        raise ConflictError("Email already registered", details={"email": payload.email})

    user = await storage.create_user(payload.model_dump())
    logger.info(
        f"Created user {user['id']}",
        extra={"user_id": user["id"], "username": user["username"]},
    )
    return user


@router.get("/by-username/{username}", summary="Look up a user by username")
async def get_user_by_username(username: str, storage: StorageDep) -> dict[str, Any]:
    user = await storage.get_user_by_username(username)
    if user is None:
        raise NotFoundError("User not found", details={"username": username})
    return user


@router.get("/{user_id}", summary="Get a user")
async def get_user(user_id: str, storage: StorageDep) -> dict[str, Any]:
    user = await storage.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found", details={"user_id": user_id})
    return user


@router.patch("/{user_id}", summary="Update a user's profile")
async def update_user(
    user_id: str, payload: UserUpdate, storage: StorageDep
) -> dict[str, Any]:
    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("No fields to update", details={"user_id": user_id})

    user = await storage.update_user(user_id, changes)
    if user is None:
        raise NotFoundError("User not found", details={"user_id": user_id})

    logger.info(
        f"Updated user {user_id}",
        extra={"user_id": user_id, "fields": sorted(changes)},
    )
    return user


@router.get("/{user_id}/bans", summary="List a user's active bans")
async def get_user_bans(user_id: str, storage: StorageDep) -> list[dict[str, Any]]:
    return await storage.get_user_bans(user_id)


@router.get("/{user_id}/banned", summary="Check whether a ban is in effect")
async def is_user_banned(user_id: str, storage: StorageDep) -> dict[str, bool]:
    return {"banned": await storage.is_user_banned(user_id)}
