"""
FastAPI routes for dua (prayer) requests and their comments.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Query, status

from ummah_api.api.schemas import DuaRequestCreate
from ummah_api.core.dependencies import StorageDep, ensure_not_banned
from ummah_api.core.errors import NotFoundError
from ummah_api.repos.storage import DEFAULT_LIMIT

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dua-requests", tags=["Dua Requests"])


@router.get("", summary="List recent dua requests")
async def list_dua_requests(
    storage: StorageDep, limit: Annotated[int, Query(ge=1, le=200)] = DEFAULT_LIMIT
) -> list[dict[str, Any]]:
    return await storage.get_dua_requests(limit=limit)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a dua request")
async def create_dua_request(payload: DuaRequestCreate, storage: StorageDep) -> dict[str, Any]:
    await ensure_not_banned(storage, payload.user_id)

    dua_request = await storage.create_dua_request(payload.model_dump())
    logger.info(
        f"Created dua request {dua_request['id']}",
        extra={
            "dua_request_id": dua_request["id"],
            "user_id": payload.user_id,
            "is_urgent": payload.is_urgent,
        },
    )
    return dua_request


@router.get("/{dua_request_id}", summary="Get a dua request")
async def get_dua_request(dua_request_id: str, storage: StorageDep) -> dict[str, Any]:
    dua_request = await storage.get_dua_request_by_id(dua_request_id)
    if dua_request is None:
        raise NotFoundError("Dua request not found", details={"dua_request_id": dua_request_id})
    return dua_request


@router.get("/{dua_request_id}/comments", summary="List comments on a dua request")
async def list_dua_request_comments(
    dua_request_id: str, storage: StorageDep
) -> list[dict[str, Any]]:
    return await storage.get_comments_by_dua_request_id(dua_request_id)
