"""
FastAPI routes for comments, likes and bookmarks.

Each payload targets exactly one post or dua request; the schemas reject
bodies naming both or neither.
"""

import logging
from typing import Any

from fastapi import APIRouter, status

from ummah_api.api.schemas import CommentCreate, TargetToggle
from ummah_api.core.dependencies import StorageDep, ensure_not_banned

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Interactions"])


@router.post("/comments", status_code=status.HTTP_201_CREATED, summary="Add a comment")
async def create_comment(payload: CommentCreate, storage: StorageDep) -> dict[str, Any]:
    await ensure_not_banned(storage, payload.user_id)

    comment = await storage.create_comment(payload.model_dump())
    logger.info(
        f"Created comment {comment['id']}",
        extra={
            "comment_id": comment["id"],
            "post_id": payload.post_id,
            "dua_request_id": payload.dua_request_id,
        },
    )
    return comment


@router.post("/likes/toggle", summary="Like or unlike")
async def toggle_like(payload: TargetToggle, storage: StorageDep) -> dict[str, bool]:
    """Remove the like when present, add it otherwise. `liked` is the new state."""
    return await storage.toggle_like(payload.user_id, payload.post_id, payload.dua_request_id)


@router.post("/bookmarks/toggle", summary="Bookmark or remove bookmark")
async def toggle_bookmark(payload: TargetToggle, storage: StorageDep) -> dict[str, bool]:
    return await storage.toggle_bookmark(
        payload.user_id, payload.post_id, payload.dua_request_id
    )
