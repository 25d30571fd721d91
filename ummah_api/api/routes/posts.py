"""
FastAPI routes for posts and their comments.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Query, Response, status

from ummah_api.api.schemas import PostCreate
from ummah_api.core.dependencies import StorageDep, ensure_not_banned
from ummah_api.core.errors import NotFoundError
from ummah_api.repos.storage import DEFAULT_LIMIT

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["Posts"])

Limit = Annotated[int, Query(ge=1, le=200)]


@router.get("", summary="List recent posts")
async def list_posts(storage: StorageDep, limit: Limit = DEFAULT_LIMIT) -> list[dict[str, Any]]:
    """Newest posts first, each with its author under `users`."""
    return await storage.get_posts(limit=limit)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a post")
async def create_post(payload: PostCreate, storage: StorageDep) -> dict[str, Any]:
    await ensure_not_banned(storage, payload.user_id)

    post = await storage.create_post(payload.model_dump())
    logger.info(
        f"Created post {post['id']}",
        extra={"post_id": post["id"], "user_id": payload.user_id},
    )
    return post


@router.get("/{post_id}", summary="Get a post")
async def get_post(post_id: str, storage: StorageDep) -> dict[str, Any]:
    post = await storage.get_post_by_id(post_id)
    if post is None:
        raise NotFoundError("Post not found", details={"post_id": post_id})
    return post


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a post")
async def delete_post(post_id: str, storage: StorageDep) -> Response:
    if not await storage.delete_post(post_id):
        raise NotFoundError("Post not found", details={"post_id": post_id})

    logger.info(f"Deleted post {post_id}", extra={"post_id": post_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{post_id}/comments", summary="List comments on a post")
async def list_post_comments(post_id: str, storage: StorageDep) -> list[dict[str, Any]]:
    return await storage.get_comments_by_post_id(post_id)
