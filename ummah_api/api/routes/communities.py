"""
FastAPI routes for communities and events.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Query, status

from ummah_api.api.schemas import CommunityCreate, EventCreate, Membership
from ummah_api.core.dependencies import StorageDep
from ummah_api.repos.storage import DEFAULT_LIMIT

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Communities"])

Limit = Annotated[int, Query(ge=1, le=200)]

# ============================================================================
# Communities
# ============================================================================


@router.get("/communities", summary="List communities")
async def list_communities(
    storage: StorageDep, limit: Limit = DEFAULT_LIMIT
) -> list[dict[str, Any]]:
    return await storage.get_communities(limit=limit)


@router.post("/communities", status_code=status.HTTP_201_CREATED, summary="Create a community")
async def create_community(payload: CommunityCreate, storage: StorageDep) -> dict[str, Any]:
    community = await storage.create_community(payload.model_dump())
    logger.info(
        f"Created community {community['id']}",
        extra={"community_id": community["id"], "created_by": payload.created_by},
    )
    return community


@router.post(
    "/communities/{community_id}/join",
    status_code=status.HTTP_201_CREATED,
    summary="Join a community",
)
async def join_community(
    community_id: str, payload: Membership, storage: StorageDep
) -> dict[str, Any]:
    return await storage.join_community(community_id, payload.user_id)


# ============================================================================
# Events
# ============================================================================


@router.get("/events", summary="List events")
async def list_events(storage: StorageDep, limit: Limit = DEFAULT_LIMIT) -> list[dict[str, Any]]:
    return await storage.get_events(limit=limit)


@router.post("/events", status_code=status.HTTP_201_CREATED, summary="Create an event")
async def create_event(payload: EventCreate, storage: StorageDep) -> dict[str, Any]:
    event = await storage.create_event(payload.model_dump())
    logger.info(
        f"Created event {event['id']}",
        extra={"event_id": event["id"], "created_by": payload.created_by},
    )
    return event


@router.post(
    "/events/{event_id}/attend",
    status_code=status.HTTP_201_CREATED,
    summary="Register for an event",
)
async def attend_event(event_id: str, payload: Membership, storage: StorageDep) -> dict[str, Any]:
    return await storage.attend_event(event_id, payload.user_id)
