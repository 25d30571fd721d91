"""
FastAPI routes for content reports and user bans.

Moderation endpoints carry no authorization of their own; the deployment is
expected to restrict them to admins at the edge.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Query, status

from ummah_api.api.schemas import BanCreate, ReportCreate, ReportStatusUpdate
from ummah_api.core.dependencies import StorageDep
from ummah_api.core.errors import NotFoundError
from ummah_api.repos.storage import DEFAULT_LIMIT

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Moderation"])


@router.post("/reports", status_code=status.HTTP_201_CREATED, summary="Report a user or content")
async def create_report(payload: ReportCreate, storage: StorageDep) -> dict[str, Any]:
    report = await storage.create_report(payload.model_dump())
    logger.info(
        f"Created report {report['id']}",
        extra={
            "report_id": report["id"],
            "reported_user_id": payload.reported_user_id,
            "reason": payload.reason,
        },
    )
    return report


@router.get("/reports", summary="List reports for review")
async def list_reports(
    storage: StorageDep, limit: Annotated[int, Query(ge=1, le=200)] = DEFAULT_LIMIT
) -> list[dict[str, Any]]:
    """Newest first, with reporter, reported user and reported content attached."""
    return await storage.get_reports(limit=limit)


@router.patch("/reports/{report_id}", summary="Resolve or dismiss a report")
async def update_report_status(
    report_id: str, payload: ReportStatusUpdate, storage: StorageDep
) -> dict[str, Any]:
    report = await storage.update_report_status(report_id, payload.status, payload.admin_notes)
    if report is None:
        raise NotFoundError("Report not found", details={"report_id": report_id})

    logger.info(
        f"Report {report_id} moved to {payload.status}",
        extra={"report_id": report_id, "status": payload.status},
    )
    return report


@router.post("/bans", status_code=status.HTTP_201_CREATED, summary="Ban a user")
async def ban_user(payload: BanCreate, storage: StorageDep) -> dict[str, Any]:
    ban = await storage.ban_user(payload.model_dump())
    logger.warning(
        f"User {payload.user_id} banned by {payload.banned_by}",
        extra={
            "user_id": payload.user_id,
            "banned_by": payload.banned_by,
            "ban_type": payload.ban_type,
        },
    )
    return ban
