import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from ummah_api.core.dependencies import StorageDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(storage: StorageDep) -> JSONResponse:
    """Readiness probe: verifies database connectivity.

    Returns:
      - 200 when the database answers (always, in demo mode)
      - 503 when the probe query fails
    """
    mode = "demo" if storage.demo_mode else "live"
    if await storage.check_health():
        return JSONResponse(status_code=status.HTTP_200_OK, content={"ok": True, "mode": mode})

    # The storage layer has already logged the failure with its cause
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"ok": False, "mode": mode, "db": "unavailable"},
    )


@router.get("/status")
def database_status(storage: StorageDep) -> dict:
    """Describe which storage backends are active."""
    return storage.get_database_status()
