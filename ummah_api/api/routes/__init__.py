"""
HTTP route layer.

`register_routes` mounts every router under the API prefix.
"""

from fastapi import FastAPI

from .communities import router as communities_router
from .dua_requests import router as dua_requests_router
from .health import router as health_router
from .interactions import router as interactions_router
from .moderation import router as moderation_router
from .posts import router as posts_router
from .users import router as users_router

API_PREFIX = "/api"


def register_routes(app: FastAPI, prefix: str = API_PREFIX) -> None:
    """Include all API routers on `app`."""
    app.include_router(health_router, prefix=prefix)
    app.include_router(users_router, prefix=prefix)
    app.include_router(posts_router, prefix=prefix)
    app.include_router(dua_requests_router, prefix=prefix)
    app.include_router(interactions_router, prefix=prefix)
    app.include_router(communities_router, prefix=prefix)
    app.include_router(moderation_router, prefix=prefix)
