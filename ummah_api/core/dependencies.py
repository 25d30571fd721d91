"""
FastAPI dependency injection utilities.

The application factory owns the `Storage` instance and keeps it on
`app.state`; routes receive it through the `StorageDep` alias.
"""

from typing import Annotated

from fastapi import Depends, Request

from ummah_api.core.errors import ForbiddenError
from ummah_api.repos.storage import Storage


def get_storage(request: Request) -> Storage:
    """Storage facade of the running application."""
    return request.app.state.storage


# Type alias for the storage dependency
StorageDep = Annotated[Storage, Depends(get_storage)]


async def ensure_not_banned(storage: Storage, user_id: str) -> None:
    """
    Reject content creation by a user with a ban in effect.

    Raises:
        ForbiddenError: If the user is currently banned
    """
    if await storage.is_user_banned(user_id):
        raise ForbiddenError("User is banned", details={"user_id": user_id})
