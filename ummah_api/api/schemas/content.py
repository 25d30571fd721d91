"""
Pydantic schemas for posts, dua requests, comments and the like/bookmark toggles.
"""

from pydantic import Field

from ummah_api.api.schemas._base import Payload, TargetedPayload
from ummah_api.domain.enums import PostType

# ============================================================================
# Posts and Dua Requests
# ============================================================================


class PostCreate(Payload):
    """Schema for creating a post."""

    user_id: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1, max_length=5000)
    type: PostType = PostType.TEXT
    media_url: str | None = None
    category: str | None = None
    tags: list[str] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "user_id": "8c661c6c-04a2-4323-a63a-895886883f7c",
                    "content": "Cuma mübarek olsun!",
                    "type": "text",
                    "category": "Genel",
                    "tags": ["cuma"],
                }
            ]
        }
    }


class DuaRequestCreate(Payload):
    """Schema for creating a dua (prayer) request."""

    user_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1, max_length=5000)
    category: str | None = None
    is_urgent: bool = False
    is_anonymous: bool = False
    tags: list[str] = Field(default_factory=list)


# ============================================================================
# Comments and Toggles
# ============================================================================


class CommentCreate(TargetedPayload):
    """Schema for commenting on exactly one post or dua request."""

    user_id: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1, max_length=2000)


class TargetToggle(TargetedPayload):
    """Schema for liking or bookmarking exactly one post or dua request."""

    user_id: str = Field(..., min_length=1)
