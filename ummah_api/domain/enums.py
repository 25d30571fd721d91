"""
Domain enums matching the values stored in the database.

The columns are plain strings guarded by check constraints, so these enums
are used for validation in the route layer and for defaults in storage.
"""

from enum import Enum


class UserRole(str, Enum):
    """Platform role of a user."""

    USER = "user"
    ADMIN = "admin"


class PostType(str, Enum):
    """Kind of media a post carries."""

    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"


class CommunityRole(str, Enum):
    """Role of a member inside a community."""

    ADMIN = "admin"
    MODERATOR = "moderator"
    MEMBER = "member"


class ReportStatus(str, Enum):
    """
    Moderation status of a report.

    Reports start PENDING and move to RESOLVED or DISMISSED.
    """

    PENDING = "pending"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


class BanType(str, Enum):
    """Ban duration class; TEMPORARY bans lapse at `expires_at`."""

    TEMPORARY = "temporary"
    PERMANENT = "permanent"
