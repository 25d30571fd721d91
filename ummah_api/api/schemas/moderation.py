"""
Pydantic schemas for reports and user bans.
"""

from datetime import datetime
from typing import ClassVar

from pydantic import Field, model_validator

from ummah_api.api.schemas._base import Payload, TargetedPayload
from ummah_api.domain.enums import BanType, ReportStatus


class ReportCreate(TargetedPayload):
    """Schema for reporting a user, optionally about one post or dua request."""

    target_required: ClassVar[bool] = False

    reporter_id: str = Field(..., min_length=1)
    reported_user_id: str = Field(..., min_length=1)
    reason: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)


class ReportStatusUpdate(Payload):
    """Schema for an admin decision on a report."""

    status: ReportStatus
    admin_notes: str | None = None


class BanCreate(Payload):
    """
    Schema for banning a user.

    Temporary bans need an expiry; permanent bans must not have one.
    """

    user_id: str = Field(..., min_length=1)
    banned_by: str = Field(..., min_length=1)
    reason: str = Field(..., min_length=1, max_length=1000)
    ban_type: BanType
    expires_at: datetime | None = None

    @model_validator(mode="after")
    def check_expiry(self) -> "BanCreate":
        if self.ban_type == BanType.TEMPORARY and self.expires_at is None:
            raise ValueError("expires_at is required for temporary bans")
        if self.ban_type == BanType.PERMANENT and self.expires_at is not None:
            raise ValueError("expires_at must not be set for permanent bans")
        return self
