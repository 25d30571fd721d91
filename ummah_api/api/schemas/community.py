"""
Pydantic schemas for communities and events.
"""

from datetime import datetime

from pydantic import Field, model_validator

from ummah_api.api.schemas._base import Payload


class CommunityCreate(Payload):
    """Schema for creating a community; the creator counts as its first member."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    category: str | None = None
    is_private: bool = False
    cover_image: str | None = None
    created_by: str = Field(..., min_length=1)


class EventCreate(Payload):
    """Schema for creating an event."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    type: str | None = None
    location: str | None = None
    address: str | None = None
    start_date: datetime
    end_date: datetime | None = None
    organizer_name: str | None = None
    max_attendees: int | None = Field(default=None, ge=1)
    price: str | None = None
    is_online: bool = False
    image_url: str | None = None
    created_by: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_dates(self) -> "EventCreate":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class Membership(Payload):
    """Schema for joining a community or registering for an event."""

    user_id: str = Field(..., min_length=1)
