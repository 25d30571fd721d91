"""
Pydantic schemas for user API operations.
"""

from pydantic import Field, field_validator

from ummah_api.api.schemas._base import Payload


class UserCreate(Payload):
    """
    Schema for registering a new user.

    `role` and `verified` are not accepted here: new accounts always start as
    unverified regular users, and unknown body fields are ignored.
    """

    email: str = Field(
        ...,
        min_length=3,
        max_length=320,
        pattern=r"^[^@\s]+@[^@\s]+$",
        examples=["ayse@example.com"],
    )
    name: str = Field(..., min_length=1, max_length=255, examples=["Ayşe Yılmaz"])
    username: str = Field(
        ...,
        min_length=2,
        max_length=50,
        pattern="^[A-Za-z0-9_.]+$",
        examples=["ayse_y"],
    )
    avatar_url: str | None = None
    bio: str | None = Field(default=None, max_length=1000)
    location: str | None = None
    website: str | None = None


class UserUpdate(Payload):
    """
    Schema for a partial profile update.

    Only fields present in the request body are written. `name` may be
    omitted but never cleared; the other fields accept an explicit null.
    """

    name: str | None = Field(default=None, min_length=1, max_length=255)
    avatar_url: str | None = None
    bio: str | None = Field(default=None, max_length=1000)
    location: str | None = None
    website: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("name cannot be null")
        return value
