"""Shared pydantic bases for request payloads."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, model_validator


class Payload(BaseModel):
    """Base for request bodies; enum fields are dumped as their string values."""

    model_config = ConfigDict(use_enum_values=True, extra="ignore")


class TargetedPayload(Payload):
    """
    Payload pointing at a post or a dua request.

    Setting both targets is always rejected. When `target_required` is True
    exactly one of them must be set.
    """

    target_required: ClassVar[bool] = True

    post_id: str | None = None
    dua_request_id: str | None = None

    @model_validator(mode="after")
    def check_target(self) -> "TargetedPayload":
        if self.post_id and self.dua_request_id:
            raise ValueError("Only one of post_id or dua_request_id may be set")
        if self.target_required and not (self.post_id or self.dua_request_id):
            raise ValueError("One of post_id or dua_request_id is required")
        return self
