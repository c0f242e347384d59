from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums import ApprovalState


class ApprovalUpdateRequest(BaseModel):
    """Body of a message approval change coming from the presentation layer."""

    ordinal: int = Field(gt=0)
    target_state: ApprovalState = Field(alias="targetState")
    post_url: str | None = Field(default=None, alias="postUrl")
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    current_state: ApprovalState | None = Field(default=None, alias="currentState")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ApprovalResult(BaseModel):
    success: bool
    message: str | None = None
    error: str | None = None
    details: str | None = None
    data: dict[str, Any] | None = None
    # Status the web layer answers with; never part of the body
    http_status: int = Field(default=200, exclude=True)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
