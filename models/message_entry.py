from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from .enums import ApprovalState


class MessageEntry(BaseModel):
    """Outbound message awaiting approval on the message-queue tab."""

    ordinal: int
    post_url: str = ""
    first_name: str = ""
    last_name: str = ""
    profile_url: str = ""
    headline: str | None = None
    company: str | None = None
    approval_state: ApprovalState = ApprovalState.PENDING

    model_config = ConfigDict(extra="ignore")
