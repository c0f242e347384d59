from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from .enums import EngagementKind


class ProfileEntry(BaseModel):
    """Scraped engagement/profile row from a post tab."""

    ordinal: int
    post_author: str | None = None
    post_url: str = ""
    first_name: str = ""
    last_name: str = ""
    profile_url: str = ""
    company: str | None = None
    role: str | None = None
    headline: str | None = None
    about: str | None = None
    engagement_kind: EngagementKind | None = None
    comment_text: str | None = None
    source_tab_id: int | None = None
    source_topic: str | None = None

    model_config = ConfigDict(extra="ignore", frozen=True)
