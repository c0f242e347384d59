from __future__ import annotations

from pydantic import BaseModel, ConfigDict, computed_field

from .enums import EngagementKind, LeadSource


class UnifiedLead(BaseModel):
    """Deduplicated outreach target merged from profile and lead rows."""

    source: LeadSource
    ordinal: int
    post_url: str = ""
    first_name: str = ""
    last_name: str = ""
    profile_url: str = ""
    company: str | None = None
    role: str | None = None
    headline: str | None = None
    engagement_kind: EngagementKind | None = None
    source_topic: str | None = None
    source_tab_id: int | None = None

    model_config = ConfigDict(extra="ignore", frozen=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def key(self) -> str:
        return f"{self.source.value}-{self.ordinal}"
