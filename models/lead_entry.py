from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class LeadEntry(BaseModel):
    """Row from the combined-leads tab."""

    ordinal: int
    post_url: str = ""
    first_name: str = ""
    last_name: str = ""
    profile_url: str = ""
    source_topic: str | None = None

    model_config = ConfigDict(extra="ignore", frozen=True)
