from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class DirectoryEntry(BaseModel):
    """One tracked post listed on the directory tab."""

    source_url: str = ""
    sheet_reference: str = ""
    topic: str = ""
    tab_id: int | None = None

    model_config = ConfigDict(extra="ignore", frozen=True)
