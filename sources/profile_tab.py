from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from models import EngagementKind, ProfileEntry, SheetKind
from services.columns import ColumnMap
from sources.base import TabContext, admit_contact_row, post_url_cell, walk_admitted_rows
from sources.registry import register


logger = logging.getLogger(__name__)


def classify_engagement(value: Optional[str]) -> Optional[EngagementKind]:
    """Anything mentioning a comment is COMMENTED; any other non-blank value is LIKED."""
    if not value or not value.strip():
        return None
    if "comment" in value.strip().lower():
        return EngagementKind.COMMENTED
    return EngagementKind.LIKED


class ProfileTabBuilder:
    """Scraped post tab (one row per person who liked or commented)."""

    kind = SheetKind.PROFILE_DATA

    def admit(self, columns: ColumnMap, row: Sequence[str], ctx: TabContext) -> bool:
        return admit_contact_row(columns, row, ctx)

    def build(self, rows: Sequence[Sequence[str]], ctx: TabContext) -> List[ProfileEntry]:
        if len(rows) < 2:
            return []
        columns = ColumnMap(rows[0])
        entries: List[ProfileEntry] = []
        for admitted in walk_admitted_rows(rows, self.admit, ctx, columns):
            row = admitted.cells
            entries.append(ProfileEntry(
                ordinal=admitted.ordinal,
                post_author=columns.cell(row, "linkedin post user"),
                post_url=post_url_cell(columns, row, ctx),
                first_name=columns.cell(row, "first name") or "",
                last_name=columns.cell(row, "last name") or "",
                profile_url=columns.cell(row, "profile url") or "",
                company=columns.cell(row, "company"),
                role=columns.cell(row, "role"),
                headline=columns.cell(row, "headline"),
                about=columns.cell(row, "about"),
                engagement_kind=classify_engagement(columns.cell(row, "engagement type", "engagement")),
                comment_text=columns.cell(row, "comment text", "comment"),
                source_tab_id=ctx.tab_id,
                source_topic=ctx.topic or None,
            ))
        logger.info(
            f"Parsed {len(entries)} profile entries from {len(rows) - 1} data rows",
            extra={"step": "build_profiles", "tab": ctx.label, "status": "ok"},
        )
        return entries


def _register():
    register(ProfileTabBuilder.kind, ProfileTabBuilder)


_register()
