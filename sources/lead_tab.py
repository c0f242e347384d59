from __future__ import annotations

import logging
from typing import List, Sequence

from models import LeadEntry, SheetKind
from services.columns import ColumnMap
from sources.base import TabContext, admit_contact_row, post_url_cell, walk_admitted_rows
from sources.registry import register


logger = logging.getLogger(__name__)


class LeadTabBuilder:
    """Combined-leads tab: merged lead list without engagement details."""

    kind = SheetKind.LEAD_DATA

    def admit(self, columns: ColumnMap, row: Sequence[str], ctx: TabContext) -> bool:
        return admit_contact_row(columns, row, ctx)

    def build(self, rows: Sequence[Sequence[str]], ctx: TabContext) -> List[LeadEntry]:
        if len(rows) < 2:
            return []
        columns = ColumnMap(rows[0])
        entries = [
            LeadEntry(
                ordinal=admitted.ordinal,
                post_url=post_url_cell(columns, admitted.cells, ctx),
                first_name=columns.cell(admitted.cells, "first name") or "",
                last_name=columns.cell(admitted.cells, "last name") or "",
                profile_url=columns.cell(admitted.cells, "profile url") or "",
                source_topic=columns.cell(admitted.cells, "post topic") or ctx.topic or None,
            )
            for admitted in walk_admitted_rows(rows, self.admit, ctx, columns)
        ]
        logger.info(
            f"Parsed {len(entries)} lead entries",
            extra={"step": "build_leads", "tab": ctx.label, "status": "ok"},
        )
        return entries


def _register():
    register(LeadTabBuilder.kind, LeadTabBuilder)


_register()
