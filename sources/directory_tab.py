from __future__ import annotations

import logging
from typing import List, Sequence

from models import DirectoryEntry, SheetKind
from services.columns import ColumnMap
from services.url_utils import extract_tab_id
from sources.base import TabContext, walk_admitted_rows
from sources.registry import register


logger = logging.getLogger(__name__)


class DirectoryTabBuilder:
    """Index tab: one row per tracked post and the link to its scraped tab."""

    kind = SheetKind.DIRECTORY

    def admit(self, columns: ColumnMap, row: Sequence[str], ctx: TabContext) -> bool:
        return bool(columns.cell(row, "post_url") or columns.cell(row, "sheet_link"))

    def build(self, rows: Sequence[Sequence[str]], ctx: TabContext) -> List[DirectoryEntry]:
        if len(rows) < 2:
            return []
        columns = ColumnMap(rows[0])
        entries: List[DirectoryEntry] = []
        for admitted in walk_admitted_rows(rows, self.admit, ctx, columns):
            row = admitted.cells
            sheet_reference = columns.cell(row, "sheet_link") or ""
            tab_id = extract_tab_id(sheet_reference)
            topic = columns.cell(row, "post topic") or ""
            if tab_id is None:
                logger.warning(
                    f"Directory row {admitted.sheet_row} ({topic or 'untitled'}) has no tab id in its sheet link",
                    extra={"step": "directory", "tab": ctx.label},
                )
            entries.append(DirectoryEntry(
                source_url=columns.cell(row, "post_url") or "",
                sheet_reference=sheet_reference,
                topic=topic,
                tab_id=tab_id,
            ))
        return entries


def _register():
    register(DirectoryTabBuilder.kind, DirectoryTabBuilder)


_register()
