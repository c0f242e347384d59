from __future__ import annotations

import logging
from typing import List, Sequence

from models import ApprovalState, MessageEntry, SheetKind
from services.columns import ColumnMap
from sources.base import TabContext, walk_admitted_rows
from sources.registry import register


logger = logging.getLogger(__name__)


def admit_message_row(columns: ColumnMap, row: Sequence[str], ctx: TabContext) -> bool:
    return bool(
        columns.cell(row, "first name")
        or columns.cell(row, "last name")
        or columns.cell(row, "profile url")
    )


class MessageTabBuilder:
    """Message queue tab: outbound messages and their approval state."""

    kind = SheetKind.MESSAGE_QUEUE

    def admit(self, columns: ColumnMap, row: Sequence[str], ctx: TabContext) -> bool:
        return admit_message_row(columns, row, ctx)

    def build(self, rows: Sequence[Sequence[str]], ctx: TabContext) -> List[MessageEntry]:
        if len(rows) < 2:
            return []
        columns = ColumnMap(rows[0])
        entries: List[MessageEntry] = []
        for admitted in walk_admitted_rows(rows, self.admit, ctx, columns):
            row = admitted.cells
            entries.append(MessageEntry(
                ordinal=admitted.ordinal,
                post_url=columns.cell(row, "linkedin post") or "",
                first_name=columns.cell(row, "first name") or "",
                last_name=columns.cell(row, "last name") or "",
                profile_url=columns.cell(row, "profile url") or "",
                headline=columns.cell(row, "headline"),
                company=columns.cell(row, "company"),
                approval_state=ApprovalState.parse(columns.cell(row, "approval")),
            ))
        logger.info(
            f"Parsed {len(entries)} message entries",
            extra={"step": "build_messages", "tab": ctx.label, "status": "ok"},
        )
        return entries


def _register():
    register(MessageTabBuilder.kind, MessageTabBuilder)


_register()
