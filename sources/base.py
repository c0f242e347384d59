from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Protocol, Sequence

from models.enums import SheetKind
from services.columns import ColumnMap
from services.csv_codec import is_blank_row


@dataclass(frozen=True)
class TabContext:
    """What the caller knows about a tab before reading it."""

    tab_id: Optional[int] = None
    tab_name: Optional[str] = None
    topic: Optional[str] = None
    # Post URL from the directory row that points at this tab
    source_url: Optional[str] = None

    @property
    def label(self) -> str:
        if self.tab_id is not None:
            return f"gid={self.tab_id}"
        return f"name={self.tab_name or '?'}"


@dataclass(frozen=True)
class AdmittedRow:
    ordinal: int
    # 1-based row number as shown in the sheet; the header is row 1
    sheet_row: int
    cells: Sequence[str]


AdmissionRule = Callable[[ColumnMap, Sequence[str], TabContext], bool]


def walk_admitted_rows(
    rows: Sequence[Sequence[str]],
    admit: AdmissionRule,
    ctx: Optional[TabContext] = None,
    columns: Optional[ColumnMap] = None,
) -> Iterator[AdmittedRow]:
    """Yield data rows that pass ``admit``, numbered 1..n over admitted rows only.

    This is the only place ordinals are assigned. Builders use it on load and
    the approval updater uses it again on a fresh export to turn an ordinal
    back into a sheet row, so both always agree.
    """
    if len(rows) < 2:
        return
    ctx = ctx or TabContext()
    columns = columns or ColumnMap(rows[0])
    ordinal = 0
    for i in range(1, len(rows)):
        row = rows[i]
        if is_blank_row(row):
            continue
        if not admit(columns, row, ctx):
            continue
        ordinal += 1
        yield AdmittedRow(ordinal=ordinal, sheet_row=i + 1, cells=row)


def post_url_cell(columns: ColumnMap, row: Sequence[str], ctx: TabContext) -> str:
    return columns.cell(row, "linkedin post") or (ctx.source_url or "").strip()


def admit_contact_row(columns: ColumnMap, row: Sequence[str], ctx: TabContext) -> bool:
    """At least one name part, and at least one of profile URL, post URL, post author."""
    if not (columns.cell(row, "first name") or columns.cell(row, "last name")):
        return False
    return bool(
        columns.cell(row, "profile url")
        or post_url_cell(columns, row, ctx)
        or columns.cell(row, "linkedin post user")
    )


class TabBuilder(Protocol):
    kind: SheetKind

    def admit(self, columns: ColumnMap, row: Sequence[str], ctx: TabContext) -> bool:
        ...

    def build(self, rows: Sequence[Sequence[str]], ctx: TabContext) -> List:
        ...
