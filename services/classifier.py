from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Union

from models.enums import SheetKind
from services.columns import ColumnMap


@dataclass(frozen=True)
class ColumnFlags:
    source_url: bool
    sheet_reference: bool
    first_name: bool
    last_name: bool
    profile_url: bool
    post_url: bool
    post_author: bool
    dm_body: bool
    approval: bool

    @property
    def directory_signature(self) -> bool:
        return self.source_url and self.sheet_reference

    @property
    def message_signature(self) -> bool:
        return self.dm_body and self.approval

    @property
    def profile_signature(self) -> bool:
        has_name = self.first_name or self.last_name
        has_link = self.profile_url or self.post_url or self.post_author
        return has_name and has_link


def detect_columns(headers: Union[Sequence[str], ColumnMap]) -> ColumnFlags:
    columns = headers if isinstance(headers, ColumnMap) else ColumnMap(headers)
    return ColumnFlags(
        source_url=columns.has("post_url"),
        sheet_reference=columns.has("sheet_link"),
        first_name=columns.has("first name"),
        last_name=columns.has("last name"),
        profile_url=columns.has("profile url"),
        post_url=columns.has("linkedin post"),
        post_author=columns.has("linkedin post user"),
        dm_body=columns.has("dm"),
        approval=columns.has("approval"),
    )


def classify_headers(
    headers: Union[Sequence[str], ColumnMap],
    hint: Optional[SheetKind] = None,
) -> SheetKind:
    """Decide which schema a tab follows from its header row alone.

    Order matters because the schemas overlap: directory first, then the
    DM+approval pair (more specific than the name/link pair), then profile
    data. ``hint`` is the role the caller fetched the tab for; it only
    refines a profile-data verdict, into lead data for the combined-leads
    tab or into a message queue when the tab carries an approval column.
    """
    flags = detect_columns(headers)
    if flags.directory_signature:
        return SheetKind.DIRECTORY
    if flags.message_signature:
        return SheetKind.MESSAGE_QUEUE
    if flags.profile_signature:
        if hint is SheetKind.LEAD_DATA:
            return SheetKind.LEAD_DATA
        if hint is SheetKind.MESSAGE_QUEUE and flags.approval:
            return SheetKind.MESSAGE_QUEUE
        return SheetKind.PROFILE_DATA
    return SheetKind.UNRECOGNIZED
