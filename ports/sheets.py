from __future__ import annotations

from typing import List, Optional, Protocol


class SheetReaderPort(Protocol):
    """Reads one tab of the document as decoded CSV rows, header first.

    Implementations fetch fresh on every call and raise
    ``sources.sheet_export.SheetFetchError`` when the tab cannot be read.
    """

    def fetch_rows(self, tab_id: Optional[int] = None, tab_name: Optional[str] = None) -> List[List[str]]:
        ...
