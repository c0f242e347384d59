from __future__ import annotations

import logging
from typing import List, Optional

from config.settings import Settings, get_settings
from models import DirectoryEntry, SheetKind
from pipelines.runner import RunContext
from ports import SheetReaderPort
from services.classifier import classify_headers
from sources.base import TabContext
from sources.registry import get_builder
from sources.sheet_export import SheetFetchError


logger = logging.getLogger(__name__)


class LoadDirectory:
    """Find the post directory: configured tab id first, then each fallback tab name."""

    def __init__(self, reader: SheetReaderPort, settings: Optional[Settings] = None) -> None:
        self.reader = reader
        self.settings = settings or get_settings()

    def _candidates(self) -> List[TabContext]:
        candidates: List[TabContext] = []
        if self.settings.directory_tab_gid is not None:
            candidates.append(TabContext(tab_id=self.settings.directory_tab_gid))
        candidates.extend(TabContext(tab_name=name) for name in self.settings.directory_tab_names)
        return candidates

    def _try(self, tab: TabContext) -> List[DirectoryEntry]:
        try:
            rows = self.reader.fetch_rows(tab_id=tab.tab_id, tab_name=tab.tab_name)
        except SheetFetchError as e:
            logger.warning(f"Directory candidate unavailable: {e}", extra={"step": "directory", "tab": tab.label})
            return []
        if not rows:
            return []
        kind = classify_headers(rows[0])
        if kind is not SheetKind.DIRECTORY:
            logger.info(
                f"Tab is not a directory (classified {kind.value})",
                extra={"step": "directory", "tab": tab.label, "status": "skipped"},
            )
            return []
        return get_builder(SheetKind.DIRECTORY).build(rows, tab)

    def run(self, ctx: RunContext) -> RunContext:
        for tab in self._candidates():
            entries = self._try(tab)
            if entries:
                logger.info(
                    f"Loaded {len(entries)} directory entries",
                    extra={"step": "directory", "tab": tab.label, "status": "ok"},
                )
                ctx.directory = entries
                ctx.meta["directory_tab"] = tab.label
                return ctx
        logger.warning(
            "No post directory found; check that the document is shared publicly "
            "and that the index tab id or name is configured",
            extra={"step": "directory", "status": "empty"},
        )
        ctx.directory = []
        return ctx
