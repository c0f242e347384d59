from __future__ import annotations

import concurrent.futures as _fut
import logging
from typing import List, Optional

from config.settings import Settings, get_settings
from models import DirectoryEntry, ProfileEntry, SheetKind
from pipelines.runner import RunContext
from ports import SheetReaderPort
from services.classifier import classify_headers
from sources.base import TabContext
from sources.registry import get_builder
from sources.sheet_export import SheetFetchError


logger = logging.getLogger(__name__)


class FetchPostTabs:
    """Fetch every directory entry's tab and build profile entries from it.

    Tabs are fetched in parallel but merged back in directory order. A tab
    that fails, is empty, or does not hold profile data contributes nothing.
    """

    def __init__(self, reader: SheetReaderPort, settings: Optional[Settings] = None) -> None:
        self.reader = reader
        self.settings = settings or get_settings()

    def _load_one(self, entry: DirectoryEntry) -> List[ProfileEntry]:
        tab = TabContext(tab_id=entry.tab_id, topic=entry.topic, source_url=entry.source_url)
        try:
            rows = self.reader.fetch_rows(tab_id=entry.tab_id)
        except SheetFetchError as e:
            logger.warning(f"Skipping post tab: {e}", extra={"step": "post_tabs", "tab": tab.label, "error": "fetch"})
            return []
        if len(rows) < 2:
            logger.info("Post tab has no data rows", extra={"step": "post_tabs", "tab": tab.label, "status": "empty"})
            return []

        kind = classify_headers(rows[0])
        if kind is SheetKind.MESSAGE_QUEUE:
            logger.info("Post tab holds messages, skipped", extra={"step": "post_tabs", "tab": tab.label, "status": "skipped"})
            return []
        if kind is not SheetKind.PROFILE_DATA:
            logger.info(
                f"Unrecognized post tab (classified {kind.value}), headers: {', '.join(h for h in rows[0] if h.strip())}",
                extra={"step": "post_tabs", "tab": tab.label, "status": "skipped"},
            )
            return []
        return get_builder(SheetKind.PROFILE_DATA).build(rows, tab)

    def run(self, ctx: RunContext) -> RunContext:
        entries = [e for e in ctx.directory if e.tab_id is not None]
        if not entries:
            ctx.profiles = []
            return ctx

        max_workers = max(1, self.settings.fetch_concurrency)
        with _fut.ThreadPoolExecutor(max_workers=max_workers) as ex:
            per_tab = list(ex.map(self._load_one, entries))

        profiles: List[ProfileEntry] = []
        for chunk in per_tab:
            profiles.extend(chunk)
        ctx.profiles = profiles
        ctx.meta["post_tabs_fetched"] = len(entries)
        logger.info(
            f"Loaded {len(profiles)} profiles from {len(entries)} post tabs",
            extra={"step": "post_tabs", "status": "ok"},
        )
        return ctx
