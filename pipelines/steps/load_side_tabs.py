from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from config.settings import Settings, get_settings
from models import SheetKind
from pipelines.runner import RunContext
from ports import SheetReaderPort
from services.classifier import classify_headers
from sources.base import TabContext
from sources.registry import get_builder
from sources.sheet_export import SheetFetchError


logger = logging.getLogger(__name__)


def _fetch(reader: SheetReaderPort, tab: TabContext, step: str) -> List[List[str]]:
    try:
        return reader.fetch_rows(tab_id=tab.tab_id, tab_name=tab.tab_name)
    except SheetFetchError as e:
        logger.warning(f"Tab unavailable: {e}", extra={"step": step, "tab": tab.label, "error": "fetch"})
        return []


def _build(rows: Sequence[Sequence[str]], tab: TabContext, expected: SheetKind, step: str) -> list:
    if len(rows) < 2:
        return []
    kind = classify_headers(rows[0], hint=expected)
    if kind is not expected:
        logger.info(
            f"Tab classified {kind.value}, expected {expected.value}",
            extra={"step": step, "tab": tab.label, "status": "skipped"},
        )
        return []
    return get_builder(expected).build(rows, tab)


class LoadCombinedLeads:
    """Combined-leads tab, by id and then by name when the id yields nothing."""

    def __init__(self, reader: SheetReaderPort, settings: Optional[Settings] = None) -> None:
        self.reader = reader
        self.settings = settings or get_settings()

    def run(self, ctx: RunContext) -> RunContext:
        candidates = []
        if self.settings.leads_tab_gid is not None:
            candidates.append(TabContext(tab_id=self.settings.leads_tab_gid))
        if self.settings.leads_tab_name:
            candidates.append(TabContext(tab_name=self.settings.leads_tab_name))

        for tab in candidates:
            leads = _build(_fetch(self.reader, tab, "leads"), tab, SheetKind.LEAD_DATA, "leads")
            if leads:
                ctx.leads = leads
                return ctx
        ctx.leads = []
        return ctx


class LoadMessages:
    def __init__(self, reader: SheetReaderPort, settings: Optional[Settings] = None) -> None:
        self.reader = reader
        self.settings = settings or get_settings()

    def run(self, ctx: RunContext) -> RunContext:
        tab = TabContext(tab_name=self.settings.message_tab_name)
        ctx.messages = _build(_fetch(self.reader, tab, "messages"), tab, SheetKind.MESSAGE_QUEUE, "messages")
        return ctx
