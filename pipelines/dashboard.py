from __future__ import annotations

import logging
import os
import time
import uuid as _uuid
from typing import Optional

from config.settings import Settings, get_settings
from models import DashboardData
from pipelines.runner import Pipeline, RunContext
from pipelines.steps import (
    ComputeStats,
    FetchPostTabs,
    LoadCombinedLeads,
    LoadDirectory,
    LoadMessages,
    MergeLeads,
)
from ports import SheetReaderPort
from sources.sheet_export import SheetExportClient


logger = logging.getLogger(__name__)


def build_dashboard_pipeline(reader: SheetReaderPort, settings: Optional[Settings] = None) -> Pipeline:
    settings = settings or get_settings()
    return Pipeline([
        LoadDirectory(reader, settings),
        FetchPostTabs(reader, settings),
        LoadCombinedLeads(reader, settings),
        LoadMessages(reader, settings),
        MergeLeads(),
        ComputeStats(),
    ])


def load_dashboard(reader: Optional[SheetReaderPort] = None, settings: Optional[Settings] = None) -> DashboardData:
    """Read every tab fresh and assemble the dashboard.

    Never raises for data problems: a missing directory or a tab that fails
    to load is left out and the rest still loads. Only an unexpected failure
    of the whole run is reported through ``error``.
    """
    settings = settings or get_settings()
    reader = reader or SheetExportClient(settings)
    run_id = os.getenv("RUN_ID") or _uuid.uuid4().hex
    started = time.monotonic()
    try:
        ctx = build_dashboard_pipeline(reader, settings).run(RunContext(run_id=run_id))
    except Exception as e:
        logger.exception(
            "Dashboard load failed",
            extra={"step": "dashboard", "status": "failed", "error": str(e), "run_id": run_id},
        )
        return DashboardData(error=f"Failed to load data from the sheet: {e}")

    data = DashboardData(
        directory=ctx.directory,
        profiles=ctx.profiles,
        leads=ctx.leads,
        messages=ctx.messages,
        unified_leads=ctx.unified,
        stats=ctx.stats,
        analytics=ctx.analytics,
        filter_options=ctx.filter_options,
        post_stats=ctx.post_stats,
    )
    logger.info(
        f"Dashboard loaded: {len(data.directory)} posts, {len(data.profiles)} profiles, "
        f"{len(data.leads)} leads, {len(data.messages)} messages",
        extra={
            "step": "dashboard",
            "status": "ok",
            "duration_ms": int((time.monotonic() - started) * 1000),
            "run_id": run_id,
        },
    )
    return data
