from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Protocol, List, Optional

from models import (
    AnalyticsData,
    DashboardStats,
    DirectoryEntry,
    FilterOptions,
    LeadEntry,
    MessageEntry,
    PostStats,
    ProfileEntry,
    UnifiedLead,
)
from utils.logging_setup import init_logging


logger = logging.getLogger(__name__)


@dataclass
class RunContext:
    directory: List[DirectoryEntry] = field(default_factory=list)
    profiles: List[ProfileEntry] = field(default_factory=list)
    leads: List[LeadEntry] = field(default_factory=list)
    messages: List[MessageEntry] = field(default_factory=list)
    unified: List[UnifiedLead] = field(default_factory=list)
    stats: Optional[DashboardStats] = None
    analytics: Optional[AnalyticsData] = None
    filter_options: Optional[FilterOptions] = None
    post_stats: List[PostStats] = field(default_factory=list)
    meta: dict = field(default_factory=dict)
    run_id: str = "-"


class Step(Protocol):
    def run(self, ctx: RunContext) -> RunContext:
        ...


class Pipeline:
    def __init__(self, steps: List[Step]):
        self.steps = steps

    def run(self, ctx: RunContext) -> RunContext:
        # Make logging idempotent for any direct runner use
        init_logging()
        for step in self.steps:
            name = type(step).__name__
            started = time.monotonic()
            ctx = step.run(ctx)
            logger.debug(
                f"Step {name} finished",
                extra={"step": name, "duration_ms": int((time.monotonic() - started) * 1000), "run_id": ctx.run_id},
            )
        return ctx
