from __future__ import annotations

from pipelines.runner import RunContext
from services.aggregation import (
    compute_post_stats,
    compute_stats,
    filter_options,
    generate_analytics,
    merge_leads,
)


class MergeLeads:
    def run(self, ctx: RunContext) -> RunContext:
        ctx.unified = merge_leads(ctx.profiles, ctx.leads)
        ctx.meta["duplicates_dropped"] = len(ctx.profiles) + len(ctx.leads) - len(ctx.unified)
        return ctx


class ComputeStats:
    def run(self, ctx: RunContext) -> RunContext:
        ctx.stats = compute_stats(ctx.directory, ctx.profiles, ctx.leads)
        ctx.analytics = generate_analytics(ctx.directory, ctx.profiles, ctx.leads)
        ctx.filter_options = filter_options(ctx.profiles)
        ctx.post_stats = compute_post_stats(ctx.directory, ctx.profiles)
        return ctx
