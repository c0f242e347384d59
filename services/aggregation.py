from __future__ import annotations

import math
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

from models import (
    AnalyticsData,
    CountItem,
    DashboardStats,
    DirectoryEntry,
    EngagementKind,
    EngagementSlice,
    FilterOptions,
    LeadEntry,
    LeadSource,
    PostStats,
    ProfileEntry,
    TimelinePoint,
    UnifiedLead,
)
from services.url_utils import normalize_url


TOP_N = 10


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def lead_key(post_url: Optional[str], first_name: Optional[str], last_name: Optional[str]) -> Tuple[str, str, str]:
    """Dedup key shared by profile and lead rows."""
    return (
        normalize_url(post_url),
        (first_name or "").strip().lower(),
        (last_name or "").strip().lower(),
    )


def merge_leads(profiles: Sequence[ProfileEntry], leads: Sequence[LeadEntry]) -> List[UnifiedLead]:
    """Union of profile and lead rows, profiles first, first occurrence of each key wins."""
    seen: Set[Tuple[str, str, str]] = set()
    merged: List[UnifiedLead] = []

    for p in profiles:
        key = lead_key(p.post_url, p.first_name, p.last_name)
        if key in seen:
            continue
        seen.add(key)
        merged.append(UnifiedLead(
            source=LeadSource.SCRAPED,
            ordinal=p.ordinal,
            post_url=p.post_url,
            first_name=p.first_name,
            last_name=p.last_name,
            profile_url=p.profile_url,
            company=p.company,
            role=p.role,
            headline=p.headline,
            engagement_kind=p.engagement_kind,
            source_topic=p.source_topic,
            source_tab_id=p.source_tab_id,
        ))

    for lead in leads:
        key = lead_key(lead.post_url, lead.first_name, lead.last_name)
        if key in seen:
            continue
        seen.add(key)
        merged.append(UnifiedLead(
            source=LeadSource.COMBINED,
            ordinal=lead.ordinal,
            post_url=lead.post_url,
            first_name=lead.first_name,
            last_name=lead.last_name,
            profile_url=lead.profile_url,
            source_topic=lead.source_topic,
        ))

    return merged


def _contains(haystack: Optional[str], needle: str) -> bool:
    return needle in (haystack or "").lower()


def filter_leads(
    unified: Sequence[UnifiedLead],
    selected_post: Union[DirectoryEntry, str, None] = None,
    search_text: Optional[str] = None,
) -> List[UnifiedLead]:
    """Narrow unified leads to one post (normalized exact URL match) and/or a search term."""
    filtered = list(unified)

    if selected_post:
        post_url = selected_post.source_url if isinstance(selected_post, DirectoryEntry) else selected_post
        wanted = normalize_url(post_url)
        filtered = [lead for lead in filtered if normalize_url(lead.post_url) == wanted]

    if search_text:
        needle = search_text.strip().lower()
        filtered = [
            lead for lead in filtered
            if _contains(lead.first_name, needle)
            or _contains(lead.last_name, needle)
            or _contains(lead.post_url, needle)
            or _contains(lead.profile_url, needle)
        ]
    return filtered


def top_counts(values: Iterable[Optional[str]], limit: int = TOP_N) -> List[CountItem]:
    """Frequency table of non-blank values, count descending, ties in first-seen order."""
    counts: Dict[str, int] = {}
    for value in values:
        text = (value or "").strip()
        if not text:
            continue
        counts[text] = counts.get(text, 0) + 1
    # sorted() is stable, and dicts keep first-insertion order
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return [CountItem(label=label, count=count) for label, count in ranked[:limit]]


def _distinct(values: Iterable[Optional[str]]) -> List[str]:
    seen: Dict[str, None] = {}
    for value in values:
        text = (value or "").strip()
        if text:
            seen.setdefault(text, None)
    return list(seen)


def compute_stats(
    directory: Sequence[DirectoryEntry],
    profiles: Sequence[ProfileEntry],
    leads: Sequence[LeadEntry],
) -> DashboardStats:
    total_scraped = len(profiles)
    total_liked = sum(1 for p in profiles if p.engagement_kind is EngagementKind.LIKED)
    total_commented = sum(1 for p in profiles if p.engagement_kind is EngagementKind.COMMENTED)
    companies = _distinct(p.company for p in profiles)
    roles = _distinct(p.role for p in profiles)
    engagement_rate = (total_commented / total_scraped) * 100 if total_scraped else 0.0

    return DashboardStats(
        total_posts=len(directory),
        total_scraped=total_scraped,
        total_liked=total_liked,
        total_commented=total_commented,
        unique_companies=len(companies),
        unique_roles=roles,
        total_leads=len(leads),
        engagement_rate=_round_half_up(engagement_rate, 1),
        top_companies=top_counts(p.company for p in profiles),
        top_roles=top_counts(p.role for p in profiles),
        has_company_data=bool(companies),
        has_role_data=bool(roles),
        has_headline_data=any((p.headline or "").strip() for p in profiles),
        has_engagement_data=any(p.engagement_kind is not None for p in profiles),
    )


def generate_analytics(
    directory: Sequence[DirectoryEntry],
    profiles: Sequence[ProfileEntry],
    leads: Sequence[LeadEntry],
) -> AnalyticsData:
    # Directory order stands in for time; the sheet has no post dates.
    posts_over_time = [TimelinePoint(date=f"Post {i}", count=i) for i in range(1, len(directory) + 1)]

    engaged = [p for p in profiles if p.engagement_kind is not None]
    breakdown: List[EngagementSlice] = []
    if engaged:
        liked = sum(1 for p in engaged if p.engagement_kind is EngagementKind.LIKED)
        commented = sum(1 for p in engaged if p.engagement_kind is EngagementKind.COMMENTED)
        for kind, count in ((EngagementKind.LIKED, liked), (EngagementKind.COMMENTED, commented)):
            breakdown.append(EngagementSlice(
                type=kind.value,
                count=count,
                percentage=int(_round_half_up(count / len(engaged) * 100)),
            ))

    return AnalyticsData(
        posts_over_time=posts_over_time,
        engagement_breakdown=breakdown,
        company_distribution=top_counts(p.company for p in profiles),
        role_distribution=top_counts(p.role for p in profiles),
    )


def filter_options(profiles: Sequence[ProfileEntry]) -> FilterOptions:
    """Values offered by the profile filters; a field with no data yields no options."""
    kinds = [k for k in EngagementKind if any(p.engagement_kind is k for p in profiles)]
    return FilterOptions(
        companies=sorted(_distinct(p.company for p in profiles)),
        roles=sorted(_distinct(p.role for p in profiles)),
        engagement_kinds=[k.value for k in kinds],
        has_headline_data=any((p.headline or "").strip() for p in profiles),
    )


def filter_profiles(
    profiles: Sequence[ProfileEntry],
    search_text: Optional[str] = None,
    post_tab_id: Optional[int] = None,
    post_tab_ids: Optional[Iterable[int]] = None,
    companies: Optional[Iterable[str]] = None,
    roles: Optional[Iterable[str]] = None,
    engagement_kinds: Optional[Iterable[Union[EngagementKind, str]]] = None,
) -> List[ProfileEntry]:
    filtered = list(profiles)

    if search_text:
        needle = search_text.strip().lower()
        filtered = [
            p for p in filtered
            if _contains(p.first_name, needle)
            or _contains(p.last_name, needle)
            or _contains((p.company or "").strip(), needle)
            or _contains((p.role or "").strip(), needle)
            or _contains(p.headline, needle)
            or _contains(p.about, needle)
        ]

    if post_tab_id is not None:
        filtered = [p for p in filtered if p.source_tab_id == post_tab_id]
    elif post_tab_ids:
        wanted_tabs = set(post_tab_ids)
        filtered = [p for p in filtered if p.source_tab_id is not None and p.source_tab_id in wanted_tabs]

    wanted_companies = {c.strip() for c in companies or ()}
    if wanted_companies:
        filtered = [p for p in filtered if p.company and p.company.strip() in wanted_companies]

    wanted_roles = {r.strip() for r in roles or ()}
    if wanted_roles:
        filtered = [p for p in filtered if p.role and p.role.strip() in wanted_roles]

    wanted_kinds = {EngagementKind(k) for k in engagement_kinds or ()}
    if wanted_kinds:
        filtered = [p for p in filtered if p.engagement_kind in wanted_kinds]

    return filtered


def compute_post_stats(directory: Sequence[DirectoryEntry], profiles: Sequence[ProfileEntry]) -> List[PostStats]:
    by_tab: Dict[int, List[ProfileEntry]] = {}
    for p in profiles:
        if p.source_tab_id is not None:
            by_tab.setdefault(p.source_tab_id, []).append(p)

    result: List[PostStats] = []
    for post in directory:
        entries = by_tab.get(post.tab_id, []) if post.tab_id is not None else []
        result.append(PostStats(
            post=post,
            total=len(entries),
            liked=sum(1 for e in entries if e.engagement_kind is EngagementKind.LIKED),
            commented=sum(1 for e in entries if e.engagement_kind is EngagementKind.COMMENTED),
            unique_companies=len(_distinct(e.company for e in entries)),
        ))
    return result
