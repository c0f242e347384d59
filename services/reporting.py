from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

from models import DashboardData, UnifiedLead
from services.csv_codec import encode_csv


EXPORT_HEADER = ["First Name", "Last Name", "LinkedIn Post", "Profile URL", "Source"]


def export_leads_csv(leads: Sequence[UnifiedLead]) -> str:
    """Report CSV for the given leads, in the order given.

    Raises ValueError when there is nothing to export.
    """
    if not leads:
        raise ValueError("No leads to export")
    rows = [EXPORT_HEADER]
    for lead in leads:
        rows.append([
            lead.first_name or "",
            lead.last_name or "",
            lead.post_url or "",
            lead.profile_url or "",
            lead.source.export_label,
        ])
    return encode_csv(rows)


def default_export_filename(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"leads-export-{now.strftime('%Y-%m-%dT%H-%M-%S')}.csv"


def print_summary(data: DashboardData, output_path: Optional[Path] = None) -> None:
    """Print summary of a dashboard load."""
    stats = data.stats

    print("\n" + "="*60)
    print("SHEET DASHBOARD - SUMMARY")
    print("="*60)
    if data.error:
        print(f"Load Error: {data.error}")
    print(f"Posts: {stats.total_posts}")
    print(f"Scraped Profiles: {stats.total_scraped}")
    print(f"  Liked: {stats.total_liked}")
    print(f"  Commented: {stats.total_commented}")
    print(f"  Engagement Rate: {stats.engagement_rate}%")
    print(f"Combined Leads: {stats.total_leads}")
    print(f"Unified Leads: {len(data.unified_leads)}")
    print(f"Messages: {len(data.messages)}")
    if stats.has_company_data:
        print(f"Unique Companies: {stats.unique_companies}")
        print("Top Companies:")
        for item in stats.top_companies[:5]:
            print(f"  {item.label}: {item.count}")
    if stats.has_role_data:
        print("Top Roles:")
        for item in stats.top_roles[:5]:
            print(f"  {item.label}: {item.count}")
    if output_path:
        print(f"Output File: {output_path}")
    print("="*60)
