from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .directory_entry import DirectoryEntry
from .lead_entry import LeadEntry
from .message_entry import MessageEntry
from .profile_entry import ProfileEntry
from .unified_lead import UnifiedLead


class CountItem(BaseModel):
    label: str
    count: int


class DashboardStats(BaseModel):
    total_posts: int = 0
    total_scraped: int = 0
    total_liked: int = 0
    total_commented: int = 0
    unique_companies: int = 0
    unique_roles: list[str] = Field(default_factory=list)
    total_leads: int = 0
    engagement_rate: float = 0.0
    top_companies: list[CountItem] = Field(default_factory=list)
    top_roles: list[CountItem] = Field(default_factory=list)

    # Gate UI filters: a field with no data anywhere gets no filter.
    has_company_data: bool = False
    has_role_data: bool = False
    has_headline_data: bool = False
    has_engagement_data: bool = False


class EngagementSlice(BaseModel):
    type: str
    count: int
    percentage: int


class TimelinePoint(BaseModel):
    date: str
    count: int


class AnalyticsData(BaseModel):
    posts_over_time: list[TimelinePoint] = Field(default_factory=list)
    engagement_breakdown: list[EngagementSlice] = Field(default_factory=list)
    company_distribution: list[CountItem] = Field(default_factory=list)
    role_distribution: list[CountItem] = Field(default_factory=list)


class FilterOptions(BaseModel):
    companies: list[str] = Field(default_factory=list)
    roles: list[str] = Field(default_factory=list)
    engagement_kinds: list[str] = Field(default_factory=list)
    has_headline_data: bool = False


class PostStats(BaseModel):
    post: DirectoryEntry
    total: int = 0
    liked: int = 0
    commented: int = 0
    unique_companies: int = 0


class DashboardData(BaseModel):
    directory: list[DirectoryEntry] = Field(default_factory=list)
    profiles: list[ProfileEntry] = Field(default_factory=list)
    leads: list[LeadEntry] = Field(default_factory=list)
    messages: list[MessageEntry] = Field(default_factory=list)
    unified_leads: list[UnifiedLead] = Field(default_factory=list)
    stats: DashboardStats = Field(default_factory=DashboardStats)
    analytics: AnalyticsData = Field(default_factory=AnalyticsData)
    filter_options: FilterOptions = Field(default_factory=FilterOptions)
    post_stats: list[PostStats] = Field(default_factory=list)
    error: str | None = None

    model_config = ConfigDict(extra="ignore")
