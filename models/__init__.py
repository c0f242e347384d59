from .enums import ApprovalState, EngagementKind, LeadSource, SheetKind
from .directory_entry import DirectoryEntry
from .profile_entry import ProfileEntry
from .lead_entry import LeadEntry
from .message_entry import MessageEntry
from .unified_lead import UnifiedLead
from .dashboard import (
    AnalyticsData,
    CountItem,
    DashboardData,
    DashboardStats,
    EngagementSlice,
    FilterOptions,
    PostStats,
    TimelinePoint,
)
from .approval_update import ApprovalResult, ApprovalUpdateRequest

__all__ = [
    "ApprovalState",
    "EngagementKind",
    "LeadSource",
    "SheetKind",
    "DirectoryEntry",
    "ProfileEntry",
    "LeadEntry",
    "MessageEntry",
    "UnifiedLead",
    "AnalyticsData",
    "CountItem",
    "DashboardData",
    "DashboardStats",
    "EngagementSlice",
    "FilterOptions",
    "PostStats",
    "TimelinePoint",
    "ApprovalResult",
    "ApprovalUpdateRequest",
]
