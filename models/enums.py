from __future__ import annotations

from enum import Enum


class SheetKind(str, Enum):
    DIRECTORY = "directory"
    PROFILE_DATA = "profile_data"
    LEAD_DATA = "lead_data"
    MESSAGE_QUEUE = "message_queue"
    UNRECOGNIZED = "unrecognized"


class EngagementKind(str, Enum):
    LIKED = "Liked"
    COMMENTED = "Commented"


class ApprovalState(str, Enum):
    """Approval tags as stored on message entries.

    The sheet shows PENDING as "Approved": a row nobody has touched is treated
    as cleared to send until someone rejects it.
    """

    PENDING = "approval"
    REJECTED = "reject"
    SENT = "sent"

    @property
    def display_label(self) -> str:
        return _DISPLAY_LABELS[self]

    @classmethod
    def parse(cls, raw: str | None) -> "ApprovalState":
        """Map free text from the Approval column onto a state; unknown → PENDING."""
        text = (raw or "").strip().lower()
        if text in ("reject", "rejected"):
            return cls.REJECTED
        if text == "sent":
            return cls.SENT
        return cls.PENDING


_DISPLAY_LABELS = {
    ApprovalState.PENDING: "Approved",
    ApprovalState.REJECTED: "Rejected",
    ApprovalState.SENT: "Sent",
}


class LeadSource(str, Enum):
    SCRAPED = "scraped"
    COMBINED = "combined"

    @property
    def export_label(self) -> str:
        return "Scraped" if self is LeadSource.SCRAPED else "Combined Leads"
