from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple


# Canonical field name -> alternate spellings seen in campaign sheets.
# Checked in order after the exact and substring passes fail; extend by
# appending, never by adding branches to the resolver.
COLUMN_SYNONYMS: Dict[str, Tuple[str, ...]] = {
    "about": ("about section", "about me", "profile about", "bio", "summary", "description", "about_me", "aboutsection"),
    "first name": ("firstname", "first_name", "fname", "first name"),
    "last name": ("lastname", "last_name", "lname", "surname", "last name"),
    "linkedin post": ("linkedin_post", "post url", "post_url", "linkedin url", "linkedin post", "posturl"),
    "linkedin post user": ("linkedin_post_user", "post user", "post_user", "linkedin post user", "postuser"),
    "engagement type": ("engagement_type", "engagement", "type", "engagement type", "engagementtype"),
    "comment text": ("comment_text", "comment", "comments", "comment text", "commenttext"),
    "profile url": ("profile_url", "profile url", "linkedin profile", "profile link", "profileurl", "profile_link"),
    "post topic": ("post_topic", "topic", "post topic", "posttopic"),
    "company": ("company", "comp", "organization", "org", "organisation"),
    "role": ("role", "title", "position", "job title", "job_title", "jobtitle"),
    "headline": ("headline", "head line", "head_line"),
    "post_url": ("post_url", "post url", "posturl", "linkedin post url"),
    "sheet_link": ("sheet_link", "sheet link", "sheetlink"),
    "dm": ("dm", "direct message", "dm text", "message body"),
    "approval": ("approval", "approval status", "approved"),
}


def _norm(text: Optional[str]) -> str:
    return (text or "").strip().lower()


def _find_partial(normalized_headers: Sequence[str], needle: str) -> Optional[int]:
    for idx, header in enumerate(normalized_headers):
        if not header:
            continue
        if needle in header or header in needle:
            return idx
    return None


def resolve_column(headers: Sequence[str], name: str) -> Optional[int]:
    """Return the index of the header that best names ``name``, or None.

    Passes, first hit wins, headers scanned left to right in each pass:
    exact (trimmed, case-insensitive), substring in either direction, then
    each synonym from COLUMN_SYNONYMS in table order with the substring rule.
    Blank headers never match.
    """
    target = _norm(name)
    if not target:
        return None
    normalized = [_norm(h) for h in headers]
    for idx, header in enumerate(normalized):
        if header and header == target:
            return idx
    idx = _find_partial(normalized, target)
    if idx is not None:
        return idx
    for variant in COLUMN_SYNONYMS.get(target, ()):
        idx = _find_partial(normalized, variant)
        if idx is not None:
            return idx
    return None


class ColumnMap:
    """Header row with memoized resolution, shared by every walk over a tab."""

    def __init__(self, headers: Sequence[str]) -> None:
        self.headers: List[str] = list(headers)
        self._cache: Dict[str, Optional[int]] = {}

    def index(self, name: str) -> Optional[int]:
        key = _norm(name)
        if key not in self._cache:
            self._cache[key] = resolve_column(self.headers, key)
        return self._cache[key]

    def has(self, name: str) -> bool:
        return self.index(name) is not None

    def cell(self, row: Sequence[str], *names: str) -> Optional[str]:
        """First non-empty trimmed value among ``names``; None when all are blank."""
        for name in names:
            idx = self.index(name)
            if idx is None or idx >= len(row):
                continue
            value = (row[idx] or "").strip()
            if value:
                return value
        return None

    def visible_headers(self) -> List[str]:
        return [h.strip() for h in self.headers if h and h.strip()]
