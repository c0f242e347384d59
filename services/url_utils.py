from __future__ import annotations

import re
from typing import Optional


_TAB_ID_PATTERNS = (
    re.compile(r"#gid=(\d+)"),
    re.compile(r"[&?]gid=(\d+)"),
)


def normalize_url(url: Optional[str]) -> str:
    """Comparable form of a post/profile URL: lowercase, no scheme, no leading www., no trailing slash."""
    if not url:
        return ""
    text = url.strip().lower()
    text = re.sub(r"^https?://", "", text)
    if text.startswith("www."):
        text = text[4:]
    if text.endswith("/"):
        text = text[:-1]
    return text


def extract_tab_id(sheet_reference: Optional[str]) -> Optional[int]:
    """Pull the numeric tab id out of a sheet link (``#gid=``, then ``&gid=``/``?gid=``)."""
    if not sheet_reference or not sheet_reference.strip():
        return None
    for pattern in _TAB_ID_PATTERNS:
        m = pattern.search(sheet_reference)
        if m:
            return int(m.group(1))
    return None
