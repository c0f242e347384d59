"""
Public CSV export of spreadsheet tabs (no credentials; the document must be
viewable by anyone with the link).
"""
import logging
from typing import Dict, List, Optional

import requests

from config.settings import Settings, get_settings
from services.csv_codec import decode_csv


# Reads must never come from an intermediate cache: ordinals are re-derived
# from whatever the sheet holds right now.
NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, max-age=0",
    "Pragma": "no-cache",
}

class SheetFetchError(Exception):
    """The export could not be fetched or did not look like CSV."""


def looks_like_html(text: str) -> bool:
    lowered = text.lower()
    return "<!doctype" in lowered or lowered.lstrip().startswith("<html")


class SheetExportClient:
    """Fetches a tab of the configured document as CSV rows, always uncached."""

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or get_settings()
        self.session = session
        self.requests_made = 0

    @property
    def document_id(self) -> str:
        return self.settings.sheet_document_id

    def export_url(self) -> str:
        return self.settings.sheet_export_url.format(document_id=self.settings.sheet_document_id)

    def build_params(self, tab_id: Optional[int] = None, tab_name: Optional[str] = None) -> Dict[str, str]:
        if tab_id is None and not tab_name:
            raise ValueError("Either tab_id or tab_name is required")
        params = {"tqx": "out:csv"}
        if tab_id is not None:
            params["gid"] = str(tab_id)
        else:
            params["sheet"] = str(tab_name)
        return params

    def fetch_text(self, tab_id: Optional[int] = None, tab_name: Optional[str] = None) -> str:
        """Raw CSV text of one tab. Raises SheetFetchError on any transport or shape problem."""
        params = self.build_params(tab_id, tab_name)
        label = f"gid={tab_id}" if tab_id is not None else f"name={tab_name}"
        getter = self.session.get if self.session is not None else requests.get
        try:
            response = getter(
                self.export_url(),
                params=params,
                headers=NO_CACHE_HEADERS,
                timeout=self.settings.http_timeout_seconds,
            )
        except requests.exceptions.RequestException as e:
            raise SheetFetchError(f"Request for tab {label} failed: {e}") from e
        finally:
            self.requests_made += 1

        if not 200 <= response.status_code < 300:
            raise SheetFetchError(f"Tab {label} returned status {response.status_code}")
        text = response.text or ""
        if not text.strip():
            raise SheetFetchError(f"Tab {label} returned an empty export")
        if looks_like_html(text):
            raise SheetFetchError(f"Tab {label} returned an HTML page instead of CSV")
        logging.debug(f"Fetched tab {label}: {len(text)} chars")
        return text

    def fetch_rows(self, tab_id: Optional[int] = None, tab_name: Optional[str] = None) -> List[List[str]]:
        return decode_csv(self.fetch_text(tab_id=tab_id, tab_name=tab_name))
