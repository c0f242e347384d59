from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import requests
from bs4 import BeautifulSoup

from config.settings import Settings, get_settings
from sources.sheet_export import looks_like_html


logger = logging.getLogger(__name__)

ERROR_TOKENS = ("error", "exception")


class SinkError(Exception):
    """The mutation sink refused or failed the write."""


def _page_title(html_text: str) -> Optional[str]:
    soup = BeautifulSoup(html_text, "html.parser")
    if soup.title and soup.title.get_text(strip=True):
        return soup.title.get_text(strip=True)
    return None


def interpret_sink_response(status_code: int, text: str) -> Dict[str, Any]:
    """Turn a sink reply into a result dict, raising SinkError for any failure.

    The script host answers 200 even for many failures, so the body decides:
    structured replies fail on ``success: false`` (or an ``error`` with no
    ``success`` field); unstructured replies pass only when they carry no
    HTML page and no error-like words.
    """
    text = text or ""
    if not 200 <= status_code < 300:
        raise SinkError(f"Script execution failed: {status_code} - {text[:200]}")

    try:
        result = json.loads(text)
    except ValueError:
        if looks_like_html(text):
            title = _page_title(text)
            raise SinkError(
                "Script endpoint returned an error page"
                + (f" ({title})" if title else "")
                + ". Check that the script is deployed as a web app, authorized, and open to anyone."
            )
        lowered = text.lower()
        if any(token in lowered for token in ERROR_TOKENS):
            raise SinkError(f"Script error: {text[:200]}")
        return {"success": True, "rawResponse": text}

    if not isinstance(result, dict):
        return {"success": True, "rawResponse": result}
    if result.get("success") is False:
        raise SinkError(str(result.get("error") or "Script returned success: false"))
    if "success" not in result and result.get("error"):
        raise SinkError(str(result["error"]))
    return result


class AppsScriptSink:
    """Posts cell writes to the web-app script bound to the spreadsheet."""

    def __init__(self, url: str, settings: Optional[Settings] = None):
        if not url:
            raise ValueError("Script URL is required")
        self.url = url
        self.settings = settings or get_settings()

    def send(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = requests.post(
                self.url,
                json=payload,
                timeout=self.settings.http_timeout_seconds,
                allow_redirects=True,
            )
        except requests.exceptions.RequestException as e:
            raise SinkError(f"Request to script endpoint failed: {e}") from e
        logger.info(
            f"Script responded with status {response.status_code}",
            extra={"step": "sink", "status": response.status_code},
        )
        return interpret_sink_response(response.status_code, response.text)


def build_default_sink(settings: Optional[Settings] = None) -> Optional[AppsScriptSink]:
    """Sink for the configured script URL, or None when no URL is configured."""
    settings = settings or get_settings()
    if not settings.apps_script_url:
        return None
    return AppsScriptSink(settings.apps_script_url, settings)
