from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


def _split_names(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass(frozen=True)
class Settings:
    # Spreadsheet export (read side)
    sheet_document_id: str
    sheet_export_url: str

    directory_tab_gid: int | None
    directory_tab_names: list[str]
    leads_tab_gid: int | None
    leads_tab_name: str
    message_tab_name: str

    # Mutation sink (write side)
    apps_script_url: str | None

    # Limits/Concurrency/Timeouts
    http_timeout_seconds: int
    fetch_concurrency: int

    log_level: str
    run_env: str

    # Internal HTTP surface
    web_host: str = "127.0.0.1"
    web_port: int = 5000


def _optional_int(name: str, default: str) -> int | None:
    raw = os.getenv(name, default).strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer tab id, got {raw!r}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_env()
    apps_script_url = os.getenv("APPS_SCRIPT_URL") or os.getenv("GOOGLE_APPS_SCRIPT_URL")
    return Settings(
        sheet_document_id=os.getenv("SHEET_DOCUMENT_ID", "11GQ7hgeSR_5ZmBWBwfzWRLLO3jppfGSlqR2zBrIORHY"),
        sheet_export_url=os.getenv(
            "SHEET_EXPORT_URL", "https://docs.google.com/spreadsheets/d/{document_id}/gviz/tq"
        ),
        directory_tab_gid=_optional_int("DIRECTORY_TAB_GID", "585392388"),
        directory_tab_names=_split_names(os.getenv("DIRECTORY_TAB_NAMES", "Index,IndexSheet1,Posts,Post Index")),
        leads_tab_gid=_optional_int("LEADS_TAB_GID", "1628119603"),
        leads_tab_name=os.getenv("LEADS_TAB_NAME", "Combined Leads"),
        message_tab_name=os.getenv("MESSAGE_TAB_NAME", "Send_Message"),
        apps_script_url=(apps_script_url or "").strip() or None,
        http_timeout_seconds=int(os.getenv("HTTP_TIMEOUT_SECONDS", "20")),
        fetch_concurrency=int(os.getenv("FETCH_CONCURRENCY", "4")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        run_env=os.getenv("RUN_ENV", "local"),
        web_host=os.getenv("WEB_HOST", "127.0.0.1"),
        web_port=int(os.getenv("WEB_PORT", "5000")),
    )
