from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest


def pytest_configure():
    # Ensure project root is on sys.path for absolute imports like 'services.columns'
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    # Set test environment knobs
    os.environ.setdefault("RUN_ENV", "test")


SCRIPT_URL = "https://script.example.com/macros/s/abc/exec"


class FakeReader:
    """In-memory sheet: tab id or tab name -> CSV text (or an exception to raise)."""

    def __init__(self, tabs):
        self.tabs = dict(tabs)
        self.calls = []

    def fetch_rows(self, tab_id=None, tab_name=None):
        from services.csv_codec import decode_csv
        from sources.sheet_export import SheetFetchError

        key = tab_id if tab_id is not None else tab_name
        self.calls.append(key)
        value = self.tabs.get(key)
        if value is None:
            raise SheetFetchError(f"Tab {key} not found")
        if isinstance(value, Exception):
            raise value
        return decode_csv(value)


class FakeSink:
    def __init__(self, reply=None, error=None, on_send=None):
        self.reply = reply
        self.error = error
        self.on_send = on_send
        self.payloads = []

    def send(self, payload):
        self.payloads.append(payload)
        if self.on_send:
            self.on_send(payload)
        if self.error:
            raise self.error
        return self.reply if self.reply is not None else {"success": True}


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    monkeypatch.delenv("APPS_SCRIPT_URL", raising=False)
    monkeypatch.delenv("GOOGLE_APPS_SCRIPT_URL", raising=False)
    from config.settings import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(monkeypatch):
    monkeypatch.setenv("APPS_SCRIPT_URL", SCRIPT_URL)
    from config.settings import get_settings
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
def make_reader():
    return FakeReader


@pytest.fixture
def make_sink():
    return FakeSink
