from __future__ import annotations

from types import SimpleNamespace

import pytest
import requests

from services.sink_client import AppsScriptSink, SinkError, build_default_sink, interpret_sink_response


def test_structured_success():
    assert interpret_sink_response(200, '{"success": true, "row": 4}') == {"success": True, "row": 4}


def test_structured_failure_uses_reported_error():
    with pytest.raises(SinkError) as exc:
        interpret_sink_response(200, '{"success": false, "error": "Sheet is protected"}')
    assert "Sheet is protected" in str(exc.value)


def test_error_without_success_field_fails():
    with pytest.raises(SinkError):
        interpret_sink_response(200, '{"error": "Unknown action"}')


def test_non_2xx_fails():
    with pytest.raises(SinkError) as exc:
        interpret_sink_response(502, "Bad gateway")
    assert "502" in str(exc.value)


def test_html_page_fails_with_title():
    page = "<!DOCTYPE html><html><head><title>Authorization needed</title></head><body></body></html>"
    with pytest.raises(SinkError) as exc:
        interpret_sink_response(200, page)
    assert "Authorization needed" in str(exc.value)
    assert "deployed" in str(exc.value)


def test_plain_text_with_error_word_fails():
    with pytest.raises(SinkError):
        interpret_sink_response(200, "TypeError: Cannot read property")


def test_plain_text_without_error_words_succeeds():
    assert interpret_sink_response(200, "OK") == {"success": True, "rawResponse": "OK"}


def test_send_posts_json(monkeypatch, settings):
    calls = []

    def _fake_post(url, json=None, timeout=None, allow_redirects=None):
        calls.append({"url": url, "json": json, "timeout": timeout})
        return SimpleNamespace(status_code=200, text='{"success": true}')

    monkeypatch.setattr("services.sink_client.requests.post", _fake_post)
    sink = build_default_sink(settings)
    reply = sink.send({"action": "updateApproval", "row": 3})

    assert reply == {"success": True}
    assert calls[0]["url"] == settings.apps_script_url
    assert calls[0]["json"] == {"action": "updateApproval", "row": 3}
    assert calls[0]["timeout"] == settings.http_timeout_seconds


def test_send_transport_error(monkeypatch, settings):
    def _boom(*args, **kwargs):
        raise requests.exceptions.Timeout("slow")

    monkeypatch.setattr("services.sink_client.requests.post", _boom)
    with pytest.raises(SinkError):
        AppsScriptSink(settings.apps_script_url, settings).send({})


def test_no_sink_without_url():
    from config.settings import get_settings

    assert build_default_sink(get_settings()) is None
