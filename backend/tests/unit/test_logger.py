"""JSON log formatting and request-id propagation."""

from __future__ import annotations

import json
import logging

from faction_api.core.logger import JSONFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "faction_api.test", logging.INFO, __file__, 1, "hello %s", ("x",), None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_json_with_extras():
    payload = json.loads(JSONFormatter().format(_record(event="auth.login", username="alice")))
    assert payload["message"] == "hello x"
    assert payload["level"] == "INFO"
    assert payload["event"] == "auth.login"
    assert payload["username"] == "alice"
    assert payload["request_id"] is None


def test_unknown_extras_are_not_emitted():
    payload = json.loads(JSONFormatter().format(_record(password="secret")))
    assert "password" not in payload


def test_request_id_is_echoed(client):
    resp = client.get("/api/health", headers={"X-Request-ID": "req-123"})
    assert resp.headers["X-Request-ID"] == "req-123"


def test_request_id_is_generated(client):
    resp = client.get("/api/health")
    assert resp.headers.get("X-Request-ID")


def test_unsafe_request_id_is_replaced(client):
    resp = client.get("/api/health", headers={"X-Request-ID": "bad id <forged>"})
    request_id = resp.headers["X-Request-ID"]
    assert request_id != "bad id <forged>"
    assert len(request_id) == 32


def test_formatter_adds_request_context(app):
    with app.test_request_context("/api/members", method="GET"):
        payload = json.loads(JSONFormatter().format(_record()))
    assert payload["method"] == "GET"
    assert payload["path"] == "/api/members"
    assert "user" not in payload
