"""Tests for sensitive data filtering in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from areca.core.logging import (
    JsonFormatter,
    RequestIdFilter,
    SensitiveDataFilter,
    clear_request_id,
    fingerprint,
    redact,
    set_request_id,
)


@pytest.fixture
def capture():
    """Logger wired the way configure_logging wires the root handler."""

    logger = logging.getLogger("test_redaction")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    yield logger, stream

    logger.handlers.clear()
    clear_request_id()


def test_sensitive_filter_redacts_credentials(capture):
    logger, stream = capture

    logger.info(
        "auth_event",
        extra={
            "password": "hunter2-secret",
            "current_password": "old-secret",
            "token": "tok-abc-123",
            "Authorization": "Bearer tok-xyz",
            "safe_field": "visible",
        },
    )

    output = stream.getvalue()

    assert "hunter2-secret" not in output
    assert "old-secret" not in output
    assert "tok-abc-123" not in output
    assert "tok-xyz" not in output
    assert "[REDACTED]" in output
    assert "visible" in output


def test_sensitive_filter_redacts_email(capture):
    logger, stream = capture

    logger.info("user_event", extra={"email": "farmer@example.com", "user_id": "u-1"})

    payload = json.loads(stream.getvalue())
    assert payload["email"] == "[REDACTED]"
    assert payload["user_id"] == "u-1"


def test_sensitive_filter_allows_safe_fields(capture):
    logger, stream = capture

    logger.info(
        "safe_event",
        extra={
            "request_id": "req-123",
            "route": "/api/employees/{employee_id}",
            "status_code": 200,
            "duration_ms": 150.5,
        },
    )

    payload = json.loads(stream.getvalue())

    assert payload["message"] == "safe_event"
    assert payload["request_id"] == "req-123"
    assert payload["route"] == "/api/employees/{employee_id}"
    assert payload["status_code"] == 200
    assert "[REDACTED]" not in stream.getvalue()


def test_sensitive_filter_redacts_nested_dicts(capture):
    logger, stream = capture

    logger.info(
        "nested_event",
        extra={
            "headers": {
                "authorization": "Bearer secret-key",
                "user-agent": "pytest",
            },
            "attempts": [{"password": "in-a-list"}],
        },
    )

    output = stream.getvalue()

    assert "secret-key" not in output
    assert "in-a-list" not in output
    assert "[REDACTED]" in output
    assert "pytest" in output


def test_request_id_comes_from_context(capture):
    logger, stream = capture
    set_request_id("ctx-42")

    logger.info("with_context")

    assert json.loads(stream.getvalue())["request_id"] == "ctx-42"


def test_redact_leaves_input_untouched():
    original = {"token": "abc", "nested": {"password": "p"}}

    result = redact(original)

    assert result == {"token": "[REDACTED]", "nested": {"password": "[REDACTED]"}}
    assert original["token"] == "abc"


def test_fingerprint_is_stable_and_short():
    assert fingerprint("a@example.com") == fingerprint("a@example.com")
    assert fingerprint("a@example.com") != fingerprint("b@example.com")
    assert len(fingerprint("anything")) == 16
