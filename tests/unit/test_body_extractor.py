"""Unit tests for typed request body extraction."""

from __future__ import annotations

import logging

import pytest

import tracker.core.extract as extract_module
from tracker.core.errors import AppError
from tracker.core.errors import Service
from tracker.core.errors import Validation
from tracker.core.extract import extract
from tracker.schemas.user import UserCreate


@pytest.mark.parametrize(
    "raw",
    [
        b"",
        b"{",
        b"not json",
        b"[]",
        b'{"name": "alice"}',
        b'{"name": 123, "email": "alice@example.com"}',
        b'{"name": null, "email": "alice@example.com"}',
    ],
)
def test_malformed_or_mismatched_body_is_invalid_json(raw: bytes, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[object] = []
    monkeypatch.setattr(extract_module, "validate", lambda *args: calls.append(args))

    with pytest.raises(AppError) as exc_info:
        extract(raw, UserCreate)

    assert exc_info.value.value == Service(400, "invalid_json")
    assert calls == []


def test_parse_failure_is_logged_at_error(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR, logger="tracker.core.extract"):
        with pytest.raises(AppError):
            extract(b"{", UserCreate)

    assert len(caplog.records) == 1
    assert caplog.records[0].levelno == logging.ERROR
    assert "UserCreate" in caplog.records[0].getMessage()


def test_rule_violations_become_validation_error() -> None:
    with pytest.raises(AppError) as exc_info:
        extract(b'{"name": "ab", "email": "not-an-email"}', UserCreate)

    value = exc_info.value.value
    assert isinstance(value, Validation)
    assert value.failures.fields == ["name", "email"]


def test_valid_body_returns_typed_payload() -> None:
    payload = extract(b'{"name": "alice", "email": "alice@example.com", "extra": 1}', UserCreate)

    assert payload == UserCreate(name="alice", email="alice@example.com")
