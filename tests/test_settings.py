from __future__ import annotations

from datetime import timedelta

import pytest
from pydantic import ValidationError

from process_registry.settings import Settings, parse_duration


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1d", timedelta(days=1)),
        ("12h", timedelta(hours=12)),
        ("30m", timedelta(minutes=30)),
        ("45s", timedelta(seconds=45)),
        ("3600", timedelta(hours=1)),
    ],
)
def test_parse_duration(raw: str, expected: timedelta) -> None:
    assert parse_duration(raw) == expected


@pytest.mark.parametrize("raw", ["", "1w", "abc", "-5m", "0"])
def test_parse_duration_rejects_bad_values(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_duration(raw)


def test_token_lifetime_defaults_to_one_day() -> None:
    assert Settings(jwt_secret="x" * 32).token_lifetime == timedelta(days=1)


def test_invalid_lifetime_is_rejected_at_load() -> None:
    with pytest.raises(ValidationError):
        Settings(jwt_expires_in="forever")


def test_secret_is_hidden_from_repr() -> None:
    assert "super-secret" not in repr(Settings(jwt_secret="super-secret"))
