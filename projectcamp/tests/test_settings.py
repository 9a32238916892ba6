from __future__ import annotations

from datetime import timedelta

import pytest
from pydantic import ValidationError

from projectcamp.shared.config import ConfigurationError, parse_duration

from .fakes import make_token_config


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (900, timedelta(seconds=900)),
        ("900", timedelta(seconds=900)),
        ("15m", timedelta(minutes=15)),
        ("1h", timedelta(hours=1)),
        ("10d", timedelta(days=10)),
        ("2w", timedelta(weeks=2)),
        ("250ms", timedelta(milliseconds=250)),
        (" 1D ", timedelta(days=1)),
    ],
)
def test_parse_duration(raw: object, expected: timedelta) -> None:
    assert parse_duration(raw) == expected


@pytest.mark.parametrize("raw", ["", "soon", "1y", "-5m", True])
def test_parse_duration_rejects_garbage(raw: object) -> None:
    with pytest.raises(ValueError):
        parse_duration(raw)


def test_token_config_parses_expiry_strings() -> None:
    config = make_token_config(access_token_expiry="1h", refresh_token_expiry="7d")

    assert config.access_token_expiry == timedelta(hours=1)
    assert config.refresh_token_expiry == timedelta(days=7)
    config.ensure_complete()


def test_token_config_ttl_is_minutes() -> None:
    assert make_token_config(temporary_token_ttl="30").temporary_token_ttl == timedelta(minutes=30)


def test_zero_expiry_is_invalid() -> None:
    with pytest.raises(ValidationError):
        make_token_config(access_token_expiry="0")


def test_missing_secret_is_reported_by_name() -> None:
    with pytest.raises(ConfigurationError, match="ACCESS_TOKEN_SECRET"):
        make_token_config(access_token_secret=None).ensure_complete()


@pytest.mark.parametrize("raw", ["500ms", "999ms"])
def test_sub_second_token_lifetime_is_invalid(raw: str) -> None:
    with pytest.raises(ValidationError):
        make_token_config(refresh_token_expiry=raw)


def test_one_second_token_lifetime_is_accepted() -> None:
    assert make_token_config(access_token_expiry="1000ms").access_token_expiry == timedelta(
        seconds=1
    )
