"""Tests for small helper utilities."""
from datetime import UTC, datetime, timedelta, timezone

from promptlib.services.tag_service import normalize_tag_names
from promptlib.utils.datetime_helpers import ensure_utc
from promptlib.utils.search import contains_pattern, escape_like, prefix_pattern


def test_ensure_utc_none_returns_none():
    assert ensure_utc(None) is None


def test_ensure_utc_attaches_timezone_to_naive_datetime():
    """Naive datetimes should be marked as UTC without adjusting the clock."""
    naive = datetime(2024, 5, 1, 12, 30, 0)

    result = ensure_utc(naive)

    assert result.tzinfo is UTC
    assert result.replace(tzinfo=None) == naive


def test_ensure_utc_converts_from_other_timezones_to_utc():
    eastern = timezone(timedelta(hours=-4))
    aware = datetime(2024, 5, 1, 8, 0, tzinfo=eastern)

    result = ensure_utc(aware)

    assert result.hour == 12
    assert result.replace(tzinfo=None) == datetime(2024, 5, 1, 12, 0)


def test_escape_like_escapes_wildcards_and_backslash():
    assert escape_like("50%_off\\") == "50\\%\\_off\\\\"


def test_patterns_wrap_escaped_input():
    assert contains_pattern("a%b") == "%a\\%b%"
    assert prefix_pattern("as_") == "as\\_%"


def test_normalize_tag_names_trims_and_dedupes_in_order():
    assert normalize_tag_names(["  b", "a", "b ", "", "   ", "a"]) == ["b", "a"]


def test_normalize_tag_names_accepts_none():
    assert normalize_tag_names(None) == []
