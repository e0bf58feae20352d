"""
PURPOSE: Tests for time utility functions.

Tests cover the UTC clock, Shopify timestamp parsing and elapsed-time math.
"""

from datetime import datetime, timedelta, timezone

from shopsync.utils.time_utils import get_utc_now, parse_timestamp, seconds_since


class TestGetUtcNow:
    """Test UTC clock."""

    def test_get_utc_now_is_aware(self):
        now = get_utc_now()
        assert now.tzinfo is not None
        assert now.utcoffset() == timedelta(0)


class TestParseTimestamp:
    """Test Shopify timestamp parsing."""

    def test_parse_offset_timestamp(self):
        parsed = parse_timestamp("2024-03-01T10:15:00-05:00")
        assert parsed == datetime(2024, 3, 1, 15, 15, tzinfo=timezone.utc)

    def test_parse_zulu_timestamp(self):
        parsed = parse_timestamp("2024-03-01T10:15:00Z")
        assert parsed == datetime(2024, 3, 1, 10, 15, tzinfo=timezone.utc)

    def test_naive_assumed_utc(self):
        parsed = parse_timestamp("2024-03-01T10:15:00")
        assert parsed.tzinfo is timezone.utc

    def test_datetime_passthrough(self):
        moment = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert parse_timestamp(moment) is moment

    def test_invalid_values_return_none(self):
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp(12345) is None


class TestSecondsSince:
    """Test elapsed time calculation."""

    def test_seconds_since_with_reference(self):
        start = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        assert seconds_since(start, start + timedelta(seconds=7)) == 7.0

    def test_seconds_since_future_is_negative(self):
        start = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        assert seconds_since(start, start - timedelta(seconds=3)) == -3.0
