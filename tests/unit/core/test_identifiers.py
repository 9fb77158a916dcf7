"""
test_identifiers.py
-------------------
Unit tests for id and timestamp generation.
"""
import re
from datetime import datetime, timezone

from catalog.utils.identifiers import generate_id, utc_timestamp


class TestGenerateId:
    """Test generate_id."""

    def test_format(self):
        assert re.fullmatch(r"\d+-[0-9a-z]{9}", generate_id())

    def test_embeds_given_millis(self):
        assert generate_id(now_ms=1729321234567).startswith("1729321234567-")

    def test_ids_are_unique(self):
        assert len({generate_id(now_ms=1) for _ in range(50)}) == 50


class TestUtcTimestamp:
    """Test utc_timestamp."""

    def test_millisecond_precision_with_z(self):
        moment = datetime(2026, 10, 19, 8, 30, 0, 123456, tzinfo=timezone.utc)
        assert utc_timestamp(moment) == "2026-10-19T08:30:00.123Z"

    def test_naive_datetime_is_utc(self):
        assert utc_timestamp(datetime(2026, 1, 1)) == "2026-01-01T00:00:00.000Z"
