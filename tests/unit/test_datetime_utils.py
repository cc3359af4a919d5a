"""Tests for om_common.datetime_utils."""

from datetime import datetime, timedelta, timezone

import pytest

from src.om_common.datetime_utils import (
    as_utc,
    is_date_only,
    isoformat_z,
    parse_iso8601,
    to_naive_utc,
)

UTC = timezone.utc


class TestParseIso8601:
    def test_date_only_is_start_of_day(self) -> None:
        assert parse_iso8601("2024-01-01") == datetime(2024, 1, 1, tzinfo=UTC)

    def test_date_only_end_of_day(self) -> None:
        parsed = parse_iso8601("2024-01-31", end_of_day=True)
        assert parsed == datetime(2024, 1, 31, 23, 59, 59, 999999, tzinfo=UTC)

    def test_datetime_ignores_end_of_day(self) -> None:
        parsed = parse_iso8601("2024-01-31T12:00:00Z", end_of_day=True)
        assert parsed == datetime(2024, 1, 31, 12, tzinfo=UTC)

    def test_naive_datetime_is_utc(self) -> None:
        assert parse_iso8601("2024-01-01T10:30:00").tzinfo == UTC

    def test_offset_converted_to_utc(self) -> None:
        parsed = parse_iso8601("2024-01-01T02:00:00+02:00")
        assert parsed == datetime(2024, 1, 1, 0, 0, tzinfo=UTC)
        assert parsed.utcoffset() == timedelta(0)

    @pytest.mark.parametrize(
        "value",
        [
            "yesterday",
            "2024-13-01",
            "01/02/2024",
            "",
            "9999-12-31T23:30:00-01:00",
            "0001-01-01T00:30:00+01:00",
        ],
    )
    def test_invalid_raises(self, value: str) -> None:
        with pytest.raises(ValueError):
            parse_iso8601(value)


class TestIsDateOnly:
    def test_variants(self) -> None:
        assert is_date_only("2024-01-01")
        assert is_date_only("20240101")
        assert not is_date_only("2024-01-01T00:00:00")


class TestConversions:
    def test_to_naive_utc(self) -> None:
        aware = datetime(2024, 1, 1, 5, tzinfo=timezone(timedelta(hours=5)))
        assert to_naive_utc(aware) == datetime(2024, 1, 1, 0, 0)

    def test_to_naive_utc_none(self) -> None:
        assert to_naive_utc(None) is None

    def test_as_utc_attaches_zone(self) -> None:
        assert as_utc(datetime(2024, 1, 1)).tzinfo == UTC

    def test_isoformat_z_milliseconds(self) -> None:
        dt = datetime(2024, 1, 31, 23, 59, 59, 999999, tzinfo=UTC)
        assert isoformat_z(dt) == "2024-01-31T23:59:59.999Z"

    def test_isoformat_z_naive(self) -> None:
        assert isoformat_z(datetime(2024, 1, 1)) == "2024-01-01T00:00:00.000Z"
