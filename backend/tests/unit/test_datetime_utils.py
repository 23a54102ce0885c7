"""Tests for date/time helpers."""

from datetime import date, datetime, timedelta, timezone

import pytest

from patient_registry.utils.datetime_utils import as_utc, parse_iso_string, to_utc_instant, utc_now


def test_as_utc_treats_naive_as_utc():
    assert as_utc(datetime(2024, 1, 1, 12, 0)) == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def test_as_utc_converts_offsets():
    value = datetime(2024, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert as_utc(value) == datetime(2024, 1, 1, 17, 0, tzinfo=timezone.utc)
    assert as_utc(value).utcoffset() == timedelta(0)


def test_utc_now_is_aware():
    assert utc_now().tzinfo is timezone.utc


@pytest.mark.parametrize(
    "raw",
    ["2024-12-28", "2024-12-28T00:00:00", "2024-12-28T00:00:00Z", "2024-12-28T00:00:00.000Z"],
)
def test_parse_iso_string(raw):
    assert parse_iso_string(raw) == datetime(2024, 12, 28, tzinfo=timezone.utc)


@pytest.mark.parametrize("raw", ["", "   ", "yesterday", "2024-02-30"])
def test_parse_iso_string_rejects_invalid(raw):
    with pytest.raises(ValueError):
        parse_iso_string(raw)


def test_to_utc_instant_from_date():
    assert to_utc_instant(date(1990, 1, 1)) == datetime(1990, 1, 1, tzinfo=timezone.utc)


def test_to_utc_instant_rejects_other_types():
    with pytest.raises(TypeError):
        to_utc_instant(19900101)  # type: ignore[arg-type]
