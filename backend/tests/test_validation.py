"""
Tests for the business rules and the utilization arithmetic.
"""

import pytest
from datetime import datetime, timezone, timedelta

from app.core.exceptions import ValidationError
from app.services.event_service import utilization_percentage
from app.services.validation import (
    ensure_utc,
    is_event_full,
    is_event_in_past,
    validate_event_capacity,
    validate_event_date,
)

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("capacity", [1, 500, 1000])
def test_capacity_in_range(capacity):
    validate_event_capacity(capacity)


@pytest.mark.parametrize("capacity", [0, -1, 1001, 2.5, "10", True, None])
def test_capacity_rejected(capacity):
    with pytest.raises(ValidationError):
        validate_event_capacity(capacity)


def test_event_date_must_be_strictly_future():
    validate_event_date(NOW + timedelta(seconds=1), now=NOW)
    with pytest.raises(ValidationError, match="must be in the future"):
        validate_event_date(NOW, now=NOW)


def test_is_event_in_past_accepts_naive_utc():
    naive = datetime(2026, 6, 1, 11, 59)
    assert is_event_in_past(naive, now=NOW)
    assert not is_event_in_past(naive + timedelta(minutes=2), now=NOW)


def test_ensure_utc_converts_offsets():
    plus_two = datetime(2026, 6, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
    assert ensure_utc(plus_two) == NOW
    assert ensure_utc(plus_two).tzinfo == timezone.utc


def test_is_event_full():
    assert not is_event_full(9, 10)
    assert is_event_full(10, 10)
    assert is_event_full(11, 10)


@pytest.mark.parametrize("registrations, capacity, expected", [
    (0, 100, 0),
    (37, 100, 37),
    (100, 100, 100),
    (1, 3, 33),
    (2, 3, 67),
    (1, 8, 13),   # 12.5 rounds half up
    (1, 40, 3),   # 2.5 rounds half up
    (1, 1000, 0),
])
def test_utilization_percentage(registrations, capacity, expected):
    assert utilization_percentage(registrations, capacity) == expected


@pytest.mark.parametrize("capacity", [1, 7, 8, 100, 999])
def test_utilization_matches_half_up_formula(capacity):
    for registrations in range(capacity + 1):
        expected = (200 * registrations + capacity) // (2 * capacity)
        assert utilization_percentage(registrations, capacity) == expected
