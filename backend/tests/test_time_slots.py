import itertools

import pytest

from classgrid.core.exceptions import InvalidSlotError
from classgrid.models.timetable_period import DayOfWeek
from classgrid.services.time_slots import (
    TimeSlot,
    format_minutes,
    overlaps,
    parse_day,
    parse_time_to_minutes,
    validate_slot,
)


def slot(start, end, day=DayOfWeek.monday):
    return TimeSlot(day_of_week=day, start=start, end=end)


def test_parse_time_accepts_one_or_two_digit_hours():
    assert parse_time_to_minutes("08:00") == 480
    assert parse_time_to_minutes("8:05") == 485
    assert parse_time_to_minutes("23:59") == 1439
    assert parse_time_to_minutes("00:00") == 0


@pytest.mark.parametrize("value", ["24:00", "12:60", "1200", "", "ab:cd", "12:5", "08:00\n", " 08:00"])
def test_parse_time_rejects_malformed_values(value):
    with pytest.raises(ValueError):
        parse_time_to_minutes(value)


def test_format_minutes_pads_hours_and_minutes():
    assert format_minutes(0) == "00:00"
    assert format_minutes(545) == "09:05"
    assert format_minutes(1439) == "23:59"


def test_parse_day_accepts_short_and_mixed_case_names():
    assert parse_day("MONDAY") is DayOfWeek.monday
    assert parse_day("Tuesday") is DayOfWeek.tuesday
    assert parse_day("wed") is DayOfWeek.wednesday
    assert parse_day(DayOfWeek.sunday) is DayOfWeek.sunday
    with pytest.raises(InvalidSlotError):
        parse_day("Funday")


def test_adjacent_slots_do_not_overlap():
    assert not overlaps(slot(480, 540), slot(540, 600))
    assert not overlaps(slot(540, 600), slot(480, 540))


def test_partial_containing_and_identical_slots_overlap():
    assert overlaps(slot(480, 540), slot(510, 570))
    assert overlaps(slot(510, 570), slot(480, 540))
    assert overlaps(slot(480, 600), slot(500, 520))
    assert overlaps(slot(500, 520), slot(480, 600))
    assert overlaps(slot(480, 540), slot(480, 540))


def test_slots_on_different_days_never_overlap():
    assert not overlaps(slot(480, 540, DayOfWeek.monday), slot(480, 540, DayOfWeek.tuesday))


def test_overlap_matches_shared_minutes_for_every_small_interval_pair():
    bounds = range(0, 7)
    intervals = [(start, end) for start, end in itertools.combinations(bounds, 2)]
    for (s1, e1), (s2, e2) in itertools.product(intervals, repeat=2):
        shares_minute = bool(set(range(s1, e1)) & set(range(s2, e2)))
        assert overlaps(slot(s1, e1), slot(s2, e2)) is shares_minute


def test_validate_slot_rejects_inverted_and_empty_ranges():
    with pytest.raises(InvalidSlotError, match="End time must be after start time"):
        validate_slot(slot(600, 540))
    with pytest.raises(InvalidSlotError):
        validate_slot(slot(600, 600))


@pytest.mark.parametrize("start,end", [(-1, 60), (60, 1440), (1440, 1500)])
def test_validate_slot_rejects_bounds_outside_the_day(start, end):
    with pytest.raises(InvalidSlotError):
        validate_slot(slot(start, end))


def test_validate_slot_rejects_unknown_day():
    with pytest.raises(InvalidSlotError):
        validate_slot(TimeSlot(day_of_week="MOONDAY", start=60, end=120))


def test_from_strings_parses_and_reports_invalid_format_as_invalid_slot():
    parsed = TimeSlot.from_strings("Mon", "08:00", "09:30")
    assert parsed == slot(480, 570)
    assert parsed.label() == "MONDAY 08:00-09:30"
    with pytest.raises(InvalidSlotError):
        TimeSlot.from_strings("Mon", "8am", "09:30")
