from __future__ import annotations

from dataclasses import dataclass
import re

from classgrid.core.exceptions import InvalidSlotError
from classgrid.models.timetable_period import DayOfWeek

MINUTES_PER_DAY = 24 * 60

TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):[0-5]\d\Z")

DAY_ORDER: dict[DayOfWeek, int] = {day: index for index, day in enumerate(DayOfWeek)}

DAY_ALIASES: dict[str, DayOfWeek] = {}
for _day in DayOfWeek:
    DAY_ALIASES[_day.value] = _day
    DAY_ALIASES[_day.value[:3]] = _day


def parse_day(value: str | DayOfWeek) -> DayOfWeek:
    """Accept MONDAY, Monday, monday or Mon."""
    if isinstance(value, DayOfWeek):
        return value
    day = DAY_ALIASES.get(str(value).strip().upper())
    if day is None:
        raise InvalidSlotError(f"Invalid day value: {value}")
    return day


def parse_time_to_minutes(value: str) -> int:
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def format_minutes(value: int) -> str:
    hours, minutes = divmod(value, 60)
    return f"{hours:02d}:{minutes:02d}"


@dataclass(frozen=True)
class TimeSlot:
    day_of_week: DayOfWeek
    start: int
    end: int

    @classmethod
    def from_strings(cls, day: str | DayOfWeek, start_time: str, end_time: str) -> "TimeSlot":
        try:
            start = parse_time_to_minutes(start_time)
            end = parse_time_to_minutes(end_time)
        except ValueError as exc:
            raise InvalidSlotError(str(exc)) from exc
        return cls(day_of_week=parse_day(day), start=start, end=end)

    @property
    def day_index(self) -> int:
        return DAY_ORDER[self.day_of_week]

    def label(self) -> str:
        return f"{self.day_of_week.value} {format_minutes(self.start)}-{format_minutes(self.end)}"


def overlaps(a: TimeSlot, b: TimeSlot) -> bool:
    # Half-open ranges: a period ending at 10:00 does not collide with one starting at 10:00.
    return a.day_of_week == b.day_of_week and a.start < b.end and b.start < a.end


def validate_slot(slot: TimeSlot) -> TimeSlot:
    if not isinstance(slot.day_of_week, DayOfWeek):
        raise InvalidSlotError(f"Invalid day value: {slot.day_of_week}")
    for bound in (slot.start, slot.end):
        if not isinstance(bound, int) or isinstance(bound, bool) or not 0 <= bound < MINUTES_PER_DAY:
            raise InvalidSlotError(f"Time bound {bound!r} is outside the day")
    if slot.start >= slot.end:
        raise InvalidSlotError("End time must be after start time")
    return slot
