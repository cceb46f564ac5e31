from __future__ import annotations

from bisect import insort
from collections import defaultdict
from collections.abc import Iterable, Iterator
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from enum import Enum
from threading import Condition, Lock

from classgrid.models.timetable_period import DayOfWeek
from classgrid.services.time_slots import TimeSlot, overlaps


class ResourceKind(str, Enum):
    teacher = "TEACHER"
    class_section = "CLASS"


BucketKey = tuple[ResourceKind, str, str, DayOfWeek]


@dataclass(frozen=True, order=True)
class Booking:
    start: int
    end: int
    period_id: str
    day_of_week: DayOfWeek

    @property
    def slot(self) -> TimeSlot:
        return TimeSlot(day_of_week=self.day_of_week, start=self.start, end=self.end)


def bucket_key(kind: ResourceKind, resource_id: str, term_id: str, day: DayOfWeek) -> BucketKey:
    return (kind, resource_id, term_id, day)


def _sort_key(key: BucketKey) -> tuple[str, str, str, str]:
    kind, resource_id, term_id, day = key
    return (kind.value, resource_id, term_id, day.value)


class _TermGate:
    """Many writers inside a term at once, or one term-wide deletion."""

    def __init__(self) -> None:
        self._cond = Condition()
        self._active = 0
        self._closing = False

    @contextmanager
    def shared(self) -> Iterator[None]:
        with self._cond:
            while self._closing:
                self._cond.wait()
            self._active += 1
        try:
            yield
        finally:
            with self._cond:
                self._active -= 1
                if self._active == 0:
                    self._cond.notify_all()

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        with self._cond:
            while self._closing:
                self._cond.wait()
            # Shared entrants block from here until the exclusive holder leaves.
            self._closing = True
            while self._active:
                self._cond.wait()
        try:
            yield
        finally:
            with self._cond:
                self._closing = False
                self._cond.notify_all()


class ConflictIndex:
    """Bookings per (resource kind, resource id, term, day), kept sorted by start.

    The index is a projection over timetable periods. Callers must hold the
    bucket locks for every bucket they check and then insert into, so the
    check and the insert happen as one step.
    """

    def __init__(self) -> None:
        self._buckets: dict[BucketKey, list[Booking]] = defaultdict(list)
        self._bucket_locks: dict[BucketKey, Lock] = {}
        self._term_gates: dict[str, _TermGate] = {}
        self._loaded_terms: set[str] = set()
        self._lock = Lock()
        self.hydration_lock = Lock()

    def find_conflict(
        self,
        kind: ResourceKind,
        resource_id: str,
        term_id: str,
        slot: TimeSlot,
    ) -> Booking | None:
        key = bucket_key(kind, resource_id, term_id, slot.day_of_week)
        with self._lock:
            entries = list(self._buckets.get(key, ()))
        for booking in entries:
            if booking.start >= slot.end:
                break
            if overlaps(booking.slot, slot):
                return booking
        return None

    def insert(
        self,
        kind: ResourceKind,
        resource_id: str,
        term_id: str,
        slot: TimeSlot,
        period_id: str,
    ) -> None:
        key = bucket_key(kind, resource_id, term_id, slot.day_of_week)
        booking = Booking(start=slot.start, end=slot.end, period_id=period_id, day_of_week=slot.day_of_week)
        with self._lock:
            bucket = self._buckets[key]
            if booking not in bucket:
                insort(bucket, booking)

    def remove(self, kind: ResourceKind, resource_id: str, term_id: str, period_id: str) -> int:
        removed = 0
        with self._lock:
            for day in DayOfWeek:
                key = bucket_key(kind, resource_id, term_id, day)
                bucket = self._buckets.get(key)
                if not bucket:
                    continue
                kept = [booking for booking in bucket if booking.period_id != period_id]
                removed += len(bucket) - len(kept)
                if kept:
                    self._buckets[key] = kept
                else:
                    del self._buckets[key]
        return removed

    def bookings(self, kind: ResourceKind, resource_id: str, term_id: str, day: DayOfWeek) -> list[Booking]:
        with self._lock:
            return list(self._buckets.get(bucket_key(kind, resource_id, term_id, day), ()))

    def entry_count(self, term_id: str | None = None) -> int:
        with self._lock:
            return sum(
                len(bucket)
                for key, bucket in self._buckets.items()
                if term_id is None or key[2] == term_id
            )

    @contextmanager
    def bucket_locks(self, keys: Iterable[BucketKey]) -> Iterator[None]:
        # Sorted acquisition keeps two requests sharing buckets from deadlocking.
        ordered = sorted(set(keys), key=_sort_key)
        with self._lock:
            locks = [self._bucket_locks.setdefault(key, Lock()) for key in ordered]
        with ExitStack() as stack:
            for lock in locks:
                stack.enter_context(lock)
            yield

    def _gate(self, term_id: str) -> _TermGate:
        with self._lock:
            return self._term_gates.setdefault(term_id, _TermGate())

    @contextmanager
    def term_shared(self, term_id: str) -> Iterator[None]:
        """Held by anything that reads or writes bookings of one term."""
        with self._gate(term_id).shared():
            yield

    @contextmanager
    def term_exclusive(self, term_id: str) -> Iterator[None]:
        """Waits for in-flight work on the term to finish and keeps new work out."""
        with self._gate(term_id).exclusive():
            yield

    def is_loaded(self, term_id: str) -> bool:
        with self._lock:
            return term_id in self._loaded_terms

    def mark_loaded(self, term_id: str) -> None:
        with self._lock:
            self._loaded_terms.add(term_id)

    def drop_term(self, term_id: str) -> None:
        with self._lock:
            for key in [key for key in self._buckets if key[2] == term_id]:
                del self._buckets[key]
            self._loaded_terms.discard(term_id)

    def clear(self) -> None:
        with self._lock:
            self._buckets.clear()
            self._loaded_terms.clear()
