from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
import logging
import time
from typing import TypeVar

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from classgrid.core.exceptions import (
    ClassConflictError,
    InvalidPeriodRequestError,
    NoTeacherAssignedError,
    SchedulingUnavailableError,
    TeacherConflictError,
)
from classgrid.models.timetable_period import DayOfWeek
from classgrid.services.conflict_index import Booking, BucketKey, ConflictIndex, ResourceKind, bucket_key
from classgrid.services.directory import Directory
from classgrid.services.period_store import PeriodRecord, PeriodStore
from classgrid.services.time_slots import TimeSlot, format_minutes, parse_day, validate_slot

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class PeriodRequest:
    subject_id: str
    term_id: str
    day_of_week: DayOfWeek | str
    start: int
    end: int
    class_section_ids: list[str] = field(default_factory=list)
    teacher_id: str | None = None

    @property
    def slot(self) -> TimeSlot:
        return TimeSlot(day_of_week=parse_day(self.day_of_week), start=self.start, end=self.end)


class PeriodScheduler:
    """Creates and deletes timetable periods without double-booking anyone.

    A period is committed only after the teacher and every linked class
    section were checked against the conflict index, all while holding the
    locks for those buckets. The index is hydrated per term from the period
    table the first time a term is touched. Creates and deletes run inside
    the term's shared gate; deleting the term itself takes the gate
    exclusively, so no period can land in a term that is being removed.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        index: ConflictIndex | None = None,
        *,
        retry_attempts: int = 3,
        retry_backoff_seconds: float = 0.05,
    ) -> None:
        self._session_factory = session_factory
        self.index = index if index is not None else ConflictIndex()
        self._retry_attempts = max(1, retry_attempts)
        self._retry_backoff_seconds = max(0.0, retry_backoff_seconds)

    def create_period(self, request: PeriodRequest) -> PeriodRecord:
        class_section_ids = _validate_class_sections(request.class_section_ids)
        slot = validate_slot(request.slot)
        return self._with_retries(
            "create period",
            lambda: self._create_once(request, class_section_ids, slot),
        )

    def delete_period(self, period_id: str) -> None:
        self._with_retries("delete period", lambda: self._delete_once(period_id))

    def delete_term(self, term_id: str) -> int:
        """Delete a term together with all of its periods. Returns how many periods went."""
        return self._with_retries("delete term", lambda: self._delete_term_once(term_id))

    def _create_once(self, request: PeriodRequest, class_section_ids: list[str], slot: TimeSlot) -> PeriodRecord:
        with self.index.term_shared(request.term_id), self._session_factory() as db:
            directory = Directory(db)
            directory.get_term(request.term_id)
            subject = directory.get_subject(request.subject_id)
            teacher_id = request.teacher_id or subject.teacher_id
            if not teacher_id:
                raise NoTeacherAssignedError(subject.id, subject.name)
            directory.get_teacher(teacher_id)
            directory.get_class_sections(class_section_ids)

            store = PeriodStore(db)
            self._ensure_term_loaded(store, request.term_id)

            keys = self._bucket_keys(teacher_id, class_section_ids, request.term_id, slot.day_of_week)
            with self.index.bucket_locks(keys):
                booking = self.index.find_conflict(ResourceKind.teacher, teacher_id, request.term_id, slot)
                if booking is not None:
                    logger.warning(
                        "Rejected %s for teacher %s: overlaps period %s",
                        slot.label(),
                        teacher_id,
                        booking.period_id,
                    )
                    raise TeacherConflictError(teacher_id, self._describe(store, booking))

                for class_section_id in class_section_ids:
                    booking = self.index.find_conflict(
                        ResourceKind.class_section, class_section_id, request.term_id, slot
                    )
                    if booking is not None:
                        logger.warning(
                            "Rejected %s for class %s: overlaps period %s",
                            slot.label(),
                            class_section_id,
                            booking.period_id,
                        )
                        raise ClassConflictError(class_section_id, self._describe(store, booking))

                record = store.add(
                    subject_id=subject.id,
                    teacher_id=teacher_id,
                    term_id=request.term_id,
                    slot=slot,
                    class_section_ids=class_section_ids,
                )
                db.commit()
                self._index_record(record)

        logger.info(
            "Created period %s (%s) for teacher %s and %d class section(s)",
            record.id,
            slot.label(),
            teacher_id,
            len(class_section_ids),
        )
        return record

    def _delete_once(self, period_id: str) -> None:
        with self._session_factory() as db:
            store = PeriodStore(db)
            record = store.get(period_id)
            if record is None:
                logger.debug("Period %s already absent", period_id)
                return
            keys = self._bucket_keys(
                record.teacher_id,
                record.class_section_ids,
                record.academic_term_id,
                record.slot.day_of_week,
            )
            with self.index.term_shared(record.academic_term_id):
                self._ensure_term_loaded(store, record.academic_term_id)
                with self.index.bucket_locks(keys):
                    removed = store.delete(period_id)
                    db.commit()
                    if removed is not None:
                        self._unindex_record(removed)
        logger.info("Deleted period %s", period_id)

    def _delete_term_once(self, term_id: str) -> int:
        with self.index.term_exclusive(term_id), self._session_factory() as db:
            term = Directory(db).get_term(term_id)
            with self.index.hydration_lock:
                records = PeriodStore(db).delete_term(term_id)
                db.delete(term)
                db.commit()
                self.index.drop_term(term_id)
        logger.info("Deleted term %s and %d period(s)", term_id, len(records))
        return len(records)

    def _ensure_term_loaded(self, store: PeriodStore, term_id: str) -> None:
        if self.index.is_loaded(term_id):
            return
        with self.index.hydration_lock:
            if self.index.is_loaded(term_id):
                return
            records = store.for_term(term_id)
            for record in records:
                self._index_record(record)
            self.index.mark_loaded(term_id)
        logger.debug("Loaded %d period(s) of term %s into the conflict index", len(records), term_id)

    def _index_record(self, record: PeriodRecord) -> None:
        self.index.insert(ResourceKind.teacher, record.teacher_id, record.academic_term_id, record.slot, record.id)
        for class_section_id in record.class_section_ids:
            self.index.insert(
                ResourceKind.class_section,
                class_section_id,
                record.academic_term_id,
                record.slot,
                record.id,
            )

    def _unindex_record(self, record: PeriodRecord) -> None:
        self.index.remove(ResourceKind.teacher, record.teacher_id, record.academic_term_id, record.id)
        for class_section_id in record.class_section_ids:
            self.index.remove(ResourceKind.class_section, class_section_id, record.academic_term_id, record.id)

    @staticmethod
    def _bucket_keys(
        teacher_id: str,
        class_section_ids: list[str] | tuple[str, ...],
        term_id: str,
        day: DayOfWeek,
    ) -> list[BucketKey]:
        keys = [bucket_key(ResourceKind.teacher, teacher_id, term_id, day)]
        keys.extend(
            bucket_key(ResourceKind.class_section, class_section_id, term_id, day)
            for class_section_id in class_section_ids
        )
        return keys

    @staticmethod
    def _describe(store: PeriodStore, booking: Booking) -> dict:
        record = store.get(booking.period_id)
        if record is not None:
            return record.summary()
        return {
            "id": booking.period_id,
            "day_of_week": booking.day_of_week.value,
            "start_time": format_minutes(booking.start),
            "end_time": format_minutes(booking.end),
        }

    def _with_retries(self, action: str, operation: Callable[[], T]) -> T:
        for attempt in range(1, self._retry_attempts + 1):
            try:
                return operation()
            except OperationalError as exc:
                if attempt >= self._retry_attempts:
                    logger.error("Giving up on %s after %d attempt(s): %s", action, attempt, exc)
                    raise SchedulingUnavailableError() from exc
                logger.warning("Transient storage failure during %s (attempt %d): %s", action, attempt, exc)
                if self._retry_backoff_seconds > 0:
                    time.sleep(self._retry_backoff_seconds * attempt)
        raise SchedulingUnavailableError()


def _validate_class_sections(class_section_ids: list[str] | tuple[str, ...]) -> list[str]:
    ids = [str(item).strip() for item in class_section_ids]
    if not ids:
        raise InvalidPeriodRequestError("At least one class section is required")
    if any(not item for item in ids):
        raise InvalidPeriodRequestError("Class section ids must not be blank")
    seen: set[str] = set()
    duplicates: set[str] = set()
    for item in ids:
        if item in seen:
            duplicates.add(item)
        else:
            seen.add(item)
    if duplicates:
        raise InvalidPeriodRequestError(f"Duplicate class sections: {', '.join(sorted(duplicates))}")
    return ids
