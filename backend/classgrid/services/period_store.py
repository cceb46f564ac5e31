from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from classgrid.models.timetable_period import TimetablePeriod, TimetablePeriodClass
from classgrid.services.time_slots import TimeSlot, format_minutes


@dataclass(frozen=True)
class PeriodRecord:
    id: str
    subject_id: str
    teacher_id: str
    academic_term_id: str
    slot: TimeSlot
    class_section_ids: tuple[str, ...]

    @property
    def is_combined(self) -> bool:
        return len(self.class_section_ids) > 1

    def summary(self) -> dict:
        return {
            "id": self.id,
            "subject_id": self.subject_id,
            "teacher_id": self.teacher_id,
            "academic_term_id": self.academic_term_id,
            "day_of_week": self.slot.day_of_week.value,
            "start_time": format_minutes(self.slot.start),
            "end_time": format_minutes(self.slot.end),
            "class_section_ids": list(self.class_section_ids),
        }


class PeriodStore:
    """Reads and writes period rows and their class-section join rows.

    Nothing here commits; the caller owns the transaction.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def add(
        self,
        *,
        subject_id: str,
        teacher_id: str,
        term_id: str,
        slot: TimeSlot,
        class_section_ids: Sequence[str],
    ) -> PeriodRecord:
        period = TimetablePeriod(
            subject_id=subject_id,
            teacher_id=teacher_id,
            academic_term_id=term_id,
            day_of_week=slot.day_of_week,
            start_minute=slot.start,
            end_minute=slot.end,
        )
        self.db.add(period)
        self.db.flush()
        for position, class_section_id in enumerate(class_section_ids):
            self.db.add(
                TimetablePeriodClass(
                    period_id=period.id,
                    class_section_id=class_section_id,
                    position=position,
                )
            )
        self.db.flush()
        return _to_record(period, list(class_section_ids))

    def get(self, period_id: str) -> PeriodRecord | None:
        period = self.db.get(TimetablePeriod, period_id)
        if period is None:
            return None
        return self.records([period])[0]

    def delete(self, period_id: str) -> PeriodRecord | None:
        record = self.get(period_id)
        if record is None:
            return None
        self.db.execute(delete(TimetablePeriodClass).where(TimetablePeriodClass.period_id == period_id))
        self.db.execute(delete(TimetablePeriod).where(TimetablePeriod.id == period_id))
        return record

    def for_term(self, term_id: str) -> list[PeriodRecord]:
        periods = self.db.execute(
            select(TimetablePeriod).where(TimetablePeriod.academic_term_id == term_id)
        ).scalars()
        return self.records(list(periods))

    def for_class_section(self, class_section_id: str, term_id: str) -> list[PeriodRecord]:
        periods = self.db.execute(
            select(TimetablePeriod)
            .join(TimetablePeriodClass, TimetablePeriodClass.period_id == TimetablePeriod.id)
            .where(
                TimetablePeriodClass.class_section_id == class_section_id,
                TimetablePeriod.academic_term_id == term_id,
            )
        ).scalars()
        return self.records(list(periods))

    def for_teacher(self, teacher_id: str, term_id: str) -> list[PeriodRecord]:
        periods = self.db.execute(
            select(TimetablePeriod).where(
                TimetablePeriod.teacher_id == teacher_id,
                TimetablePeriod.academic_term_id == term_id,
            )
        ).scalars()
        return self.records(list(periods))

    def delete_term(self, term_id: str) -> list[PeriodRecord]:
        records = self.for_term(term_id)
        period_ids = [record.id for record in records]
        if period_ids:
            self.db.execute(delete(TimetablePeriodClass).where(TimetablePeriodClass.period_id.in_(period_ids)))
            self.db.execute(delete(TimetablePeriod).where(TimetablePeriod.id.in_(period_ids)))
        return records

    def records(self, periods: list[TimetablePeriod]) -> list[PeriodRecord]:
        if not periods:
            return []
        links: dict[str, list[TimetablePeriodClass]] = defaultdict(list)
        rows = self.db.execute(
            select(TimetablePeriodClass).where(
                TimetablePeriodClass.period_id.in_([period.id for period in periods])
            )
        ).scalars()
        for row in rows:
            links[row.period_id].append(row)
        result = []
        for period in periods:
            ordered = sorted(links[period.id], key=lambda item: item.position)
            result.append(_to_record(period, [item.class_section_id for item in ordered]))
        return result


def _to_record(period: TimetablePeriod, class_section_ids: list[str]) -> PeriodRecord:
    return PeriodRecord(
        id=period.id,
        subject_id=period.subject_id,
        teacher_id=period.teacher_id,
        academic_term_id=period.academic_term_id,
        slot=TimeSlot(day_of_week=period.day_of_week, start=period.start_minute, end=period.end_minute),
        class_section_ids=tuple(class_section_ids),
    )
