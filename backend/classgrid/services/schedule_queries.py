from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from classgrid.models.class_section import ClassSection
from classgrid.models.subject import Subject
from classgrid.models.teacher import Teacher
from classgrid.models.timetable_period import DayOfWeek
from classgrid.schemas.timetable import LinkedClassOut, PeriodOut
from classgrid.services.directory import Directory
from classgrid.services.period_store import PeriodRecord, PeriodStore
from classgrid.services.time_slots import DAY_ORDER, format_minutes, parse_day


def _by_start(record: PeriodRecord) -> tuple[int, int, int, str]:
    return (record.slot.start, DAY_ORDER[record.slot.day_of_week], record.slot.end, record.id)


def _by_day_then_start(record: PeriodRecord) -> tuple[int, int, int, str]:
    return (DAY_ORDER[record.slot.day_of_week], record.slot.start, record.slot.end, record.id)


class ScheduleQueryService:
    """Read-side timetable views, queried straight from the period tables."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.store = PeriodStore(db)
        self.directory = Directory(db)

    def by_class(self, class_section_id: str, term_id: str) -> list[PeriodOut]:
        self.directory.get_class_section(class_section_id)
        records = self.store.for_class_section(class_section_id, term_id)
        return self._present(sorted(records, key=_by_start))

    def by_teacher(self, teacher_id: str, term_id: str) -> list[PeriodOut]:
        self.directory.get_teacher(teacher_id)
        records = self.store.for_teacher(teacher_id, term_id)
        return self._present(sorted(records, key=_by_start))

    def by_term(self, term_id: str) -> list[PeriodOut]:
        records = self.store.for_term(term_id)
        return self._present(sorted(records, key=_by_day_then_start))

    def teacher_day(self, teacher_id: str, term_id: str, day: DayOfWeek | str) -> list[PeriodOut]:
        day_of_week = parse_day(day)
        self.directory.get_teacher(teacher_id)
        records = [
            record
            for record in self.store.for_teacher(teacher_id, term_id)
            if record.slot.day_of_week == day_of_week
        ]
        return self._present(sorted(records, key=_by_start))

    def present(self, record: PeriodRecord) -> PeriodOut:
        return self._present([record])[0]

    def _present(self, records: list[PeriodRecord]) -> list[PeriodOut]:
        if not records:
            return []
        subject_ids = {record.subject_id for record in records}
        teacher_ids = {record.teacher_id for record in records}
        class_ids = {class_id for record in records for class_id in record.class_section_ids}

        subject_names = {
            row.id: row.name
            for row in self.db.execute(select(Subject).where(Subject.id.in_(subject_ids))).scalars()
        }
        teacher_names = {
            row.id: row.full_name
            for row in self.db.execute(select(Teacher).where(Teacher.id.in_(teacher_ids))).scalars()
        }
        class_names = {
            row.id: row.name
            for row in self.db.execute(select(ClassSection).where(ClassSection.id.in_(class_ids))).scalars()
        }

        return [
            PeriodOut(
                id=record.id,
                subject_id=record.subject_id,
                subject_name=subject_names.get(record.subject_id),
                teacher_id=record.teacher_id,
                teacher_name=teacher_names.get(record.teacher_id),
                academic_term_id=record.academic_term_id,
                day_of_week=record.slot.day_of_week,
                start_time=format_minutes(record.slot.start),
                end_time=format_minutes(record.slot.end),
                class_section_ids=list(record.class_section_ids),
                classes=[
                    LinkedClassOut(id=class_id, name=class_names[class_id])
                    for class_id in record.class_section_ids
                    if class_id in class_names
                ],
                is_combined=record.is_combined,
            )
            for record in records
        ]
