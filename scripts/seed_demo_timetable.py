"""Seed a demo term, staff, classes and a small weekly timetable.

Run:
  PYTHONPATH=backend python scripts/seed_demo_timetable.py
"""

from __future__ import annotations

import logging

from sqlalchemy import select

from classgrid.core.exceptions import SchedulingError
from classgrid.db.bootstrap import ensure_runtime_schema
from classgrid.db.session import SessionLocal
from classgrid.models import AcademicTerm, ClassSection, Subject, Teacher
from classgrid.services.period_scheduler import PeriodRequest, PeriodScheduler
from classgrid.services.time_slots import parse_time_to_minutes

logger = logging.getLogger("seed_demo_timetable")

TERM_NAME = "Demo Term 1"
TEACHERS = [
    ("Grace Mwale", "grace.mwale@demo.school"),
    ("Peter Banda", "peter.banda@demo.school"),
    ("Ruth Phiri", "ruth.phiri@demo.school"),
]
CLASSES = [("Grade 5A", 5), ("Grade 5B", 5), ("Grade 6A", 6)]
SUBJECTS = [
    ("MATH", "Mathematics", "grace.mwale@demo.school"),
    ("ENG", "English", "peter.banda@demo.school"),
    ("SCI", "Science", "ruth.phiri@demo.school"),
    ("PE", "Physical Education", None),
]

# (subject code, class names, day, start, end, teacher email override)
WEEK = [
    ("MATH", ["Grade 5A"], "MONDAY", "08:00", "09:00", None),
    ("MATH", ["Grade 5B"], "MONDAY", "09:00", "10:00", None),
    ("ENG", ["Grade 5A"], "MONDAY", "09:00", "10:00", None),
    ("SCI", ["Grade 6A"], "MONDAY", "08:00", "09:00", None),
    ("PE", ["Grade 5A", "Grade 5B"], "TUESDAY", "10:00", "11:00", "peter.banda@demo.school"),
    ("MATH", ["Grade 6A"], "TUESDAY", "08:00", "09:00", None),
    ("ENG", ["Grade 6A"], "WEDNESDAY", "08:00", "09:00", None),
    # Deliberate clash with the Monday 08:00 Grade 5A lesson.
    ("SCI", ["Grade 5A"], "MONDAY", "08:30", "09:30", None),
]


def _get_or_create(db, model, lookup: dict, values: dict):
    instance = db.execute(select(model).filter_by(**lookup)).scalar_one_or_none()
    if instance is None:
        instance = model(**lookup, **values)
        db.add(instance)
        db.flush()
    return instance


def seed_directory() -> dict[str, dict[str, str]]:
    with SessionLocal() as db:
        term = _get_or_create(db, AcademicTerm, {"name": TERM_NAME}, {})
        teachers = {
            email: _get_or_create(db, Teacher, {"email": email}, {"full_name": name}).id
            for name, email in TEACHERS
        }
        classes = {
            name: _get_or_create(db, ClassSection, {"name": name}, {"grade_level": grade}).id
            for name, grade in CLASSES
        }
        subjects = {
            code: _get_or_create(
                db,
                Subject,
                {"code": code},
                {"name": name, "teacher_id": teachers.get(email) if email else None},
            ).id
            for code, name, email in SUBJECTS
        }
        db.commit()
        return {"term": {"id": term.id}, "teachers": teachers, "classes": classes, "subjects": subjects}


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")
    ensure_runtime_schema()
    ids = seed_directory()
    scheduler = PeriodScheduler(SessionLocal)

    created = 0
    for subject_code, class_names, day, start, end, teacher_email in WEEK:
        request = PeriodRequest(
            subject_id=ids["subjects"][subject_code],
            term_id=ids["term"]["id"],
            day_of_week=day,
            start=parse_time_to_minutes(start),
            end=parse_time_to_minutes(end),
            class_section_ids=[ids["classes"][name] for name in class_names],
            teacher_id=ids["teachers"][teacher_email] if teacher_email else None,
        )
        try:
            scheduler.create_period(request)
            created += 1
        except SchedulingError as exc:
            logger.info("Skipped %s %s %s-%s: %s", subject_code, day, start, end, exc.message)

    logger.info("Seeded %d period(s) into %s", created, TERM_NAME)


if __name__ == "__main__":
    main()
