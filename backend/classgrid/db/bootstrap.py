from __future__ import annotations

import logging

from sqlalchemy import inspect

from classgrid.db.base import Base
from classgrid.db.session import engine
import classgrid.models  # noqa: F401

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "academic_terms": {"id", "name"},
    "subjects": {"id", "code", "name", "teacher_id"},
    "class_sections": {"id", "name", "grade_level"},
    "teachers": {"id", "full_name", "email"},
    "timetable_periods": {
        "id",
        "subject_id",
        "teacher_id",
        "academic_term_id",
        "day_of_week",
        "start_minute",
        "end_minute",
    },
    "timetable_period_classes": {"period_id", "class_section_id", "position"},
}


def missing_schema(connection) -> tuple[list[str], dict[str, list[str]]]:
    inspector = inspect(connection)
    table_names = set(inspector.get_table_names())
    missing_tables: list[str] = []
    missing_columns: dict[str, list[str]] = {}
    for table_name, columns in REQUIRED_COLUMNS.items():
        if table_name not in table_names:
            missing_tables.append(table_name)
            continue
        existing = {item["name"] for item in inspector.get_columns(table_name)}
        missing = sorted(columns - existing)
        if missing:
            missing_columns[table_name] = missing
    return sorted(missing_tables), missing_columns


def _assert_required_columns() -> None:
    with engine.begin() as connection:
        missing_tables, missing_columns = missing_schema(connection)
    if missing_tables:
        raise RuntimeError(f"Missing required tables: {', '.join(missing_tables)}")
    if missing_columns:
        flattened = [f"{table}.{column}" for table, columns in missing_columns.items() for column in columns]
        raise RuntimeError(f"Missing required columns: {', '.join(flattened)}")


def ensure_runtime_schema() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        _assert_required_columns()
    except Exception as exc:  # pragma: no cover - runtime environment dependent
        logger.exception("Runtime schema bootstrap failed")
        raise RuntimeError("Runtime schema bootstrap failed") from exc
