from collections.abc import Generator
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from classgrid.core.config import get_settings
from classgrid.db.session import SessionLocal
from classgrid.services.period_scheduler import PeriodScheduler
from classgrid.services.schedule_queries import ScheduleQueryService


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@lru_cache
def get_scheduler() -> PeriodScheduler:
    # One scheduler per process: its conflict index and bucket locks must be shared by every request.
    settings = get_settings()
    return PeriodScheduler(
        SessionLocal,
        retry_attempts=settings.scheduling_retry_attempts,
        retry_backoff_seconds=settings.scheduling_retry_backoff_seconds,
    )


def get_schedule_queries(db: Session = Depends(get_db)) -> ScheduleQueryService:
    return ScheduleQueryService(db)
