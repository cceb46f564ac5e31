from fastapi import APIRouter, Depends, Query, Response, status

from classgrid.api.deps import get_schedule_queries, get_scheduler
from classgrid.models.timetable_period import DayOfWeek
from classgrid.schemas.timetable import PeriodCreate, PeriodOut
from classgrid.services.period_scheduler import PeriodScheduler
from classgrid.services.schedule_queries import ScheduleQueryService

router = APIRouter()


@router.get("/class/{class_id}", response_model=list[PeriodOut])
def get_timetable_by_class(
    class_id: str,
    term_id: str = Query(min_length=1, max_length=36),
    queries: ScheduleQueryService = Depends(get_schedule_queries),
) -> list[PeriodOut]:
    return queries.by_class(class_id, term_id)


@router.get("/teacher/{teacher_id}", response_model=list[PeriodOut])
def get_timetable_by_teacher(
    teacher_id: str,
    term_id: str = Query(min_length=1, max_length=36),
    queries: ScheduleQueryService = Depends(get_schedule_queries),
) -> list[PeriodOut]:
    return queries.by_teacher(teacher_id, term_id)


@router.get("/teacher/{teacher_id}/day/{day}", response_model=list[PeriodOut])
def get_teacher_day(
    teacher_id: str,
    day: DayOfWeek,
    term_id: str = Query(min_length=1, max_length=36),
    queries: ScheduleQueryService = Depends(get_schedule_queries),
) -> list[PeriodOut]:
    return queries.teacher_day(teacher_id, term_id, day)


@router.get("/term/{term_id}", response_model=list[PeriodOut])
def get_timetable_by_term(
    term_id: str,
    queries: ScheduleQueryService = Depends(get_schedule_queries),
) -> list[PeriodOut]:
    return queries.by_term(term_id)


@router.post("", response_model=PeriodOut, status_code=status.HTTP_201_CREATED)
def create_timetable_period(
    payload: PeriodCreate,
    scheduler: PeriodScheduler = Depends(get_scheduler),
    queries: ScheduleQueryService = Depends(get_schedule_queries),
) -> PeriodOut:
    record = scheduler.create_period(payload.to_request())
    return queries.present(record)


@router.delete("/{period_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_timetable_period(
    period_id: str,
    scheduler: PeriodScheduler = Depends(get_scheduler),
) -> Response:
    scheduler.delete_period(period_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
