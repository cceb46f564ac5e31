from pydantic import BaseModel, Field, field_validator

from classgrid.core.exceptions import InvalidSlotError
from classgrid.models.timetable_period import DayOfWeek
from classgrid.services.period_scheduler import PeriodRequest
from classgrid.services.time_slots import TIME_PATTERN, parse_day, parse_time_to_minutes


class PeriodCreate(BaseModel):
    class_section_ids: list[str] = Field(min_length=1, max_length=50)
    subject_id: str = Field(min_length=1, max_length=36)
    teacher_id: str | None = Field(default=None, max_length=36)
    day_of_week: DayOfWeek
    start_time: str
    end_time: str
    academic_term_id: str = Field(min_length=1, max_length=36)

    @field_validator("day_of_week", mode="before")
    @classmethod
    def normalize_day(cls, value):
        if isinstance(value, str):
            try:
                return parse_day(value)
            except InvalidSlotError as exc:
                raise ValueError("Invalid day value") from exc
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        if not TIME_PATTERN.match(value):
            raise ValueError("Time must be in HH:MM 24-hour format")
        return value

    @field_validator("class_section_ids")
    @classmethod
    def validate_unique_sections(cls, value: list[str]) -> list[str]:
        cleaned = [item.strip() for item in value]
        if any(not item for item in cleaned):
            raise ValueError("Class section ids must not be blank")
        if len(set(cleaned)) != len(cleaned):
            raise ValueError("Class section ids must be unique")
        return cleaned

    def to_request(self) -> PeriodRequest:
        return PeriodRequest(
            subject_id=self.subject_id,
            term_id=self.academic_term_id,
            day_of_week=self.day_of_week,
            start=parse_time_to_minutes(self.start_time),
            end=parse_time_to_minutes(self.end_time),
            class_section_ids=list(self.class_section_ids),
            teacher_id=self.teacher_id,
        )


class LinkedClassOut(BaseModel):
    id: str
    name: str


class PeriodOut(BaseModel):
    id: str
    subject_id: str
    subject_name: str | None = None
    teacher_id: str
    teacher_name: str | None = None
    academic_term_id: str
    day_of_week: DayOfWeek
    start_time: str
    end_time: str
    class_section_ids: list[str]
    classes: list[LinkedClassOut] = Field(default_factory=list)
    is_combined: bool
