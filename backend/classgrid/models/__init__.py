from classgrid.models.academic_term import AcademicTerm  # noqa: F401
from classgrid.models.class_section import ClassSection  # noqa: F401
from classgrid.models.subject import Subject  # noqa: F401
from classgrid.models.teacher import Teacher  # noqa: F401
from classgrid.models.timetable_period import DayOfWeek, TimetablePeriod, TimetablePeriodClass  # noqa: F401
