class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(
            f"{resource_type} with id {resource_id} not found",
            status_code=404,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class SchedulingError(AppError):
    """Raised when a period request cannot be scheduled as submitted."""
    def __init__(self, message: str, status_code: int = 400, details: dict = None):
        super().__init__(message, status_code=status_code, details=details)


class InvalidSlotError(SchedulingError):
    """Malformed day or time range."""
    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class InvalidPeriodRequestError(SchedulingError):
    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class NoTeacherAssignedError(SchedulingError):
    """The subject has no default teacher and the request named none."""
    def __init__(self, subject_id: str, subject_name: str):
        self.subject_id = subject_id
        self.subject_name = subject_name
        super().__init__(
            f"Subject {subject_name} has no assigned teacher",
            details={"subject_id": subject_id, "subject_name": subject_name},
        )


class TeacherConflictError(SchedulingError):
    """The teacher is already booked for an overlapping slot."""
    def __init__(self, teacher_id: str, conflict: dict):
        self.teacher_id = teacher_id
        self.conflict = conflict
        super().__init__(
            "Teacher is already booked for this time slot",
            status_code=409,
            details={"teacher_id": teacher_id, "conflict": conflict},
        )


class ClassConflictError(SchedulingError):
    """A linked class section already has a period in an overlapping slot."""
    def __init__(self, class_section_id: str, conflict: dict):
        self.class_section_id = class_section_id
        self.conflict = conflict
        super().__init__(
            "Class already has a period in this time slot",
            status_code=409,
            details={"class_section_id": class_section_id, "conflict": conflict},
        )


class SchedulingUnavailableError(SchedulingError):
    """Storage kept failing transiently after the bounded retries."""
    def __init__(self, message: str = "Scheduling is temporarily unavailable, please retry"):
        super().__init__(message, status_code=503)

