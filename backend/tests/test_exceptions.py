from classgrid.core.exceptions import (
    AppError,
    ClassConflictError,
    NoTeacherAssignedError,
    ResourceNotFoundError,
    SchedulingError,
    SchedulingUnavailableError,
    TeacherConflictError,
)


def test_app_error_defaults():
    err = AppError("Generic error")
    assert err.status_code == 500
    assert err.details == {}


def test_scheduling_errors_share_a_base_and_carry_status_codes():
    teacher = TeacherConflictError("t1", {"id": "p1"})
    section = ClassConflictError("c1", {"id": "p2"})
    missing_teacher = NoTeacherAssignedError("s1", "Math")
    unavailable = SchedulingUnavailableError()

    assert all(isinstance(err, SchedulingError) for err in (teacher, section, missing_teacher, unavailable))
    assert (teacher.status_code, section.status_code) == (409, 409)
    assert missing_teacher.status_code == 400
    assert unavailable.status_code == 503
    assert section.details == {"class_section_id": "c1", "conflict": {"id": "p2"}}


def test_not_found_names_the_resource():
    err = ResourceNotFoundError("Teacher", "t9")
    assert err.status_code == 404
    assert err.message == "Teacher with id t9 not found"
    assert isinstance(err, AppError)
    assert not isinstance(err, SchedulingError)
