import pytest

from schoolhub.errors import Forbidden
from schoolhub.models import User, RoleEnum, School, AttendanceEntry
from schoolhub.utils.access_control import POLICY, SELF, authorize, is_allowed, resolve_school_scope, scope_holds
from schoolhub.utils.pagination import apply_pagination_and_search, pagination_meta
from schoolhub.utils.statistics import attendance_statistics, completion_statistics


def person(role, user_id=1, school_id=10):
    return User(id=user_id, role=RoleEnum(role), school_id=school_id, name="x", registration_id="X")


def test_missing_role_is_denied():
    with pytest.raises(Forbidden):
        authorize(person("teacher"), "attendance.delete")


def test_custom_message_is_used():
    with pytest.raises(Forbidden) as excinfo:
        authorize(person("student"), "attendance.delete", message="nope")
    assert excinfo.value.message == "nope"


def test_school_scope():
    assert authorize(person("schooladmin"), "school.update", school_id=10)
    with pytest.raises(Forbidden):
        authorize(person("schooladmin"), "school.update", school_id=11)
    with pytest.raises(Forbidden):
        authorize(person("schooladmin", school_id=None), "school.update", school_id=None)


def test_assigned_scope():
    teacher = person("teacher", user_id=7)
    assert is_allowed(teacher, "attendance.classroom_records", teacher_id=7, school_id=10)
    assert not is_allowed(teacher, "attendance.classroom_records", teacher_id=8, school_id=10)


def test_enrolled_scope():
    student = person("student", user_id=3)
    assert is_allowed(student, "classroom.view", student_ids=[1, 3])
    assert not is_allowed(student, "classroom.view", student_ids=[1, 2])


def test_owner_scope():
    teacher = person("teacher", user_id=7)
    assert is_allowed(teacher, "reading.edit_paragraph", owner_id=7)
    assert not is_allowed(teacher, "reading.edit_paragraph", owner_id=2)


def test_self_scope():
    assert scope_holds(person("student", user_id=3), SELF, target_id=3)
    assert not scope_holds(person("student", user_id=3), SELF, target_id=4)


def test_superadmin_any_scope():
    admin = person("superadmin", school_id=None)
    assert is_allowed(admin, "classroom.view", school_id=99, teacher_id=5)


def test_unknown_action_is_a_programming_error():
    with pytest.raises(KeyError):
        authorize(person("superadmin"), "does.not.exist")


def test_every_policy_entry_uses_known_roles():
    for rules in POLICY.values():
        assert set(rules) <= set(RoleEnum)


def test_resolve_school_scope():
    assert resolve_school_scope(person("superadmin", school_id=None)) is None
    assert resolve_school_scope(person("superadmin", school_id=None), 4) == 4
    assert resolve_school_scope(person("teacher")) == 10
    assert resolve_school_scope(person("teacher"), "10") == 10
    with pytest.raises(Forbidden):
        resolve_school_scope(person("teacher"), 11)
    with pytest.raises(Forbidden):
        resolve_school_scope(person("teacher", school_id=None))


def test_attendance_statistics_rounds_to_two_places():
    entries = [AttendanceEntry(student_id=i, present=i != 2) for i in range(3)]
    assert attendance_statistics(entries) == {
        "total_students": 3, "present_students": 2, "absent_students": 1, "attendance_rate": 66.67,
    }


def test_attendance_statistics_empty():
    assert attendance_statistics([])["attendance_rate"] == 0


def test_attendance_statistics_rounds_halves_up():
    entries = [AttendanceEntry(student_id=i, present=i == 0) for i in range(32)]
    assert attendance_statistics(entries)["attendance_rate"] == 3.13


def test_completion_statistics():
    assert completion_statistics(1, 3) == {"completed": 1, "total": 3, "percentage": 33}
    assert completion_statistics(2, 3)["percentage"] == 67
    assert completion_statistics(0, 0)["percentage"] == 0
    assert completion_statistics(1, 8)["percentage"] == 13
    assert completion_statistics(3, 8)["percentage"] == 38


def test_pagination_search_and_meta(app, make_school):
    for name in ("Alpha Academy", "Beta School", "Alpine High"):
        make_school(name)

    paginated = apply_pagination_and_search(School.query.order_by(School.id), School, "alp", ["name"], 1, 1)
    assert [s.name for s in paginated.items] == ["Alpha Academy"]
    assert pagination_meta(paginated) == {"total": 2, "page": 1, "limit": 1, "total_pages": 2}


def test_pagination_clamps_bad_page_values(app, make_school):
    make_school("Alpha Academy")
    paginated = apply_pagination_and_search(School.query, School, None, [], 0, -5)
    assert pagination_meta(paginated) == {"total": 1, "page": 1, "limit": 10, "total_pages": 1}
