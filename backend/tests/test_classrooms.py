import pytest

from schoolhub.errors import Forbidden, NotFound, ValidationError
from schoolhub.services import classrooms as classroom_service


def test_create_classroom(client, auth_headers, schooladmin, teacher, school):
    response = client.post("/classrooms", json={"name": "Grade 6 B", "teacher_id": teacher.id},
                           headers=auth_headers(schooladmin))

    assert response.status_code == 201
    body = response.get_json()
    assert body["school_id"] == school.id
    assert body["teacher"]["id"] == teacher.id
    assert body["students"] == []


def test_create_requires_a_teacher(app, schooladmin, students):
    with pytest.raises(ValidationError):
        classroom_service.create_classroom({"name": "X", "teacher_id": students[0].id}, schooladmin)
    with pytest.raises(NotFound):
        classroom_service.create_classroom({"name": "X", "teacher_id": 9999}, schooladmin)


def test_create_in_other_school_is_forbidden(app, teacher, make_school):
    other = make_school("Other")
    with pytest.raises(Forbidden):
        classroom_service.create_classroom({"name": "X", "teacher_id": teacher.id, "school_id": other.id}, teacher)


def test_list_classrooms_by_role(app, superadmin, schooladmin, teacher, students, classroom, make_user, make_classroom, school):
    other_teacher = make_user("teacher", school, name="Other Teacher")
    make_classroom(school, other_teacher, name="Grade 7")

    assert len(classroom_service.list_classrooms(superadmin)) == 2
    assert len(classroom_service.list_classrooms(schooladmin)) == 2
    assert [c["name"] for c in classroom_service.list_classrooms(teacher)] == ["Grade 5 A"]
    assert [c["name"] for c in classroom_service.list_classrooms(students[0])] == ["Grade 5 A"]


def test_get_classroom_scopes(app, teacher, students, classroom, make_user, school):
    assert classroom_service.get_classroom(classroom.id, students[0])["name"] == "Grade 5 A"

    outsider = make_user("student", school, name="Not Enrolled")
    with pytest.raises(Forbidden):
        classroom_service.get_classroom(classroom.id, outsider)

    other_teacher = make_user("teacher", school, name="Other Teacher")
    with pytest.raises(Forbidden):
        classroom_service.get_classroom(classroom.id, other_teacher)


def test_update_classroom(app, teacher, classroom):
    result = classroom_service.update_classroom(classroom.id, {"name": "Grade 5 Alpha"}, teacher)
    assert result["name"] == "Grade 5 Alpha"


def test_teacher_cannot_delete(client, auth_headers, teacher, classroom):
    assert client.delete(f"/classrooms/{classroom.id}", headers=auth_headers(teacher)).status_code == 403


def test_schooladmin_deletes(client, auth_headers, schooladmin, classroom):
    assert client.delete(f"/classrooms/{classroom.id}", headers=auth_headers(schooladmin)).status_code == 200
    assert client.get(f"/classrooms/{classroom.id}", headers=auth_headers(schooladmin)).status_code == 404


def test_add_students_skips_existing(app, teacher, classroom, students, make_user, school):
    newcomer = make_user("student", school, name="New Kid")

    result = classroom_service.add_students(classroom.id, {"student_ids": [students[0].id, newcomer.id]}, teacher)
    assert result["message"] == "1 students added to classroom"
    assert len(result["classroom"]["students"]) == 3

    again = classroom_service.add_students(classroom.id, {"student_ids": [newcomer.id]}, teacher)
    assert again == {"message": "All students are already in the classroom"}


def test_add_students_requires_student_accounts(app, teacher, classroom):
    with pytest.raises(ValidationError):
        classroom_service.add_students(classroom.id, {"student_ids": [teacher.id]}, teacher)


def test_remove_student(client, auth_headers, teacher, classroom, students):
    response = client.delete(f"/classrooms/{classroom.id}/students/{students[0].id}", headers=auth_headers(teacher))
    assert response.status_code == 200
    assert [s["id"] for s in response.get_json()["classroom"]["students"]] == [students[1].id]
