import pytest

from schoolhub.errors import Forbidden, ValidationError, NotFound
from schoolhub.extensions import db
from schoolhub.models import User, ParentLanguage, RoleEnum
from schoolhub.services import users as user_service


def test_superadmin_lists_users_with_role_filter(client, auth_headers, superadmin, teacher, students):
    response = client.get("/users?role=student&limit=1", headers=auth_headers(superadmin))

    body = response.get_json()
    assert response.status_code == 200
    assert len(body["data"]) == 1
    assert body["data"][0]["role"] == "student"
    assert body["meta"]["total"] == 2


def test_schooladmin_cannot_list_all_users(client, auth_headers, schooladmin):
    assert client.get("/users", headers=auth_headers(schooladmin)).status_code == 403


def test_teacher_sees_only_students_of_own_school(app, teacher, schooladmin, students, school):
    result = user_service.list_school_users(school.id, teacher)
    assert {u["role"] for u in result["users"]} == {"student"}
    assert result["meta"]["total"] == 2


def test_school_user_search(app, schooladmin, teacher, students, school):
    result = user_service.list_school_users(school.id, schooladmin, search="meera")
    assert [u["name"] for u in result["users"]] == ["Meera Iyer"]


def test_list_other_school_is_forbidden(app, schooladmin, make_school):
    with pytest.raises(Forbidden):
        user_service.list_school_users(make_school("Other").id, schooladmin)


def test_get_user_scopes(app, teacher, schooladmin, students, make_school, make_user):
    assert user_service.get_user(students[0].id, teacher)["name"] == "Ravi Kumar"
    with pytest.raises(Forbidden):
        user_service.get_user(schooladmin.id, teacher)

    outsider = make_user("student", make_school("Other"))
    with pytest.raises(Forbidden):
        user_service.get_user(outsider.id, schooladmin)
    with pytest.raises(NotFound):
        user_service.get_user(9999, schooladmin)


def test_self_update_is_refused(app, schooladmin):
    with pytest.raises(Forbidden):
        user_service.update_user(schooladmin.id, {"name": "New"}, schooladmin)


def test_teacher_updates_student_parent_fields(app, teacher, students):
    result = user_service.update_user(students[0].id, {
        "name": "Ravi K", "parent_language": "marathi", "email": "ignored@example.com",
    }, teacher)

    assert result["name"] == "Ravi K"
    assert result["email"] is None
    assert result["additional_info"]["parent_language"] == "marathi"


def test_teacher_cannot_toggle_active(app, teacher, students):
    with pytest.raises(Forbidden):
        user_service.update_user(students[0].id, {"is_active": False}, teacher)


def test_schooladmin_cannot_update_other_admin(app, schooladmin, make_user, school):
    peer = make_user("schooladmin", school)
    with pytest.raises(Forbidden):
        user_service.update_user(peer.id, {"name": "x"}, schooladmin)


def test_superadmin_can_change_role_and_school(app, superadmin, teacher, make_school):
    other = make_school("Other")
    result = user_service.update_user(teacher.id, {"role": "schooladmin", "school_id": other.id}, superadmin)
    assert result["role"] == "schooladmin"
    assert result["school_id"] == other.id


def test_update_rejects_unknown_additional_info(app, superadmin, students):
    with pytest.raises(ValidationError):
        user_service.update_user(students[0].id, {"additional_info": {"shoe_size": 5}}, superadmin)


def test_parent_fields_ignored_for_non_students(app, superadmin, teacher):
    user_service.update_user(teacher.id, {"parent_language": "hindi"}, superadmin)
    assert teacher.parent_language is None


def test_block_and_unblock(client, auth_headers, schooladmin, teacher):
    response = client.patch(f"/users/block/{teacher.id}", headers=auth_headers(schooladmin))
    assert response.get_json()["is_active"] is False

    blocked = client.get("/auth/verify", headers=auth_headers(teacher))
    assert blocked.status_code == 401

    response = client.patch(f"/users/unblock/{teacher.id}", headers=auth_headers(schooladmin))
    assert response.get_json()["is_active"] is True


def test_cannot_block_self_or_admins(app, schooladmin, superadmin):
    with pytest.raises(Forbidden):
        user_service.set_active(schooladmin.id, schooladmin, False)
    with pytest.raises(Forbidden):
        user_service.set_active(superadmin.id, schooladmin, False)


def test_delete_user(client, auth_headers, superadmin, students):
    student_id = students[0].id
    assert client.delete(f"/users/{student_id}", headers=auth_headers(superadmin)).status_code == 200
    assert db.session.get(User, student_id) is None
    assert client.delete(f"/users/{superadmin.id}", headers=auth_headers(superadmin)).status_code == 403


def test_profile_update_drops_unknown_keys(client, auth_headers, students):
    response = client.put("/users/profile", json={
        "name": "Ravi Kumar",
        "additional_info": {"bio": "Likes cricket", "parent_language": "tamil", "shoe_size": 5},
    }, headers=auth_headers(students[0]))

    assert response.status_code == 200
    assert response.get_json()["additional_info"] == {"bio": "Likes cricket"}
    assert students[0].parent_language is None
    assert students[0].role == RoleEnum.student


def test_language_defaults_to_english(app, students):
    assert students[0].language == "english"
    students[0].parent_language = ParentLanguage.urdu
    assert students[0].language == "urdu"
