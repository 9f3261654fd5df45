import pytest

from schoolhub.errors import Forbidden, ValidationError
from schoolhub.services import schools as school_service


def test_superadmin_creates_school(client, auth_headers, superadmin):
    response = client.post("/schools", json={"name": "Dagbreek Primary", "address": "456 Another St"},
                           headers=auth_headers(superadmin))

    assert response.status_code == 201
    body = response.get_json()
    assert body["message"] == "School created successfully"
    assert len(body["registration_id"]) == 8


def test_schooladmin_cannot_create_school(client, auth_headers, schooladmin):
    assert client.post("/schools", json={"name": "X"}, headers=auth_headers(schooladmin)).status_code == 403


def test_list_schools_with_search(app, superadmin, make_school):
    make_school("Alpha Academy")
    make_school("Beta School")

    result = school_service.list_schools(superadmin, search="alpha")
    assert [s["name"] for s in result["schools"]] == ["Alpha Academy"]


def test_schooladmin_sees_only_own_school(app, schooladmin, school, make_school):
    make_school("Other")
    result = school_service.list_schools(schooladmin)
    assert [s["id"] for s in result["schools"]] == [school.id]


def test_teacher_gets_limited_view(app, teacher, school):
    assert school_service.get_school(school.id, teacher) == {
        "school": {"name": school.name, "address": school.address},
    }


def test_schooladmin_view_includes_users(app, schooladmin, teacher, school):
    result = school_service.get_school(school.id, schooladmin)
    assert result["school"]["id"] == school.id
    assert result["meta"]["total"] == 2


def test_view_other_school_is_forbidden(app, schooladmin, make_school):
    with pytest.raises(Forbidden):
        school_service.get_school(make_school("Other").id, schooladmin)


def test_schooladmin_updates_name_but_not_status(app, schooladmin, school):
    result = school_service.update_school(school.id, {"name": "Woodlands Primary"}, schooladmin)
    assert result["school"]["name"] == "Woodlands Primary"

    with pytest.raises(Forbidden):
        school_service.update_school(school.id, {"is_active": False}, schooladmin)


def test_superadmin_deactivates_school(app, superadmin, school):
    result = school_service.update_school(school.id, {"is_active": False}, superadmin)
    assert result["school"]["is_active"] is False


def test_delete_school(client, auth_headers, superadmin, make_school):
    empty = make_school("Empty School")
    assert client.delete(f"/schools/{empty.id}", headers=auth_headers(superadmin)).status_code == 200
    assert client.get(f"/schools/{empty.id}", headers=auth_headers(superadmin)).status_code == 404


def test_delete_school_with_users_is_refused(app, superadmin, school, teacher):
    with pytest.raises(ValidationError):
        school_service.delete_school(school.id, superadmin)
