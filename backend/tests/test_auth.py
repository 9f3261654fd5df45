import re

import pytest

from schoolhub.extensions import db
from schoolhub.models import User, ParentLanguage, TokenBlocklist
from schoolhub.services.auth import generate_registration_id


def login(client, user, password="Pass@123"):
    return client.post("/auth/login", json={"registration_id": user.registration_id, "password": password})


def test_registration_id_format(app):
    assert re.fullmatch(r"[A-Z0-9]{8}", generate_registration_id())


def test_onboard_superadmin_requires_secret(client):
    response = client.post("/auth/onboard-superadmin", json={"name": "Root", "secret": "wrong"})
    assert response.status_code == 403


def test_onboard_superadmin_only_once(client):
    first = client.post("/auth/onboard-superadmin", json={"name": "Root", "secret": "test-secret"})
    assert first.status_code == 201
    assert first.get_json()["default_password"] == "Pass@123"

    second = client.post("/auth/onboard-superadmin", json={"name": "Root 2", "secret": "test-secret"})
    assert second.status_code == 403
    assert second.get_json() == {"error": "Superadmin already exists"}


def test_superadmin_onboards_schooladmin(client, auth_headers, superadmin, school):
    response = client.post("/auth/onboard", json={"name": "Asha", "role": "schooladmin", "school_id": school.id},
                           headers=auth_headers(superadmin))

    assert response.status_code == 201
    body = response.get_json()
    assert body["message"] == "schooladmin onboarded successfully"
    created = User.query.filter_by(registration_id=body["registration_id"]).one()
    assert created.school_id == school.id
    assert created.check_password("Pass@123")


@pytest.mark.parametrize("creator_role, target_role", [
    ("schooladmin", "schooladmin"),
    ("teacher", "teacher"),
    ("teacher", "schooladmin"),
    ("schooladmin", "superadmin"),
])
def test_permission_matrix_denies(client, auth_headers, make_user, school, creator_role, target_role):
    creator = make_user(creator_role, school)
    response = client.post("/auth/onboard", json={"name": "New", "role": target_role},
                           headers=auth_headers(creator))
    assert response.status_code == 403


def test_student_cannot_onboard(client, auth_headers, students):
    response = client.post("/auth/onboard", json={"name": "New", "role": "student"},
                           headers=auth_headers(students[0]))
    assert response.status_code == 403


def test_teacher_onboards_student_with_parent_fields(client, auth_headers, teacher, school):
    response = client.post("/auth/onboard", json={
        "name": "Ravi", "role": "student", "mobile": "919800000001",
        "parent_language": "hindi", "parent_occupation": "Farmer",
    }, headers=auth_headers(teacher))

    assert response.status_code == 201
    student = User.query.filter_by(registration_id=response.get_json()["registration_id"]).one()
    assert student.school_id == school.id
    assert student.parent_language == ParentLanguage.hindi
    assert student.additional_info == {"parent_language": "hindi", "parent_occupation": "Farmer"}


def test_non_superadmin_cannot_onboard_into_other_school(client, auth_headers, teacher, make_school):
    other = make_school("Dagbreek Primary")
    response = client.post("/auth/onboard", json={"name": "Ravi", "role": "student", "school_id": other.id},
                           headers=auth_headers(teacher))
    assert response.status_code == 403


def test_onboard_rejects_unknown_additional_info(client, auth_headers, teacher):
    response = client.post("/auth/onboard", json={
        "name": "Ravi", "role": "student", "additional_info": {"favourite_colour": "blue"},
    }, headers=auth_headers(teacher))
    assert response.status_code == 400


def test_login_returns_token_and_user_without_password(client, teacher):
    response = login(client, teacher)

    assert response.status_code == 200
    body = response.get_json()
    assert body["access_token"]
    assert body["user"]["registration_id"] == teacher.registration_id
    assert "password_hash" not in body["user"]


def test_login_failures(client, teacher, app):
    assert login(client, teacher, "wrong").status_code == 401
    assert client.post("/auth/login", json={"registration_id": "NOPE1234", "password": "x"}).status_code == 401

    with open(app.config["AUDIT_LOG_FILE"]) as audit:
        assert "LOGIN_FAILED" in audit.read()


def test_blocked_user_cannot_login(client, teacher):
    teacher.is_active = False
    db.session.commit()
    response = login(client, teacher)
    assert response.status_code == 401
    assert response.get_json() == {"error": "Your account has been blocked"}


def test_logout_revokes_token(client, teacher):
    token = login(client, teacher).get_json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}

    assert client.get("/auth/verify", headers=headers).status_code == 200
    assert client.post("/auth/logout", headers=headers).status_code == 200
    assert TokenBlocklist.query.count() == 1
    assert client.get("/auth/verify", headers=headers).status_code == 401


def test_verify_requires_token(client):
    assert client.get("/auth/verify").status_code == 401


def test_reset_password(client, auth_headers, teacher):
    bad = client.post("/auth/reset-password", json={"current_password": "nope", "new_password": "secret1"},
                      headers=auth_headers(teacher))
    assert bad.status_code == 401

    ok = client.post("/auth/reset-password", json={"current_password": "Pass@123", "new_password": "secret1"},
                     headers=auth_headers(teacher))
    assert ok.status_code == 200
    assert login(client, teacher, "secret1").status_code == 200


def test_admin_reset_password_rules(client, auth_headers, schooladmin, teacher, make_school, make_user):
    too_short = client.post("/auth/admin-reset-password", json={"user_id": teacher.id, "new_password": "abc"},
                            headers=auth_headers(schooladmin))
    assert too_short.status_code == 400

    ok = client.post("/auth/admin-reset-password", json={"user_id": teacher.id, "new_password": "newpass"},
                     headers=auth_headers(schooladmin))
    assert ok.status_code == 200
    assert login(client, teacher, "newpass").status_code == 200

    outsider = make_user("teacher", make_school("Dagbreek Primary"))
    denied = client.post("/auth/admin-reset-password", json={"user_id": outsider.id, "new_password": "newpass"},
                         headers=auth_headers(schooladmin))
    assert denied.status_code == 403

    missing = client.post("/auth/admin-reset-password", json={"user_id": 9999, "new_password": "newpass"},
                          headers=auth_headers(schooladmin))
    assert missing.status_code == 404


def test_teacher_cannot_admin_reset(client, auth_headers, teacher, students):
    response = client.post("/auth/admin-reset-password", json={"user_id": students[0].id, "new_password": "newpass"},
                           headers=auth_headers(teacher))
    assert response.status_code == 403


def test_unknown_route_uses_json_errors(client):
    response = client.get("/no-such-route")
    assert response.status_code == 404
    assert "error" in response.get_json()


def test_home(client):
    assert client.get("/").get_json() == {"message": "Welcome to the SchoolHub API!"}


def test_onboard_rejects_unknown_role(client, auth_headers, superadmin):
    response = client.post("/auth/onboard", json={"name": "X", "role": "janitor"}, headers=auth_headers(superadmin))
    assert response.status_code == 400
