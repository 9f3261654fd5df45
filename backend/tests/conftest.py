import pytest
import requests
from flask_jwt_extended import create_access_token

from schoolhub import create_app
from schoolhub.config import TestingConfig
from schoolhub.extensions import db, sms_gateway
from schoolhub.models import School, User, Classroom, RoleEnum
from schoolhub.services.auth import generate_registration_id


class FakeMessage:
    def __init__(self, sid):
        self.sid = sid


class FakeMessages:
    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)

    def create(self, body, from_, to):
        if to in self.fail_for:
            raise RuntimeError("provider rejected the message")
        self.sent.append({"body": body, "from_": from_, "to": to})
        return FakeMessage(f"SM{len(self.sent):04d}")


class FakeTwilioClient:
    def __init__(self, fail_for=()):
        self.messages = FakeMessages(fail_for)


class FakeResponse:
    def __init__(self, payload=None, status_code=200, json_error=None):
        self.payload = payload
        self.status_code = status_code
        self.json_error = json_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self.json_error:
            raise self.json_error
        return self.payload


@pytest.fixture
def app(tmp_path):
    class Config(TestingConfig):
        AUDIT_LOG_FILE = str(tmp_path / "audit.log")

    app = create_app(Config)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def fake_sms(app, monkeypatch):
    """Route SMS through an in-memory Twilio client."""
    client = FakeTwilioClient()
    monkeypatch.setattr(sms_gateway, "client", client)
    monkeypatch.setattr(sms_gateway, "from_number", "+15550009999")
    return client.messages


@pytest.fixture
def make_school(app):
    def _make(name="Woodlands Primary School"):
        school = School(name=name, address="123 Main St", registration_id=generate_registration_id(School))
        db.session.add(school)
        db.session.commit()
        return school
    return _make


@pytest.fixture
def make_user(app):
    def _make(role, school=None, name=None, password="Pass@123", **fields):
        role = RoleEnum(role) if isinstance(role, str) else role
        user = User(
            name=name or f"{role.value.title()} User",
            role=role,
            registration_id=generate_registration_id(),
            school_id=school.id if school else None,
            **fields,
        )
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user
    return _make


@pytest.fixture
def make_classroom(app):
    def _make(school, teacher, students=(), name="Grade 5 A"):
        classroom = Classroom(name=name, school_id=school.id, teacher_id=teacher.id, students=list(students))
        db.session.add(classroom)
        db.session.commit()
        return classroom
    return _make


@pytest.fixture
def auth_headers(app):
    def _headers(user):
        token = create_access_token(
            identity=str(user.id),
            additional_claims={"role": user.role.value, "school_id": user.school_id},
        )
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def school(make_school):
    return make_school()


@pytest.fixture
def superadmin(make_user):
    return make_user("superadmin", name="Platform Admin")


@pytest.fixture
def schooladmin(make_user, school):
    return make_user("schooladmin", school, name="Asha Admin")


@pytest.fixture
def teacher(make_user, school):
    return make_user("teacher", school, name="Tom Teacher")


@pytest.fixture
def students(make_user, school):
    return [
        make_user("student", school, name="Ravi Kumar", mobile="+919800000001"),
        make_user("student", school, name="Meera Iyer", mobile="919800000002"),
    ]


@pytest.fixture
def classroom(make_classroom, school, teacher, students):
    return make_classroom(school, teacher, students)
