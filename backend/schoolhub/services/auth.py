import logging
import secrets
import string
from datetime import datetime, timezone

from flask import current_app
from flask_jwt_extended import create_access_token

from schoolhub.errors import ValidationError, Unauthorized, Forbidden, NotFound
from schoolhub.extensions import db
from schoolhub.models import User, School, TokenBlocklist, RoleEnum
from schoolhub.utils.access_control import authorize
from schoolhub.utils.parsing import require_fields, parse_id, parse_role, parse_language, clean_additional_info

logger = logging.getLogger(__name__)

REGISTRATION_ID_CHARS = string.ascii_uppercase + string.digits
REGISTRATION_ID_LENGTH = 8
MIN_PASSWORD_LENGTH = 6

PERMISSION_MATRIX = {
    RoleEnum.superadmin: {RoleEnum.schooladmin, RoleEnum.teacher, RoleEnum.student},
    RoleEnum.schooladmin: {RoleEnum.teacher, RoleEnum.student},
    RoleEnum.teacher: {RoleEnum.student},
}


def generate_registration_id(model=User):
    while True:
        registration_id = "".join(secrets.choice(REGISTRATION_ID_CHARS) for _ in range(REGISTRATION_ID_LENGTH))
        if not model.query.filter_by(registration_id=registration_id).first():
            return registration_id


def _onboard_school_id(data, creator):
    requested = data.get("school_id")
    requested = parse_id(requested, "school_id") if requested not in (None, "") else None

    if creator.role != RoleEnum.superadmin:
        if requested is not None and requested != creator.school_id:
            raise Forbidden("You can only onboard users into your own school")
        return creator.school_id

    if requested is not None and db.session.get(School, requested) is None:
        raise NotFound("School not found")
    return requested


def onboard_user(data, creator):
    require_fields(data, "name", "role")
    role = parse_role(data["role"])

    allowed_roles = PERMISSION_MATRIX.get(creator.role, set())
    if role not in allowed_roles:
        raise Forbidden(f"Role {creator.role.value} not allowed to create {role.value}")

    info = clean_additional_info(data.get("additional_info"))
    if role == RoleEnum.student:
        if data.get("parent_language"):
            info.setdefault("parent_language", parse_language(data["parent_language"]))
        if data.get("parent_occupation"):
            info.setdefault("parent_occupation", data["parent_occupation"])

    default_password = current_app.config["DEFAULT_USER_PASSWORD"]
    user = User(
        name=data["name"].strip(),
        role=role,
        registration_id=generate_registration_id(),
        school_id=_onboard_school_id(data, creator),
        email=data.get("email") or None,
        mobile=data.get("mobile") or None,
        **info,
    )
    user.set_password(default_password)
    db.session.add(user)
    db.session.commit()
    logger.info(f"User {user.registration_id} ({role.value}) onboarded by {creator.id}")

    return {
        "message": f"{role.value} onboarded successfully",
        "registration_id": user.registration_id,
        "default_password": default_password,
    }


def onboard_superadmin(data):
    secret = current_app.config.get("SUPERADMIN_SECRET")
    if not secret or data.get("secret") != secret:
        raise Forbidden("Invalid or missing superadmin secret")
    if User.query.filter_by(role=RoleEnum.superadmin).first():
        raise Forbidden("Superadmin already exists")

    require_fields(data, "name")
    default_password = current_app.config["DEFAULT_USER_PASSWORD"]
    user = User(
        name=data["name"].strip(),
        role=RoleEnum.superadmin,
        registration_id=generate_registration_id(),
        email=data.get("email") or None,
        mobile=data.get("mobile") or None,
    )
    user.set_password(default_password)
    db.session.add(user)
    db.session.commit()
    logger.info(f"Superadmin {user.registration_id} created")

    return {
        "message": "superadmin onboarded successfully",
        "registration_id": user.registration_id,
        "default_password": default_password,
    }


def login(registration_id, password):
    if not registration_id or not password:
        raise ValidationError("registration_id and password are required")

    user = User.query.filter_by(registration_id=registration_id.strip()).first()
    if not user:
        raise Unauthorized("Invalid registration_id")
    if not user.check_password(password):
        raise Unauthorized("Incorrect password")
    if not user.is_active:
        raise Unauthorized("Your account has been blocked")

    access_token = create_access_token(
        identity=str(user.id),
        additional_claims={"role": user.role.value, "school_id": user.school_id},
    )
    return user, {"access_token": access_token, "user": user.to_dict()}


def logout(jwt_payload, user_id):
    expires = datetime.fromtimestamp(jwt_payload["exp"], tz=timezone.utc).replace(tzinfo=None)
    db.session.add(TokenBlocklist(jti=jwt_payload["jti"], user_id=user_id, expires_at=expires))
    db.session.commit()
    return {"message": "Successfully logged out"}


def reset_password(user, data):
    require_fields(data, "current_password", "new_password")
    if not user.check_password(data["current_password"]):
        raise Unauthorized("Current password is incorrect")
    if len(data["new_password"]) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    user.set_password(data["new_password"])
    db.session.commit()
    return {"message": "Password updated successfully"}


def admin_reset_password(current_user, data):
    require_fields(data, "user_id", "new_password")
    new_password = data["new_password"]
    if not isinstance(new_password, str) or len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    user = db.session.get(User, parse_id(data["user_id"], "user_id"))
    if not user:
        raise NotFound("User not found")

    authorize(current_user, "user.reset_password", school_id=user.school_id,
              message="You can only reset passwords for users in your school")

    user.set_password(new_password)
    db.session.commit()
    return user, {"message": "Password updated successfully by administrator"}
