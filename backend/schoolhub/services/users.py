import logging

from schoolhub.errors import NotFound, Forbidden, ValidationError
from schoolhub.extensions import db
from schoolhub.models import User, School, RoleEnum
from schoolhub.utils.access_control import authorize
from schoolhub.utils.pagination import apply_pagination_and_search, pagination_meta
from schoolhub.utils.parsing import (
    parse_id, parse_role, parse_bool, parse_language, clean_additional_info, PROFILE_INFO_FIELDS,
)

logger = logging.getLogger(__name__)

ADMIN_ROLES = {RoleEnum.superadmin, RoleEnum.schooladmin}
PARENT_FIELDS = ("parent_language", "parent_occupation")
SEARCH_COLUMNS = ["name", "email", "mobile", "registration_id"]

# fields each role may change on another user
UPDATE_FIELDS = {
    RoleEnum.superadmin: {"name", "role", "school_id", "is_active", "email", "mobile", "additional_info",
                          "parent_language", "parent_occupation"},
    RoleEnum.schooladmin: {"name", "is_active", "email", "mobile", "additional_info",
                           "parent_language", "parent_occupation"},
    RoleEnum.teacher: {"name", "mobile", "additional_info", "parent_language", "parent_occupation"},
}


def load_user(user_id):
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def _check_target_role(current_user, target, message):
    """Schooladmins manage non-admin users, teachers manage students."""
    if current_user.role == RoleEnum.schooladmin and target.role in ADMIN_ROLES:
        raise Forbidden(message)
    if current_user.role == RoleEnum.teacher and target.role != RoleEnum.student:
        raise Forbidden(message)


def list_users(current_user, role=None, page=1, limit=10):
    authorize(current_user, "user.list_all")
    query = User.query.order_by(User.created_at.desc())
    if role:
        query = query.filter(User.role == parse_role(role))

    paginated = apply_pagination_and_search(query, User, None, [], page, limit)
    return {"data": [user.to_dict() for user in paginated.items], "meta": pagination_meta(paginated)}


def list_school_users(school_id, current_user, search=None, page=1, limit=10):
    authorize(current_user, "user.list_school", school_id=school_id,
              message="You can only list users of your own school")
    if db.session.get(School, school_id) is None:
        raise NotFound("School not found")

    query = User.query.filter(User.school_id == school_id).order_by(User.created_at.desc())
    columns = list(SEARCH_COLUMNS)
    if current_user.role == RoleEnum.teacher:
        query = query.filter(User.role == RoleEnum.student)
    else:
        columns.append(User.role)

    paginated = apply_pagination_and_search(query, User, search, columns, page, limit)
    return {"users": [user.to_dict() for user in paginated.items], "meta": pagination_meta(paginated)}


def get_user(user_id, current_user):
    user = load_user(user_id)
    if user.id != current_user.id:
        authorize(current_user, "user.view", school_id=user.school_id,
                  message="You can only view users of your own school")
        if current_user.role == RoleEnum.teacher and user.role != RoleEnum.student:
            raise Forbidden("Teachers can only view students")
    return user.to_dict()


def _apply_field(user, field, value):
    if field == "role":
        user.role = parse_role(value)
    elif field == "school_id":
        school_id = parse_id(value, "school_id") if value is not None else None
        if school_id is not None and db.session.get(School, school_id) is None:
            raise NotFound("School not found")
        user.school_id = school_id
    elif field == "is_active":
        user.is_active = parse_bool(value, "is_active")
    elif field == "name":
        if not value or not str(value).strip():
            raise ValidationError("name must not be empty")
        user.name = str(value).strip()
    else:
        setattr(user, field, value or None)


def update_user(user_id, data, current_user):
    user = load_user(user_id)
    if user.id == current_user.id:
        raise Forbidden("Use the profile endpoint to update your own account")

    authorize(current_user, "user.update", school_id=user.school_id,
              message="You can only update users of your own school")
    _check_target_role(current_user, user, "You are not allowed to update this user")

    allowed = UPDATE_FIELDS[current_user.role]
    if "is_active" in data and "is_active" not in allowed:
        raise Forbidden("You are not allowed to change the account status")

    info = {}
    if "additional_info" in data and "additional_info" in allowed:
        info = clean_additional_info(data["additional_info"])
    if user.role == RoleEnum.student:
        for field in PARENT_FIELDS:
            if data.get(field) and field in allowed:
                info[field] = parse_language(data[field]) if field == "parent_language" else data[field]
    else:
        info = {key: value for key, value in info.items() if key not in PARENT_FIELDS}

    for field in allowed - {"additional_info", *PARENT_FIELDS}:
        if field in data:
            _apply_field(user, field, data[field])
    for field, value in info.items():
        setattr(user, field, value)

    db.session.commit()
    logger.info(f"User {user.id} updated by {current_user.id}")
    return user.to_dict()


def set_active(user_id, current_user, active):
    user = load_user(user_id)
    if user.id == current_user.id:
        raise Forbidden("You cannot change the status of your own account")

    authorize(current_user, "user.block", school_id=user.school_id,
              message="You can only manage users of your own school")
    _check_target_role(current_user, user, "You cannot change the status of an administrator")

    user.is_active = active
    db.session.commit()
    return user.to_dict()


def delete_user(user_id, current_user):
    authorize(current_user, "user.delete")
    user = load_user(user_id)
    if user.id == current_user.id:
        raise Forbidden("You cannot delete your own account")

    db.session.delete(user)
    db.session.commit()
    return {"message": "User deleted successfully"}


def update_profile(current_user, data):
    if "name" in data:
        _apply_field(current_user, "name", data["name"])
    for field in ("email", "mobile"):
        if field in data:
            setattr(current_user, field, data[field] or None)

    info = clean_additional_info(data.get("additional_info"), allowed=PROFILE_INFO_FIELDS, strict=False)
    for field, value in info.items():
        setattr(current_user, field, value)

    db.session.commit()
    return current_user.to_dict()
