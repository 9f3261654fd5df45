import logging

from schoolhub.errors import NotFound, ValidationError
from schoolhub.extensions import db
from schoolhub.models import School, User, RoleEnum
from schoolhub.services.auth import generate_registration_id
from schoolhub.utils.access_control import authorize, resolve_school_scope
from schoolhub.utils.pagination import apply_pagination_and_search, pagination_meta
from schoolhub.utils.parsing import require_fields, parse_bool

logger = logging.getLogger(__name__)

SEARCH_COLUMNS = ["name", "address", "registration_id"]
UPDATABLE_FIELDS = {"name", "address"}


def _load_school(school_id):
    school = db.session.get(School, school_id)
    if school is None:
        raise NotFound("School not found")
    return school


def create_school(data, current_user):
    authorize(current_user, "school.create")
    require_fields(data, "name")

    school = School(
        name=data["name"].strip(),
        address=data.get("address"),
        registration_id=generate_registration_id(School),
        created_by_id=current_user.id,
    )
    db.session.add(school)
    db.session.commit()
    logger.info(f"School {school.registration_id} created by {current_user.id}")

    return {
        "message": "School created successfully",
        "school_id": school.id,
        "registration_id": school.registration_id,
    }


def get_school(school_id, current_user, page=1, limit=10):
    school = _load_school(school_id)
    authorize(current_user, "school.view", school_id=school.id,
              message="You can only view your own school")

    if current_user.role == RoleEnum.teacher:
        return {"school": {"name": school.name, "address": school.address}}

    users = apply_pagination_and_search(
        User.query.filter(User.school_id == school.id).order_by(User.created_at.desc()),
        User, None, [], page, limit,
    )
    return {
        "school": school.to_dict(),
        "users": [user.to_dict() for user in users.items],
        "meta": pagination_meta(users),
    }


def list_schools(current_user, search=None, page=1, limit=10):
    authorize(current_user, "school.list", school_id=current_user.school_id)
    school_id = resolve_school_scope(current_user)

    query = School.query.order_by(School.created_at.desc())
    if school_id is not None:
        query = query.filter(School.id == school_id)

    paginated = apply_pagination_and_search(query, School, search, SEARCH_COLUMNS, page, limit)
    return {
        "schools": [school.to_dict() for school in paginated.items],
        "meta": pagination_meta(paginated),
    }


def update_school(school_id, data, current_user):
    school = _load_school(school_id)
    authorize(current_user, "school.update", school_id=school.id,
              message="You can only update your own school")

    if "is_active" in data:
        authorize(current_user, "school.change_status",
                  message="Only superadmin can change school status")
        school.is_active = parse_bool(data["is_active"], "is_active")

    for field in UPDATABLE_FIELDS & set(data):
        setattr(school, field, data[field])

    db.session.commit()
    return {"message": "School updated successfully", "school": school.to_dict()}


def delete_school(school_id, current_user):
    authorize(current_user, "school.delete")
    school = _load_school(school_id)
    if User.query.filter(User.school_id == school.id).first():
        raise ValidationError("Remove or reassign the school's users before deleting it")

    db.session.delete(school)
    db.session.commit()
    return {"message": "School deleted successfully"}
