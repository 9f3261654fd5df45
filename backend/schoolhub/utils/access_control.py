"""
Declarative role policy.

Each action maps a role to the scope under which that role may perform it.
A role that is missing from an action's entry is denied outright.

Scopes:
    ANY      - no further check
    SCHOOL   - target school equals the requester's school
    ASSIGNED - requester is the target's teacher
    ENROLLED - requester is one of the target's students
    OWNER    - requester created the target
    SELF     - target is the requester
"""
from schoolhub.errors import Forbidden
from schoolhub.models import RoleEnum

ANY = "any"
SCHOOL = "school"
ASSIGNED = "assigned"
ENROLLED = "enrolled"
OWNER = "owner"
SELF = "self"

SUPERADMIN = RoleEnum.superadmin
SCHOOLADMIN = RoleEnum.schooladmin
TEACHER = RoleEnum.teacher
STUDENT = RoleEnum.student

POLICY = {
    # attendance
    "attendance.delete": {SUPERADMIN: ANY, SCHOOLADMIN: ANY},
    "attendance.classroom_records": {SUPERADMIN: ANY, SCHOOLADMIN: SCHOOL, TEACHER: ASSIGNED},

    # schools
    "school.create": {SUPERADMIN: ANY},
    "school.view": {SUPERADMIN: ANY, SCHOOLADMIN: SCHOOL, TEACHER: SCHOOL},
    "school.list": {SUPERADMIN: ANY, SCHOOLADMIN: SCHOOL},
    "school.update": {SUPERADMIN: ANY, SCHOOLADMIN: SCHOOL},
    "school.change_status": {SUPERADMIN: ANY},
    "school.delete": {SUPERADMIN: ANY},

    # classrooms
    "classroom.create": {SUPERADMIN: ANY, SCHOOLADMIN: SCHOOL, TEACHER: SCHOOL},
    "classroom.view": {SUPERADMIN: ANY, SCHOOLADMIN: SCHOOL, TEACHER: ASSIGNED, STUDENT: ENROLLED},
    "classroom.update": {SUPERADMIN: ANY, SCHOOLADMIN: SCHOOL, TEACHER: ASSIGNED},
    "classroom.delete": {SUPERADMIN: ANY, SCHOOLADMIN: SCHOOL},
    "classroom.manage_students": {SUPERADMIN: ANY, SCHOOLADMIN: SCHOOL, TEACHER: ASSIGNED},

    # users
    "user.list_all": {SUPERADMIN: ANY},
    "user.list_school": {SUPERADMIN: ANY, SCHOOLADMIN: SCHOOL, TEACHER: SCHOOL},
    "user.view": {SUPERADMIN: ANY, SCHOOLADMIN: SCHOOL, TEACHER: SCHOOL},
    "user.update": {SUPERADMIN: ANY, SCHOOLADMIN: SCHOOL, TEACHER: SCHOOL},
    "user.block": {SUPERADMIN: ANY, SCHOOLADMIN: SCHOOL},
    "user.delete": {SUPERADMIN: ANY},
    "user.reset_password": {SUPERADMIN: ANY, SCHOOLADMIN: SCHOOL},

    # reading
    "reading.create_paragraph": {TEACHER: ANY},
    "reading.view_paragraph": {SUPERADMIN: ANY, SCHOOLADMIN: SCHOOL, TEACHER: OWNER, STUDENT: SCHOOL},
    "reading.edit_paragraph": {TEACHER: OWNER},
    "reading.create_assignment": {TEACHER: SCHOOL},
    "reading.view_assignment": {TEACHER: OWNER, STUDENT: ENROLLED},
    "reading.complete_assignment": {STUDENT: ENROLLED},
    "reading.feedback": {TEACHER: OWNER},
    "reading.teacher_assignments": {TEACHER: ANY},
    "reading.my_assignments": {STUDENT: ANY},
}


def scope_holds(user, scope, school_id=None, teacher_id=None, student_ids=(), owner_id=None, target_id=None):
    if scope == ANY:
        return True
    if scope == SCHOOL:
        return school_id is not None and school_id == user.school_id
    if scope == ASSIGNED:
        return teacher_id is not None and teacher_id == user.id
    if scope == ENROLLED:
        return user.id in set(student_ids or ())
    if scope == OWNER:
        return owner_id is not None and owner_id == user.id
    if scope == SELF:
        return target_id is not None and target_id == user.id
    return False


def authorize(user, action, message=None, **target):
    """
    Raise Forbidden unless the user's role may perform `action` on the target.

    `target` accepts school_id, teacher_id, student_ids, owner_id and target_id.
    """
    rules = POLICY.get(action)
    if rules is None:
        raise KeyError(f"Unknown action '{action}'")

    scope = rules.get(user.role)
    if scope is None or not scope_holds(user, scope, **target):
        raise Forbidden(message or "Access forbidden: insufficient permissions")
    return scope


def is_allowed(user, action, **target):
    try:
        authorize(user, action, **target)
    except Forbidden:
        return False
    return True


def resolve_school_scope(user, requested_school_id=None):
    """
    Returns the school id a listing should be limited to, or None for no limit.
    - Superadmins see every school unless one is requested.
    - Everyone else is restricted to their own school.
    - Raises Forbidden when another school is requested.
    """
    if not user:
        raise ValueError("No user provided")

    if user.role == SUPERADMIN:
        return requested_school_id

    if user.school_id is None:
        raise Forbidden("No school is associated with this account")

    if requested_school_id is not None and int(requested_school_id) != user.school_id:
        raise Forbidden("Access denied to the requested school")

    return user.school_id
