import logging

from schoolhub.errors import NotFound, ValidationError
from schoolhub.extensions import db
from schoolhub.models import Classroom, School, User, RoleEnum, classroom_students
from schoolhub.utils.access_control import authorize
from schoolhub.utils.parsing import require_fields, parse_id, parse_id_list

logger = logging.getLogger(__name__)


def _load_classroom(classroom_id):
    classroom = db.session.get(Classroom, classroom_id)
    if classroom is None:
        raise NotFound("Classroom not found")
    return classroom


def _load_teacher(teacher_id):
    teacher = db.session.get(User, parse_id(teacher_id, "teacher_id"))
    if teacher is None:
        raise NotFound("Teacher not found")
    if teacher.role != RoleEnum.teacher:
        raise ValidationError("The specified user is not a teacher")
    return teacher


def create_classroom(data, current_user):
    require_fields(data, "name", "teacher_id")

    school_id = data.get("school_id") or current_user.school_id
    if school_id is None:
        raise ValidationError("school_id is required")
    school_id = parse_id(school_id, "school_id")

    authorize(current_user, "classroom.create", school_id=school_id,
              message="You can only create classrooms for your own school")
    if db.session.get(School, school_id) is None:
        raise NotFound("School not found")

    teacher = _load_teacher(data["teacher_id"])
    classroom = Classroom(
        name=data["name"].strip(),
        description=data.get("description"),
        teacher_id=teacher.id,
        school_id=school_id,
    )
    db.session.add(classroom)
    db.session.commit()
    logger.info(f"Classroom {classroom.id} created in school {school_id} by {current_user.id}")
    return classroom.to_dict(include_students=True)


def list_classrooms(current_user):
    query = Classroom.query
    if current_user.role == RoleEnum.schooladmin:
        query = query.filter(Classroom.school_id == current_user.school_id)
    elif current_user.role == RoleEnum.teacher:
        query = query.filter(Classroom.teacher_id == current_user.id)
    elif current_user.role == RoleEnum.student:
        query = query.join(classroom_students).filter(classroom_students.c.student_id == current_user.id)

    return [classroom.to_dict() for classroom in query.order_by(Classroom.created_at.desc()).all()]


def _authorize_classroom(current_user, action, classroom, message):
    authorize(
        current_user, action,
        school_id=classroom.school_id,
        teacher_id=classroom.teacher_id,
        student_ids=classroom.student_ids,
        message=message,
    )


def get_classroom(classroom_id, current_user):
    classroom = _load_classroom(classroom_id)
    _authorize_classroom(current_user, "classroom.view", classroom,
                         "You can only view classrooms you teach, manage or attend")
    return classroom.to_dict(include_students=True)


def update_classroom(classroom_id, data, current_user):
    classroom = _load_classroom(classroom_id)
    _authorize_classroom(current_user, "classroom.update", classroom,
                         "You can only update your own classrooms")

    if data.get("teacher_id"):
        classroom.teacher_id = _load_teacher(data["teacher_id"]).id
    if data.get("name"):
        classroom.name = data["name"].strip()
    if data.get("description"):
        classroom.description = data["description"]

    db.session.commit()
    return classroom.to_dict(include_students=True)


def delete_classroom(classroom_id, current_user):
    classroom = _load_classroom(classroom_id)
    _authorize_classroom(current_user, "classroom.delete", classroom,
                         "You can only delete classrooms in your school")
    db.session.delete(classroom)
    db.session.commit()
    return {"message": "Classroom deleted successfully"}


def add_students(classroom_id, data, current_user):
    classroom = _load_classroom(classroom_id)
    _authorize_classroom(current_user, "classroom.manage_students", classroom,
                         "You can only add students to your own classrooms")

    student_ids = list(dict.fromkeys(parse_id_list(data.get("student_ids"), "student_ids")))
    if not student_ids:
        raise ValidationError("student_ids must not be empty")

    students = User.query.filter(User.id.in_(student_ids), User.role == RoleEnum.student).all()
    if len(students) != len(student_ids):
        raise ValidationError("All IDs must belong to valid student accounts")

    current_ids = set(classroom.student_ids)
    new_students = [student for student in students if student.id not in current_ids]
    if not new_students:
        return {"message": "All students are already in the classroom"}

    classroom.students.extend(new_students)
    db.session.commit()
    return {
        "message": f"{len(new_students)} students added to classroom",
        "classroom": classroom.to_dict(include_students=True),
    }


def remove_student(classroom_id, student_id, current_user):
    classroom = _load_classroom(classroom_id)
    _authorize_classroom(current_user, "classroom.manage_students", classroom,
                         "You can only remove students from your own classrooms")

    classroom.students = [student for student in classroom.students if student.id != student_id]
    db.session.commit()
    return {
        "message": "Student removed from classroom",
        "classroom": classroom.to_dict(include_students=True),
    }
