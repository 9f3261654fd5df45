"""
Reading practice: paragraphs teachers write, assignments that hand them to
students or whole classrooms, and the completions students record.
"""
import logging

from sqlalchemy import and_, or_, select

from schoolhub.errors import NotFound, ValidationError, Forbidden
from schoolhub.extensions import db
from schoolhub.models import (
    ReadingParagraph, ReadingAssignment, ReadingCompletion, Classroom, User,
    RoleEnum, DifficultyLevel, AssignmentType, AssignmentStatus, classroom_students, assignment_students,
)
from schoolhub.models.base import utcnow
from schoolhub.utils.access_control import authorize
from schoolhub.utils.pagination import apply_pagination_and_search, pagination_meta
from schoolhub.utils.parsing import require_fields, parse_id, parse_id_list, parse_datetime
from schoolhub.utils.statistics import completion_statistics

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100
PARAGRAPH_SEARCH_COLUMNS = ["title", "content", "keywords"]
PARAGRAPH_FIELDS = ("title", "content", "difficulty_level", "description", "estimated_reading_time", "keywords", "is_active")


def _parse_rating(value, field):
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 100:
        raise ValidationError(f"{field} must be an integer between 0 and 100")
    return value


def _parse_non_negative(value, field):
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"{field} must be a non-negative integer")
    return value


def _paragraph_values(data):
    values = {}
    for field in PARAGRAPH_FIELDS:
        if field not in data:
            continue
        value = data[field]
        if field == "difficulty_level":
            try:
                value = DifficultyLevel(value)
            except ValueError:
                raise ValidationError(f"Invalid difficulty_level '{value}'")
        elif field == "estimated_reading_time":
            value = _parse_non_negative(value, field)
        elif field == "keywords":
            if not isinstance(value, list) or not all(isinstance(k, str) for k in value):
                raise ValidationError("keywords must be a list of strings")
        values[field] = value
    return values


def _load_paragraph(paragraph_id):
    paragraph = db.session.get(ReadingParagraph, paragraph_id)
    if paragraph is None:
        raise NotFound("Reading paragraph not found")
    return paragraph


def _load_assignment(assignment_id):
    assignment = db.session.get(ReadingAssignment, assignment_id)
    if assignment is None:
        raise NotFound("Assignment not found")
    return assignment


# paragraphs

def create_paragraph(data, current_user):
    authorize(current_user, "reading.create_paragraph", message="Only teachers can create reading paragraphs")
    require_fields(data, "title", "content")

    paragraph = ReadingParagraph(created_by_id=current_user.id, school_id=current_user.school_id,
                                 **_paragraph_values(data))
    db.session.add(paragraph)
    db.session.commit()
    return paragraph.to_dict()


def list_paragraphs(current_user, difficulty_level=None, search=None, page=1, limit=10):
    query = ReadingParagraph.query.filter(ReadingParagraph.is_active.is_(True))
    if current_user.role == RoleEnum.teacher:
        query = query.filter(ReadingParagraph.created_by_id == current_user.id)
    elif current_user.role in (RoleEnum.schooladmin, RoleEnum.student):
        query = query.filter(ReadingParagraph.school_id == current_user.school_id)

    if difficulty_level:
        try:
            query = query.filter(ReadingParagraph.difficulty_level == DifficultyLevel(difficulty_level))
        except ValueError:
            raise ValidationError(f"Invalid difficulty_level '{difficulty_level}'")

    query = query.order_by(ReadingParagraph.created_at.desc())
    paginated = apply_pagination_and_search(query, ReadingParagraph, search, PARAGRAPH_SEARCH_COLUMNS,
                                            page, min(limit, MAX_PAGE_SIZE))
    return {"data": [p.to_dict() for p in paginated.items], "meta": pagination_meta(paginated)}


def get_paragraph(paragraph_id, current_user):
    paragraph = _load_paragraph(paragraph_id)
    authorize(current_user, "reading.view_paragraph",
              school_id=paragraph.school_id, owner_id=paragraph.created_by_id,
              message="You can only view paragraphs from your school")
    return paragraph.to_dict()


def update_paragraph(paragraph_id, data, current_user):
    paragraph = _load_paragraph(paragraph_id)
    authorize(current_user, "reading.edit_paragraph", owner_id=paragraph.created_by_id,
              message="You can only update your own reading paragraphs")

    for field, value in _paragraph_values(data).items():
        setattr(paragraph, field, value)
    db.session.commit()
    return paragraph.to_dict()


def delete_paragraph(paragraph_id, current_user):
    paragraph = _load_paragraph(paragraph_id)
    authorize(current_user, "reading.edit_paragraph", owner_id=paragraph.created_by_id,
              message="You can only delete your own reading paragraphs")

    in_use = ReadingAssignment.query.filter_by(paragraph_id=paragraph.id, is_active=True).count()
    if in_use:
        raise ValidationError("Cannot delete paragraph as it is used in active assignments")

    db.session.delete(paragraph)
    db.session.commit()
    return {"message": "Reading paragraph deleted successfully"}


# assignments

def _assignment_student_ids(assignment):
    if assignment.type == AssignmentType.individual:
        return [student.id for student in assignment.students]
    return assignment.classroom.student_ids if assignment.classroom else []


def create_assignment(data, current_user):
    require_fields(data, "paragraph_id", "type", "due_date")
    paragraph = _load_paragraph(parse_id(data["paragraph_id"], "paragraph_id"))
    authorize(current_user, "reading.create_assignment", school_id=paragraph.school_id,
              message="You can only assign paragraphs from your school")

    try:
        assignment_type = AssignmentType(data["type"])
    except ValueError:
        raise ValidationError(f"Invalid assignment type '{data['type']}'")

    assignment = ReadingAssignment(
        paragraph_id=paragraph.id,
        assigned_by_id=current_user.id,
        type=assignment_type,
        due_date=parse_datetime(data["due_date"], "due_date"),
        instructions=data.get("instructions"),
    )

    if assignment_type == AssignmentType.individual:
        student_ids = list(dict.fromkeys(parse_id_list(data.get("student_ids") or [], "student_ids")))
        if not student_ids:
            raise ValidationError("Student IDs are required for individual assignments")
        students = User.query.filter(
            User.id.in_(student_ids),
            User.role == RoleEnum.student,
            User.school_id == current_user.school_id,
        ).all()
        if len(students) != len(student_ids):
            raise ValidationError("Some students not found or not in your school")
        assignment.students = students
    else:
        if not data.get("classroom_id"):
            raise ValidationError("Classroom ID is required for classroom assignments")
        classroom = db.session.get(Classroom, parse_id(data["classroom_id"], "classroom_id"))
        if classroom is None:
            raise NotFound("Classroom not found")
        if classroom.teacher_id != current_user.id:
            raise Forbidden("You can only assign to your own classrooms")
        assignment.classroom_id = classroom.id

    db.session.add(assignment)
    db.session.commit()
    logger.info(f"Reading assignment {assignment.id} created by {current_user.id}")
    return assignment.to_dict()


def _status(assignment, completed):
    if completed:
        return AssignmentStatus.completed.value
    if assignment.is_overdue():
        return AssignmentStatus.overdue.value
    return AssignmentStatus.pending.value


def _student_completion(assignment_id, student_id):
    return ReadingCompletion.query.filter_by(assignment_id=assignment_id, student_id=student_id).first()


def get_student_assignments(current_user, page=1, limit=10):
    authorize(current_user, "reading.my_assignments", message="Only students can view their assignments")

    classroom_ids = [
        row.classroom_id for row in
        db.session.query(classroom_students.c.classroom_id).filter(classroom_students.c.student_id == current_user.id)
    ]
    individual_ids = select(assignment_students.c.assignment_id).where(
        assignment_students.c.student_id == current_user.id
    )

    query = ReadingAssignment.query.filter(
        ReadingAssignment.is_active.is_(True),
        or_(
            and_(ReadingAssignment.type == AssignmentType.individual, ReadingAssignment.id.in_(individual_ids)),
            and_(ReadingAssignment.type == AssignmentType.classroom, ReadingAssignment.classroom_id.in_(classroom_ids)),
        ),
    ).order_by(ReadingAssignment.created_at.desc())

    paginated = apply_pagination_and_search(query, ReadingAssignment, None, [], page, limit)
    completed_ids = {
        completion.assignment_id for completion in ReadingCompletion.query.filter(
            ReadingCompletion.student_id == current_user.id,
            ReadingCompletion.assignment_id.in_([a.id for a in paginated.items]),
        )
    }

    data = []
    for assignment in paginated.items:
        item = assignment.to_dict()
        item["status"] = _status(assignment, assignment.id in completed_ids)
        data.append(item)
    return {"data": data, "meta": pagination_meta(paginated)}


def get_assignment(assignment_id, current_user):
    assignment = _load_assignment(assignment_id)

    if current_user.role == RoleEnum.student:
        authorize(current_user, "reading.view_assignment", student_ids=_assignment_student_ids(assignment),
                  message="You do not have access to this assignment")
        completion = _student_completion(assignment.id, current_user.id)
        data = assignment.to_dict()
        data["completion"] = completion.to_dict() if completion else None
        data["status"] = _status(assignment, completion is not None)
        return data

    authorize(current_user, "reading.view_assignment", owner_id=assignment.assigned_by_id,
              message="You can only view your own assignments")
    data = assignment.to_dict()
    data["completions"] = [completion.to_dict() for completion in assignment.completions]
    return data


def complete_assignment(assignment_id, data, current_user):
    assignment = _load_assignment(assignment_id)
    authorize(current_user, "reading.complete_assignment", student_ids=_assignment_student_ids(assignment),
              message="You do not have access to this assignment")

    values = {
        "notes": data.get("notes"),
        "self_rating": _parse_rating(data.get("self_rating"), "self_rating"),
        "reading_duration": _parse_non_negative(data.get("reading_duration"), "reading_duration"),
    }

    completion = _student_completion(assignment.id, current_user.id)
    if completion is None:
        completion = ReadingCompletion(assignment_id=assignment.id, student_id=current_user.id, attempt_count=1)
        db.session.add(completion)
    else:
        completion.attempt_count += 1

    for field, value in values.items():
        if field in data:
            setattr(completion, field, value)
    completion.completed_at = utcnow()

    db.session.commit()
    return completion.to_dict()


def add_teacher_feedback(completion_id, data, current_user):
    completion = db.session.get(ReadingCompletion, completion_id)
    if completion is None:
        raise NotFound("Completion record not found")

    authorize(current_user, "reading.feedback", owner_id=completion.assignment.assigned_by_id,
              message="You can only add feedback to your own assignments")

    if "teacher_rating" in data:
        completion.teacher_rating = _parse_rating(data["teacher_rating"], "teacher_rating")
    if "teacher_feedback" in data:
        completion.teacher_feedback = data["teacher_feedback"]

    db.session.commit()
    return completion.to_dict()


def get_teacher_assignments(current_user, page=1, limit=10):
    authorize(current_user, "reading.teacher_assignments", message="Only teachers can view their assignments")

    query = ReadingAssignment.query.filter_by(assigned_by_id=current_user.id, is_active=True) \
        .order_by(ReadingAssignment.created_at.desc())
    paginated = apply_pagination_and_search(query, ReadingAssignment, None, [], page, limit)

    data = []
    for assignment in paginated.items:
        item = assignment.to_dict()
        completed = ReadingCompletion.query.filter_by(assignment_id=assignment.id).count()
        item["completion_stats"] = completion_statistics(completed, len(_assignment_student_ids(assignment)))
        data.append(item)
    return {"data": data, "meta": pagination_meta(paginated)}
