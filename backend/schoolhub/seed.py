import os
from datetime import date, timedelta

from schoolhub.extensions import db
from schoolhub.models import (
    School, User, Classroom, AttendanceRecord, ReadingParagraph, RoleEnum, ParentLanguage, DifficultyLevel,
)
from schoolhub.services.auth import generate_registration_id


def _user(name, role, school=None, password=None, **fields):
    user = User(
        name=name,
        role=role,
        registration_id=generate_registration_id(),
        school_id=school.id if school else None,
        **fields,
    )
    user.set_password(password or os.getenv("SEED_PASSWORD", "Pass@123"))
    db.session.add(user)
    db.session.flush()
    return user


def seed_data(reset=False):
    """Create a small demo dataset and return the registration id of each seeded account."""
    if reset:
        db.drop_all()
        db.create_all()

    superadmin = User.query.filter_by(role=RoleEnum.superadmin).first()
    if superadmin is None:
        superadmin = _user("Platform Admin", RoleEnum.superadmin, password=os.getenv("ADMIN_PASSWORD"))

    school = School(name="Woodlands Primary School", address="123 Main St",
                    registration_id=generate_registration_id(School), created_by_id=superadmin.id)
    db.session.add(school)
    db.session.flush()

    school_admin = _user("Asha Admin", RoleEnum.schooladmin, school)
    teacher = _user("Tom Teacher", RoleEnum.teacher, school, mobile="+15550000001")
    students = [
        _user("Ravi Kumar", RoleEnum.student, school, mobile="+919800000001",
              parent_language=ParentLanguage.hindi, parent_occupation="Farmer"),
        _user("Meera Iyer", RoleEnum.student, school, mobile="+919800000002",
              parent_language=ParentLanguage.tamil),
        _user("Sam Jones", RoleEnum.student, school, mobile="+15550000003"),
    ]

    classroom = Classroom(name="Grade 5 A", description="Morning section",
                          teacher_id=teacher.id, school_id=school.id, students=students)
    db.session.add(classroom)
    db.session.flush()

    yesterday = date.today() - timedelta(days=1)
    attendance = AttendanceRecord(classroom_id=classroom.id, date=yesterday, sms_notified_students=[])
    attendance.replace_entries([
        {"student_id": student.id, "present": index != 0} for index, student in enumerate(students)
    ])
    db.session.add(attendance)

    db.session.add(ReadingParagraph(
        title="The Thirsty Crow",
        content="A thirsty crow found a pitcher with a little water at the bottom...",
        difficulty_level=DifficultyLevel.beginner,
        estimated_reading_time=3,
        keywords=["fable", "crow"],
        created_by_id=teacher.id,
        school_id=school.id,
    ))
    db.session.commit()

    return {
        "superadmin": superadmin.registration_id,
        "schooladmin": school_admin.registration_id,
        "teacher": teacher.registration_id,
        "students": ", ".join(student.registration_id for student in students),
    }
