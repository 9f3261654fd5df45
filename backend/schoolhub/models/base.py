from datetime import datetime, timezone
from schoolhub.extensions import db
import enum


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class RoleEnum(enum.Enum):
    superadmin = "superadmin"
    schooladmin = "schooladmin"
    teacher = "teacher"
    student = "student"


class ParentLanguage(enum.Enum):
    english = "english"
    hindi = "hindi"
    marathi = "marathi"
    tamil = "tamil"
    telugu = "telugu"
    kannada = "kannada"
    malayalam = "malayalam"
    gujarati = "gujarati"
    bengali = "bengali"
    punjabi = "punjabi"
    urdu = "urdu"
    odia = "odia"


class DifficultyLevel(enum.Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


class AssignmentType(enum.Enum):
    individual = "individual"
    classroom = "classroom"


class AssignmentStatus(enum.Enum):
    pending = "pending"
    completed = "completed"
    overdue = "overdue"
