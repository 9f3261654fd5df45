from .base import RoleEnum, ParentLanguage, DifficultyLevel, AssignmentType, AssignmentStatus
from .School import School
from .User import User, TokenBlocklist, ADDITIONAL_INFO_FIELDS
from .Classroom import Classroom, classroom_students
from .AttendanceRecord import AttendanceRecord, AttendanceEntry
from .Reading import ReadingParagraph, ReadingAssignment, ReadingCompletion, assignment_students
from .AuditLog import AuditLog
