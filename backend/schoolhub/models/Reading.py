from schoolhub.extensions import db
from schoolhub.utils.serialization import to_dict
from .base import TimestampMixin, DifficultyLevel, AssignmentType, utcnow

assignment_students = db.Table(
    'reading_assignment_students',
    db.Column('assignment_id', db.Integer, db.ForeignKey('reading_assignments.id', ondelete="CASCADE"), primary_key=True),
    db.Column('student_id', db.Integer, db.ForeignKey('users.id', ondelete="CASCADE"), primary_key=True),
)


class ReadingParagraph(db.Model, TimestampMixin):
    __tablename__ = 'reading_paragraphs'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=False)
    difficulty_level = db.Column(db.Enum(DifficultyLevel), nullable=False, default=DifficultyLevel.beginner)
    description = db.Column(db.Text, nullable=True)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    school_id = db.Column(db.Integer, db.ForeignKey('schools.id'), nullable=True, index=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    estimated_reading_time = db.Column(db.Integer, nullable=True)
    keywords = db.Column(db.JSON, default=list, nullable=False)

    created_by = db.relationship('User', foreign_keys=[created_by_id])
    assignments = db.relationship('ReadingAssignment', back_populates='paragraph', lazy=True)

    def to_dict(self):
        data = to_dict(self)
        data["created_by"] = self.created_by.summary() if self.created_by else None
        return data


class ReadingAssignment(db.Model, TimestampMixin):
    __tablename__ = 'reading_assignments'

    id = db.Column(db.Integer, primary_key=True)
    paragraph_id = db.Column(db.Integer, db.ForeignKey('reading_paragraphs.id'), nullable=False, index=True)
    assigned_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    type = db.Column(db.Enum(AssignmentType), nullable=False)
    classroom_id = db.Column(db.Integer, db.ForeignKey('classrooms.id', ondelete="SET NULL"), nullable=True)
    due_date = db.Column(db.DateTime, nullable=True)
    instructions = db.Column(db.Text, nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    paragraph = db.relationship('ReadingParagraph', back_populates='assignments')
    assigned_by = db.relationship('User', foreign_keys=[assigned_by_id])
    classroom = db.relationship('Classroom')
    students = db.relationship('User', secondary=assignment_students, lazy='subquery')
    completions = db.relationship('ReadingCompletion', back_populates='assignment',
                                  cascade="all, delete-orphan", lazy=True)

    def is_overdue(self, now=None):
        return bool(self.due_date and self.due_date < (now or utcnow()))

    def to_dict(self, include_paragraph=True):
        data = to_dict(self)
        data["assigned_by"] = self.assigned_by.summary() if self.assigned_by else None
        data["students"] = [student.summary() for student in self.students]
        data["classroom"] = {"id": self.classroom.id, "name": self.classroom.name} if self.classroom else None
        if include_paragraph and self.paragraph:
            data["paragraph"] = self.paragraph.to_dict()
        return data


class ReadingCompletion(db.Model, TimestampMixin):
    __tablename__ = 'reading_completions'

    id = db.Column(db.Integer, primary_key=True)
    assignment_id = db.Column(db.Integer, db.ForeignKey('reading_assignments.id', ondelete="CASCADE"), nullable=False, index=True)
    student_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    completed_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    notes = db.Column(db.Text, nullable=True)
    self_rating = db.Column(db.Integer, nullable=True)
    teacher_rating = db.Column(db.Integer, nullable=True)
    teacher_feedback = db.Column(db.Text, nullable=True)
    reading_duration = db.Column(db.Integer, nullable=True)
    attempt_count = db.Column(db.Integer, default=1, nullable=False)

    assignment = db.relationship('ReadingAssignment', back_populates='completions')
    student = db.relationship('User')

    def to_dict(self):
        data = to_dict(self)
        data["student"] = self.student.summary() if self.student else None
        return data
