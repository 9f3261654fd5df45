from schoolhub.extensions import db
from schoolhub.utils.serialization import to_dict
from .base import TimestampMixin

classroom_students = db.Table(
    'classroom_students',
    db.Column('classroom_id', db.Integer, db.ForeignKey('classrooms.id', ondelete="CASCADE"), primary_key=True),
    db.Column('student_id', db.Integer, db.ForeignKey('users.id', ondelete="CASCADE"), primary_key=True),
)


class Classroom(db.Model, TimestampMixin):
    __tablename__ = 'classrooms'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=True)
    teacher_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    school_id = db.Column(db.Integer, db.ForeignKey('schools.id'), nullable=False, index=True)

    teacher = db.relationship('User', foreign_keys=[teacher_id])
    school = db.relationship('School', back_populates='classrooms')
    students = db.relationship('User', secondary=classroom_students, lazy='subquery',
                               backref=db.backref('enrolled_classrooms', lazy=True))
    attendance_records = db.relationship('AttendanceRecord', back_populates='classroom',
                                         cascade="all, delete-orphan", lazy=True)

    @property
    def student_ids(self):
        return [student.id for student in self.students]

    def to_dict(self, include_students=False):
        data = to_dict(self)
        data["teacher"] = self.teacher.summary() if self.teacher else None
        data["school"] = {"id": self.school.id, "name": self.school.name} if self.school else None
        if include_students:
            data["students"] = [student.summary() for student in self.students]
        return data
