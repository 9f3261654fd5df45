from datetime import date as date_type
from schoolhub.extensions import db
from schoolhub.utils.serialization import to_dict
from .base import TimestampMixin


class AttendanceRecord(db.Model, TimestampMixin):
    __tablename__ = 'attendance_records'

    id = db.Column(db.Integer, primary_key=True)
    classroom_id = db.Column(db.Integer, db.ForeignKey('classrooms.id', ondelete="CASCADE"), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False, default=date_type.today, index=True)
    sms_sent = db.Column(db.Boolean, default=False, nullable=False)
    sms_notified_students = db.Column(db.JSON, default=list, nullable=False)

    classroom = db.relationship('Classroom', back_populates='attendance_records')
    entries = db.relationship('AttendanceEntry', back_populates='record', order_by='AttendanceEntry.position',
                              cascade="all, delete-orphan", lazy='selectin')

    def replace_entries(self, records):
        """Replace the presence list wholesale, keeping the given order."""
        self.entries = [
            AttendanceEntry(position=index, student_id=item["student_id"], present=item["present"])
            for index, item in enumerate(records)
        ]

    def to_dict(self):
        data = to_dict(self)
        data["records"] = [entry.to_dict() for entry in self.entries]
        data["sms_notified_students"] = list(self.sms_notified_students or [])
        return data


class AttendanceEntry(db.Model):
    __tablename__ = 'attendance_entries'

    id = db.Column(db.Integer, primary_key=True)
    record_id = db.Column(db.Integer, db.ForeignKey('attendance_records.id', ondelete="CASCADE"), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False, default=0)
    student_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    present = db.Column(db.Boolean, nullable=False)

    record = db.relationship('AttendanceRecord', back_populates='entries')
    student = db.relationship('User')

    def to_dict(self):
        return {"student_id": self.student_id, "present": self.present}
