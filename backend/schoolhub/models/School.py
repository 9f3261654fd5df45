from schoolhub.extensions import db
from schoolhub.utils.serialization import to_dict
from .base import TimestampMixin


class School(db.Model, TimestampMixin):
    __tablename__ = 'schools'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    registration_id = db.Column(db.String(16), unique=True, nullable=False)
    address = db.Column(db.String(255), nullable=True)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id', use_alter=True), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    users = db.relationship('User', back_populates='school', foreign_keys='User.school_id', lazy=True)
    classrooms = db.relationship('Classroom', back_populates='school', lazy=True, cascade="all, delete-orphan")

    def to_dict(self):
        return to_dict(self)
