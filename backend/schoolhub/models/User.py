from werkzeug.security import generate_password_hash, check_password_hash
from schoolhub.extensions import db
from schoolhub.utils.serialization import to_dict
from .base import TimestampMixin, RoleEnum, ParentLanguage, utcnow

ADDITIONAL_INFO_FIELDS = ("parent_language", "parent_occupation", "address", "bio", "preferences")


class User(db.Model, TimestampMixin):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    registration_id = db.Column(db.String(16), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(512), nullable=False)
    role = db.Column(db.Enum(RoleEnum), nullable=False, index=True)
    school_id = db.Column(db.Integer, db.ForeignKey('schools.id'), nullable=True, index=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    email = db.Column(db.String(120), nullable=True)
    mobile = db.Column(db.String(32), nullable=True)

    # additional info
    parent_language = db.Column(db.Enum(ParentLanguage), nullable=True)
    parent_occupation = db.Column(db.String(120), nullable=True)
    address = db.Column(db.String(255), nullable=True)
    bio = db.Column(db.Text, nullable=True)
    preferences = db.Column(db.JSON, nullable=True)

    school = db.relationship('School', back_populates='users', foreign_keys=[school_id])

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def language(self):
        """Parent language label used for notifications."""
        return self.parent_language.value if self.parent_language else ParentLanguage.english.value

    @property
    def additional_info(self):
        info = {}
        for field in ADDITIONAL_INFO_FIELDS:
            value = getattr(self, field)
            if value is not None:
                info[field] = value.value if isinstance(value, ParentLanguage) else value
        return info

    def summary(self):
        return {"id": self.id, "name": self.name, "registration_id": self.registration_id}

    def to_dict(self):
        data = to_dict(self, exclude=ADDITIONAL_INFO_FIELDS)
        data["additional_info"] = self.additional_info
        return data


class TokenBlocklist(db.Model):
    __tablename__ = 'token_blocklist'

    id = db.Column(db.Integer, primary_key=True)
    jti = db.Column(db.String(36), nullable=False, index=True)
    token_type = db.Column(db.String(10), nullable=False, default="access")
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete="CASCADE"))
    created_at = db.Column(db.DateTime, default=utcnow)
    expires_at = db.Column(db.DateTime, nullable=False)

    user = db.relationship("User", backref=db.backref("revoked_tokens", cascade="all, delete-orphan"))
