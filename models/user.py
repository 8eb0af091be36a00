"""
User model definition
"""
import enum
import uuid

from flask_login import UserMixin

from models import db
from utils.otp_helper import utcnow


class UserRole(str, enum.Enum):
    GUEST = 'guest'
    ADMIN = 'admin'


def _new_id():
    return str(uuid.uuid4())


class User(UserMixin, db.Model):
    """Guest/admin account. Created unverified; verified once via email OTP."""
    __tablename__ = 'users'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=UserRole.GUEST.value)
    verified = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'role': self.role,
            'verified': self.verified,
        }

    def __repr__(self):
        return f'<User {self.email}>'
