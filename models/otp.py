"""
One-time passcode model for email verification.
Records are matched by (email, code, purpose); used or expired ones are
removed when a new code is issued for the same email and purpose.
"""
import enum
import uuid

from models import db
from utils.otp_helper import utcnow


class OTPPurpose(str, enum.Enum):
    REGISTRATION = 'REGISTRATION'
    PASSWORD_RESET = 'PASSWORD_RESET'  # reserved, not issued yet


class OTP(db.Model):
    __tablename__ = 'otps'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    code = db.Column(db.String(6), nullable=False)
    email = db.Column(db.String(120), nullable=False, index=True)
    # Weak reference: no foreign key, deleting a user leaves its codes behind
    user_id = db.Column(db.String(36), nullable=True, index=True)
    purpose = db.Column(db.String(32), nullable=False, default=OTPPurpose.REGISTRATION.value)
    expires_at = db.Column(db.DateTime, nullable=False)
    used = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def is_expired(self):
        return utcnow() >= self.expires_at

    def __repr__(self):
        return f'<OTP {self.email} {self.purpose}>'
