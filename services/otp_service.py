"""
OTP issuance and validation for email verification.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from models import OTPPurpose
from utils.otp_helper import generate_otp, otp_expires_at, resend_cooldown_start, utcnow

logger = logging.getLogger(__name__)

INVALID_OTP_MSG = "Invalid or expired OTP code"


@dataclass
class OTPValidation:
    valid: bool
    user_id: Optional[str] = None
    message: Optional[str] = None


def _purpose(purpose):
    return OTPPurpose(purpose).value


class OTPService:
    """Rate limits are checked by callers via can_request_otp, not by create_otp."""

    def __init__(self, store, clock=utcnow):
        self.store = store
        self.clock = clock

    def generate_code(self):
        return generate_otp()

    def create_otp(self, email, user_id, purpose=OTPPurpose.REGISTRATION):
        """Drop used/expired codes for (email, purpose), then store a fresh one."""
        purpose = _purpose(purpose)
        now = self.clock()
        removed = self.store.delete_stale(email, purpose, now)
        if removed:
            logger.debug("Removed %s stale %s code(s) for %s", removed, purpose, email)
        code = self.generate_code()
        self.store.create(
            code=code,
            email=email,
            user_id=user_id,
            purpose=purpose,
            expires_at=otp_expires_at(now),
        )
        return code

    def validate_otp(self, email, code, purpose=OTPPurpose.REGISTRATION):
        otp = self.store.find_active(email, code, _purpose(purpose), self.clock())
        # A concurrent request may have consumed the same record after the lookup
        if otp is None or not self.store.mark_used(otp.id):
            return OTPValidation(valid=False, message=INVALID_OTP_MSG)
        return OTPValidation(valid=True, user_id=otp.user_id)

    def can_request_otp(self, email, purpose=OTPPurpose.REGISTRATION):
        since = resend_cooldown_start(self.clock())
        return self.store.find_created_after(email, _purpose(purpose), since) is None

    def cleanup_expired_otps(self):
        """Delete every expired code regardless of owner. Returns the count."""
        deleted = self.store.delete_expired(self.clock())
        logger.info("Deleted %s expired OTP record(s)", deleted)
        return deleted
