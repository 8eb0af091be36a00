"""
OTP generation and timing rules for email verification.
"""
import secrets
from datetime import datetime, timedelta, timezone

OTP_LENGTH = 6
OTP_EXPIRY_MINUTES = 10
OTP_RESEND_COOLDOWN_SECONDS = 60


def utcnow() -> datetime:
    """Naive UTC now; all timestamps in the database are naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def generate_otp() -> str:
    """Uniform 6-digit numeric code, "000000" to "999999", leading zeros kept."""
    return f"{secrets.randbelow(10 ** OTP_LENGTH):0{OTP_LENGTH}d}"


def is_well_formed_otp(code) -> bool:
    return isinstance(code, str) and len(code) == OTP_LENGTH and code.isascii() and code.isdigit()


def otp_expires_at(now=None) -> datetime:
    """Return expiry datetime for a new OTP (10 minutes from now)."""
    return (now or utcnow()) + timedelta(minutes=OTP_EXPIRY_MINUTES)


def resend_cooldown_start(now=None) -> datetime:
    """Codes created after this moment block a new request."""
    return (now or utcnow()) - timedelta(seconds=OTP_RESEND_COOLDOWN_SECONDS)
