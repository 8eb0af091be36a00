"""
Input validation for registration and sign-in forms.
Form validators return the message of the first rule that fails, or None.
"""
import re

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

NAME_MIN_LENGTH = 3
PASSWORD_MIN_LENGTH = 6

NAME_TOO_SHORT_MSG = "Name must be at least 3 characters"
INVALID_EMAIL_MSG = "Invalid email address"
PASSWORD_TOO_SHORT_MSG = "Password must be at least 6 characters"
PASSWORDS_MISMATCH_MSG = "Passwords do not match"


def normalize_email(email):
    if not isinstance(email, str):
        return ""
    return email.strip().lower()


def validate_email(email):
    return bool(email) and isinstance(email, str) and EMAIL_RE.match(email) is not None


def validate_password(password):
    """Returns (is_valid, error_message)."""
    if not isinstance(password, str) or len(password) < PASSWORD_MIN_LENGTH:
        return False, PASSWORD_TOO_SHORT_MSG
    return True, None


def validate_registration_form(name, email, password, confirm_password):
    if not isinstance(name, str) or len(name.strip()) < NAME_MIN_LENGTH:
        return NAME_TOO_SHORT_MSG
    if not validate_email(normalize_email(email)):
        return INVALID_EMAIL_MSG
    is_valid, error = validate_password(password)
    if not is_valid:
        return error
    if password != confirm_password:
        return PASSWORDS_MISMATCH_MSG
    return None


def validate_sign_in_form(email, password):
    if not validate_email(normalize_email(email)):
        return INVALID_EMAIL_MSG
    is_valid, error = validate_password(password)
    if not is_valid:
        return error
    return None
