"""
Password hashing utility functions
"""
from flask import current_app, has_app_context
from werkzeug.security import generate_password_hash, check_password_hash

DEFAULT_HASH_METHOD = "scrypt:32768:8:1"


def _hash_method():
    if has_app_context():
        return current_app.config.get("PASSWORD_HASH_METHOD") or DEFAULT_HASH_METHOD
    return DEFAULT_HASH_METHOD


def hash_password(password):
    """Generate a salted password hash with the configured method and cost."""
    return generate_password_hash(password, method=_hash_method())


def verify_password(password_hash, password):
    """
    Verify password against hash.
    Returns False instead of raising when the stored hash is malformed.
    """
    if not password_hash or not isinstance(password_hash, str) or password is None:
        return False
    try:
        return check_password_hash(password_hash, password)
    except (ValueError, TypeError):
        return False
