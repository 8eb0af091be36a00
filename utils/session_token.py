"""
Credential sessions: Flask-Login cookie session plus a signed bearer token.
Token layout: base64url("<user_id>|<expiry>|<hmac-sha256>").
"""
import hmac
import base64
import time

from flask import current_app
from flask_login import login_user, logout_user

DEFAULT_TOKEN_LIFETIME_SECONDS = 30 * 24 * 60 * 60


def _sign(payload):
    key = current_app.config.get("SECRET_KEY", "").encode("utf-8")
    return hmac.new(key, payload.encode("utf-8"), "sha256").hexdigest()


def create_session_token(user_id):
    """Create a signed token for a signed-in user."""
    lifetime = current_app.config.get("SESSION_TOKEN_LIFETIME_SECONDS", DEFAULT_TOKEN_LIFETIME_SECONDS)
    expiry = int(time.time()) + int(lifetime)
    payload = f"{user_id}|{expiry}"
    raw = f"{payload}|{_sign(payload)}"
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("utf-8").rstrip("=")


def verify_session_token(token):
    """
    Verify token and return the user id if valid, else None.
    Checks signature and expiry.
    """
    if not token or not isinstance(token, str):
        return None
    try:
        raw = base64.urlsafe_b64decode(token + "==").decode("utf-8")
        payload, sig = raw.rsplit("|", 1)
        if not hmac.compare_digest(sig, _sign(payload)):
            return None
        user_id, expiry_str = payload.split("|", 1)
        if int(expiry_str) < int(time.time()):
            return None
        return user_id
    except (ValueError, UnicodeDecodeError):
        return None


class FlaskLoginSessionIssuer:
    """Issues and checks sessions; workflows never touch tokens directly."""

    def __init__(self, user_loader):
        self._load_user = user_loader

    def issue_session(self, user):
        login_user(user, remember=True)
        return create_session_token(user.id)

    def verify_session(self, token):
        user_id = verify_session_token(token)
        if user_id is None:
            return None
        return self._load_user(user_id)

    def end_session(self):
        logout_user()
