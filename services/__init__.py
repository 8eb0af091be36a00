"""
Services package: store handles and auth workflows wired together once per app.
"""
from flask import current_app

from services.auth_service import AuthService
from services.otp_service import OTPService
from services.stores import UserStore, OTPStore


def build_auth_service(session, session_issuer, **kwargs):
    """Wire stores and services around one SQLAlchemy session handle."""
    users = UserStore(session)
    otps = OTPService(OTPStore(session))
    return AuthService(users, otps, session_issuer, **kwargs)


def get_auth_service():
    """The AuthService built by create_app()."""
    return current_app.extensions['auth_service']


__all__ = [
    'AuthService',
    'OTPService',
    'UserStore',
    'OTPStore',
    'build_auth_service',
    'get_auth_service',
]
