"""
Routes package for the Serenity Suites application
"""
from routes.auth import auth_bp

__all__ = [
    'auth_bp',
]
