"""
Models package for the Serenity Suites application
"""
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

# Import all models here to ensure they're registered
from models.user import User, UserRole
from models.otp import OTP, OTPPurpose

__all__ = [
    'db',
    'User',
    'UserRole',
    'OTP',
    'OTPPurpose',
]
