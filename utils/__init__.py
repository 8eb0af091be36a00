"""
Utility helpers: hashing, validation, OTP timing, mail, sessions
"""
