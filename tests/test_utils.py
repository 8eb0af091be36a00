import time
from datetime import timedelta

import pytest

from utils import otp_helper
from utils.auth_utils import hash_password, verify_password
from utils.mail import send_email, render_otp_email_html
from utils.session_token import create_session_token, verify_session_token
from utils.validators import (
    normalize_email,
    validate_email,
    validate_registration_form,
    validate_sign_in_form,
)


def test_generate_otp_is_six_digits():
    for _ in range(50):
        code = otp_helper.generate_otp()
        assert len(code) == 6 and code.isdigit()


def test_generate_otp_keeps_leading_zeros(monkeypatch):
    monkeypatch.setattr(otp_helper.secrets, "randbelow", lambda n: 42)

    assert otp_helper.generate_otp() == "000042"


def test_otp_timing_windows():
    now = otp_helper.utcnow()

    assert otp_helper.otp_expires_at(now) - now == timedelta(minutes=10)
    assert now - otp_helper.resend_cooldown_start(now) == timedelta(seconds=60)


@pytest.mark.parametrize("code, ok", [
    ("012345", True),
    ("12345", False),
    ("12345a", False),
    ("١٢٣٤٥٦", False),
    (123456, False),
])
def test_is_well_formed_otp(code, ok):
    assert otp_helper.is_well_formed_otp(code) is ok


def test_validators():
    assert normalize_email("  Guest@Example.COM ") == "guest@example.com"
    assert normalize_email(None) == ""
    assert validate_email("guest@example.com")
    assert not validate_email("guest@example")
    assert not validate_email("guest example@x.com")
    assert validate_registration_form("Jane Doe", "jane@example.com", "secret", "secret") is None
    assert validate_registration_form("Jane", "jane@example.com", "secret", "secreT") == "Passwords do not match"
    assert validate_sign_in_form("jane@example.com", "secret") is None
    assert validate_sign_in_form("jane@example.com", None) == "Password must be at least 6 characters"


def test_password_hashing(app_ctx):
    hashed = hash_password("Secret1!")

    assert hashed.startswith("pbkdf2:sha256:1000$")
    assert hashed != hash_password("Secret1!")
    assert verify_password(hashed, "Secret1!") is True
    assert verify_password(hashed, "secret1!") is False


@pytest.mark.parametrize("bad_hash", ["", None, "plain", "nomethod$salt$hash", "$$"])
def test_verify_password_never_raises_on_malformed_hash(bad_hash):
    assert verify_password(bad_hash, "Secret1!") is False


def test_otp_email_html():
    html = render_otp_email_html("Jane Doe", "004217")

    assert "004217" in html
    assert "Jane Doe" in html
    assert "10 minutes" in html


def test_send_email_without_mail_server(app_ctx):
    app_ctx.config["MAIL_SERVER"] = None

    result = send_email("jane@example.com", "Hi", "<p>Hi</p>")

    assert result.success is False
    assert result.error


def test_session_token_roundtrip_and_tampering(app_ctx):
    token = create_session_token("user-1")

    assert verify_session_token(token) == "user-1"
    assert verify_session_token(token[:-2] + "xx") is None
    assert verify_session_token("") is None
    assert verify_session_token("%%%") is None


def test_session_token_expiry(app_ctx, monkeypatch):
    token = create_session_token("user-1")
    real_time = time.time
    monkeypatch.setattr(time, "time", lambda: real_time() + 31 * 24 * 60 * 60)

    assert verify_session_token(token) is None


def test_name_length_ignores_surrounding_whitespace():
    assert validate_registration_form("  ab ", "jane@example.com", "secret", "secret") == "Name must be at least 3 characters"
    assert validate_registration_form(" Ana ", "jane@example.com", "secret", "secret") is None
