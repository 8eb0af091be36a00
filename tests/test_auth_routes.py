import re
from datetime import timedelta

from models import db, User, OTP
from services import otp_service
from utils.mail import mail, OTP_EMAIL_SUBJECT
from utils.otp_helper import utcnow

EMAIL = "jane@example.com"
REGISTRATION = {
    "name": "Jane Doe",
    "email": EMAIL,
    "password": "Secret1!",
    "confirmPassword": "Secret1!",
}


def _register(client):
    with mail.record_messages() as outbox:
        response = client.post("/auth/register", json=REGISTRATION)
    return response, outbox


def _code_from(message):
    return re.search(r"\b(\d{6})\b", message.body).group(1)


def test_register_sends_code_by_email(client):
    response, outbox = _register(client)

    assert response.status_code == 201
    data = response.get_json()
    assert data["success"] is True
    assert data["email"] == EMAIL
    assert data["user_id"]

    [message] = outbox
    assert message.recipients == [EMAIL]
    assert message.subject == OTP_EMAIL_SUBJECT
    code = _code_from(message)
    assert code in message.html
    assert "Jane Doe" in message.html


def test_full_flow_over_http(app, client):
    _, outbox = _register(client)
    code = _code_from(outbox[0])

    blocked = client.post("/auth/login", json={"email": EMAIL, "password": "Secret1!"})
    assert blocked.status_code == 403

    verified = client.post("/auth/verify-otp", json={"email": EMAIL, "otpCode": code})
    assert verified.status_code == 200
    assert verified.get_json()["message"] == "Email verified successfully! You can now sign in."

    login = client.post("/auth/login", data={"email": EMAIL, "password": "Secret1!"})
    assert login.status_code == 200
    token = login.get_json()["token"]

    session = client.get("/auth/session")
    assert session.status_code == 200
    assert session.get_json()["user"]["email"] == EMAIL

    logout = client.post("/auth/logout")
    assert logout.status_code == 200
    assert client.get("/auth/session").status_code == 401

    bearer = app.test_client().get("/auth/session", headers={"Authorization": f"Bearer {token}"})
    assert bearer.status_code == 200
    assert bearer.get_json()["user"]["verified"] is True


def test_session_rejects_tampered_token(client):
    response = client.get("/auth/session", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401


def test_duplicate_registration_conflicts(client):
    _register(client)

    response, outbox = _register(client)

    assert response.status_code == 409
    assert response.get_json()["message"] == "User with this email already exists"
    assert outbox == []


def test_register_validation_error(client):
    response = client.post("/auth/register", json={**REGISTRATION, "confirmPassword": "other1"})

    assert response.status_code == 400
    assert response.get_json()["message"] == "Passwords do not match"


def test_register_rolls_back_when_mail_fails(app, client, monkeypatch):
    def refuse(message):
        raise ConnectionRefusedError("smtp unreachable")

    monkeypatch.setattr(mail, "send", refuse)

    response = client.post("/auth/register", json=REGISTRATION)

    assert response.status_code == 502
    assert "smtp" not in response.get_json()["message"]
    with app.app_context():
        assert User.query.filter_by(email=EMAIL).first() is None


def test_invalid_code(client):
    _, outbox = _register(client)
    code = _code_from(outbox[0])
    wrong = "000000" if code != "000000" else "111111"

    response = client.post("/auth/verify-otp", json={"email": EMAIL, "otp": wrong})

    assert response.status_code == 400
    assert response.get_json()["message"] == "Invalid or expired OTP code"


def test_verify_missing_fields(client):
    response = client.post("/auth/verify-otp", json={"email": EMAIL})

    assert response.status_code == 400
    assert response.get_json()["error"] == "MissingFieldError"


def test_resend_cooldown_then_new_code(app, client):
    _register(client)

    too_soon = client.post("/auth/resend-otp", json={"email": EMAIL})
    assert too_soon.status_code == 429

    with app.app_context():
        for otp in OTP.query.filter_by(email=EMAIL).all():
            otp.created_at = utcnow() - timedelta(seconds=61)
        db.session.commit()

    with mail.record_messages() as outbox:
        resent = client.post("/auth/resend-otp", json={"email": EMAIL})
    assert resent.status_code == 200
    assert len(outbox) == 1


def test_resend_unknown_email(client):
    response = client.post("/auth/resend-otp", json={"email": "ghost@example.com"})

    assert response.status_code == 404


def test_login_unknown_user(client):
    response = client.post("/auth/login", json={"email": "ghost@example.com", "password": "Secret1!"})

    assert response.status_code == 401
    assert response.get_json()["message"] == "Invalid email or password"


def test_verify_accepts_numeric_code(app, client, monkeypatch):
    monkeypatch.setattr(otp_service, "generate_otp", lambda: "482913")
    _register(client)

    response = client.post("/auth/verify-otp", json={"email": EMAIL, "otpCode": 482913})

    assert response.status_code == 200
    assert response.get_json()["success"] is True
    with app.app_context():
        assert User.query.filter_by(email=EMAIL).first().verified is True


def test_verify_numeric_code_losing_leading_zero_is_invalid(client, monkeypatch):
    monkeypatch.setattr(otp_service, "generate_otp", lambda: "012345")
    _register(client)

    response = client.post("/auth/verify-otp", json={"email": EMAIL, "otpCode": 12345})

    assert response.status_code == 400
    assert response.get_json()["message"] == "Invalid or expired OTP code"
