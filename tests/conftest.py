import pytest

from app import create_app
from config import TestingConfig
from models import db
from services import build_auth_service
from utils.mail import EmailResult


class RecordingSender:
    """Stands in for the verification email sender."""

    def __init__(self, result=None, exc=None):
        self.sent = []
        self.result = result or EmailResult(True)
        self.exc = exc

    def __call__(self, name, email, code):
        self.sent.append({'name': name, 'email': email, 'code': code})
        if self.exc is not None:
            raise self.exc
        return self.result

    @property
    def last_code(self):
        return self.sent[-1]['code']


class FakeSessionIssuer:
    def __init__(self):
        self.issued = []
        self.ended = 0

    def issue_session(self, user):
        self.issued.append(user.id)
        return f"token-{user.id}"

    def verify_session(self, token):
        return None

    def end_session(self):
        self.ended += 1


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield app
        db.session.remove()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def issuer():
    return FakeSessionIssuer()


@pytest.fixture
def service(app_ctx, sender, issuer):
    return build_auth_service(db.session, issuer, send_otp_email=sender)


@pytest.fixture
def register(service):
    def _register(name="Jane Doe", email="jane@example.com", password="Secret1!", confirm=None):
        return service.register_user(name, email, password, password if confirm is None else confirm)
    return _register
