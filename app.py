"""
Flask application factory for the Serenity Suites booking site (auth core)
"""
import logging

import click
from flask import Flask, jsonify, request
from flask_login import LoginManager

from config import Config
from models import db, User
from services import build_auth_service
from utils.mail import mail
from utils.session_token import FlaskLoginSessionIssuer

logger = logging.getLogger(__name__)

# Initialize login manager (no DB access at import time)
login_manager = LoginManager()
login_manager.session_protection = "basic"


@login_manager.user_loader
def load_user(user_id):
    """Load user for Flask-Login (runs in request context)."""
    return db.session.get(User, user_id)


def create_app(config_class=Config):
    """Application factory pattern. DB init runs inside app_context; non-fatal on failure."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    db.init_app(app)
    login_manager.init_app(app)
    mail.init_app(app)

    # One service graph per process, sharing the scoped db.session handle
    app.extensions['auth_service'] = build_auth_service(
        db.session,
        FlaskLoginSessionIssuer(load_user),
    )

    @app.errorhandler(500)
    def handle_500_error(e):
        if request.path.startswith("/auth/"):
            return jsonify({"success": False, "message": "Internal server error. Please try again later."}), 500
        return e

    with app.app_context():
        try:
            db.create_all()
        except Exception as e:
            logger.warning("Database init skipped (non-fatal): %s", e)

    from routes import auth_bp
    app.register_blueprint(auth_bp)

    register_commands(app)
    return app


def register_commands(app):

    @app.cli.command("cleanup-otps")
    def cleanup_otps():
        """Delete expired verification codes."""
        deleted = app.extensions['auth_service'].otps.cleanup_expired_otps()
        click.echo(f"Deleted {deleted} expired OTP record(s).")

    @app.cli.command("seed-users")
    def seed_users_command():
        """Create the sample admin/guest accounts."""
        from seed_users import seed_users
        created = seed_users(app.config['SEED_USER_PASSWORD'])
        click.echo(f"Seeded {len(created)} user(s).")
