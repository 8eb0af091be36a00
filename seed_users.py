"""
Seed the sample guest/admin accounts.
Run: python seed_users.py   or: flask --app wsgi seed-users
Existing accounts are left untouched.
"""
from models import db, User, UserRole
from utils.auth_utils import hash_password

SAMPLE_USERS = [
    {'name': 'John Doe', 'email': 'admin@example.com', 'role': UserRole.ADMIN},
    {'name': 'Jane Doe', 'email': 'guest@example.com', 'role': UserRole.GUEST},
]


def seed_users(password):
    """Create missing sample users (verified, so they can sign in). Returns the created emails."""
    created = []
    for data in SAMPLE_USERS:
        if User.query.filter_by(email=data['email']).first():
            continue
        db.session.add(User(
            name=data['name'],
            email=data['email'],
            role=data['role'].value,
            password_hash=hash_password(password),
            verified=True,
        ))
        created.append(data['email'])

    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return created


def main():
    from app import create_app

    app = create_app()
    with app.app_context():
        db.create_all()
        created = seed_users(app.config['SEED_USER_PASSWORD'])
        if created:
            print("[SUCCESS] Seeded users:", ", ".join(created))
        else:
            print("Sample users already exist. Nothing to do.")


if __name__ == '__main__':
    main()
