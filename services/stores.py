"""
Store handles over the SQLAlchemy session.
Constructed once by the application factory and passed into the services.
Each mutation is a single statement, committed on success and rolled back
(then re-raised) on failure.
"""
from sqlalchemy import or_

from models import User, OTP, UserRole


class _SessionStore:
    def __init__(self, session):
        self.session = session

    def _commit(self):
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise


class UserStore(_SessionStore):

    def get(self, user_id):
        return self.session.get(User, user_id)

    def find_by_email(self, email):
        return self.session.query(User).filter_by(email=email).first()

    def create(self, name, email, password_hash, role=UserRole.GUEST, verified=False):
        user = User(
            name=name,
            email=email,
            password_hash=password_hash,
            role=UserRole(role).value,
            verified=verified,
        )
        self.session.add(user)
        self._commit()
        return user

    def mark_verified(self, user_id):
        """Flip verified false -> true. Returns False if nothing changed."""
        updated = (
            self.session.query(User)
            .filter(User.id == user_id, User.verified.is_(False))
            .update({User.verified: True}, synchronize_session=False)
        )
        self._commit()
        return updated == 1

    def delete(self, user_id):
        self.session.query(User).filter(User.id == user_id).delete(synchronize_session=False)
        self._commit()


class OTPStore(_SessionStore):

    def create(self, code, email, user_id, purpose, expires_at):
        otp = OTP(
            code=code,
            email=email,
            user_id=user_id,
            purpose=purpose,
            expires_at=expires_at,
        )
        self.session.add(otp)
        self._commit()
        return otp

    def find_active(self, email, code, purpose, now):
        return (
            self.session.query(OTP)
            .filter(
                OTP.email == email,
                OTP.code == code,
                OTP.purpose == purpose,
                OTP.used.is_(False),
                OTP.expires_at > now,
            )
            .first()
        )

    def mark_used(self, otp_id):
        """
        Conditional UPDATE ... WHERE used = false.
        Only one caller can flip a record; the row count says who won.
        """
        updated = (
            self.session.query(OTP)
            .filter(OTP.id == otp_id, OTP.used.is_(False))
            .update({OTP.used: True}, synchronize_session=False)
        )
        self._commit()
        return updated == 1

    def delete_stale(self, email, purpose, now):
        deleted = (
            self.session.query(OTP)
            .filter(
                OTP.email == email,
                OTP.purpose == purpose,
                or_(OTP.used.is_(True), OTP.expires_at <= now),
            )
            .delete(synchronize_session=False)
        )
        self._commit()
        return deleted

    def find_created_after(self, email, purpose, since):
        return (
            self.session.query(OTP)
            .filter(OTP.email == email, OTP.purpose == purpose, OTP.created_at > since)
            .first()
        )

    def delete_expired(self, now):
        deleted = self.session.query(OTP).filter(OTP.expires_at <= now).delete(synchronize_session=False)
        self._commit()
        return deleted

    def delete_for_user(self, email, purpose, user_id):
        deleted = (
            self.session.query(OTP)
            .filter(OTP.email == email, OTP.purpose == purpose, OTP.user_id == user_id)
            .delete(synchronize_session=False)
        )
        self._commit()
        return deleted

    def list_for(self, email, purpose):
        return (
            self.session.query(OTP)
            .filter(OTP.email == email, OTP.purpose == purpose)
            .order_by(OTP.created_at.desc())
            .all()
        )
