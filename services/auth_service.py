"""
Registration, email verification, OTP resend and credential sign-in.

Workflows return Ok/Err values; the public methods translate them once into
{success, message, ...} dicts and never raise, except for werkzeug HTTP
exceptions (redirects/aborts) which pass through untouched.
"""
import logging

from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from models import OTPPurpose
from services.results import Ok, Err, ErrorKind, GENERIC_ERROR_MSG, to_response
from utils.auth_utils import hash_password, verify_password
from services.otp_service import INVALID_OTP_MSG
from utils.mail import EmailResult, send_verification_otp_email
from utils.otp_helper import is_well_formed_otp
from utils.validators import normalize_email, validate_registration_form, validate_sign_in_form

logger = logging.getLogger(__name__)

REGISTER_SUCCESS_MSG = "Registration successful! Please check your email for the verification code."
DUPLICATE_EMAIL_MSG = "User with this email already exists"
EMAIL_DELIVERY_FAIL_MSG = "Failed to send verification email. Please try again."
OTP_CREATION_FAIL_MSG = "Failed to generate verification code. Please try again."
VERIFY_MISSING_MSG = "Email and OTP code are required"
VERIFY_SUCCESS_MSG = "Email verified successfully! You can now sign in."
RESEND_MISSING_MSG = "Email is required"
RESEND_COOLDOWN_MSG = "Please wait 60 seconds before requesting another code"
RESEND_SUCCESS_MSG = "A new verification code has been sent to your email."
USER_NOT_FOUND_MSG = "User not found"
ALREADY_VERIFIED_MSG = "Email is already verified"
INVALID_CREDENTIALS_MSG = "Invalid email or password"
UNVERIFIED_ACCOUNT_MSG = "Please verify your email before signing in. Check your inbox for the verification code."
SIGN_IN_SUCCESS_MSG = "Signed in successfully"
SIGN_OUT_MSG = "Signed out successfully"


def classify_store_error(exc):
    """Map a store-layer exception to an error kind by its message."""
    text = str(getattr(exc, 'orig', None) or exc).lower()
    if 'unique' in text or 'duplicate' in text:
        return Err(ErrorKind.DUPLICATE_EMAIL, DUPLICATE_EMAIL_MSG)
    return Err(ErrorKind.INTERNAL, GENERIC_ERROR_MSG)


class AuthService:
    """
    Args:
        users: UserStore
        otps: OTPService
        session_issuer: object with issue_session(user) / verify_session(token) / end_session()
        send_otp_email: callable(name, email, code) -> EmailResult
    """

    def __init__(self, users, otps, session_issuer, send_otp_email=send_verification_otp_email):
        self.users = users
        self.otps = otps
        self.session_issuer = session_issuer
        self.send_otp_email = send_otp_email

    # ---------- public entry points ----------

    def register_user(self, name, email, password, confirm_password):
        return self._run('register', self._register, name, email, password, confirm_password)

    def verify_registration_otp(self, email, otp_code):
        return self._run('verify', self._verify, email, otp_code)

    def resend_otp(self, email):
        return self._run('resend', self._resend, email)

    def sign_in_with_credentials(self, email, password):
        return self._run('sign-in', self._sign_in, email, password)

    def sign_out(self):
        return self._run('sign-out', self._sign_out)

    def current_user_for_token(self, token):
        return self.session_issuer.verify_session(token)

    # ---------- boundary ----------

    def _run(self, name, workflow, *args):
        try:
            result = workflow(*args)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Unexpected error in {name} workflow: {str(e)}", exc_info=True)
            result = Err(ErrorKind.INTERNAL, GENERIC_ERROR_MSG)
        return to_response(result)

    # ---------- workflows ----------

    def _register(self, name, email, password, confirm_password):
        error = validate_registration_form(name, email, password, confirm_password)
        if error:
            return Err(ErrorKind.VALIDATION, error)

        email = normalize_email(email)
        if self.users.find_by_email(email) is not None:
            return Err(ErrorKind.DUPLICATE_EMAIL, DUPLICATE_EMAIL_MSG)

        try:
            user = self.users.create(name=name.strip(), email=email, password_hash=hash_password(password))
        except IntegrityError as e:
            # Lost the race against a concurrent registration for the same email
            return classify_store_error(e)
        user_id, user_name = user.id, user.name

        try:
            code = self.otps.create_otp(email, user_id, OTPPurpose.REGISTRATION)
        except Exception as e:
            logger.error(f"OTP creation failed for {email}: {str(e)}", exc_info=True)
            self._compensate(user_id, email)
            return Err(ErrorKind.OTP_CREATION, OTP_CREATION_FAIL_MSG)

        delivery = self._deliver(user_name, email, code)
        if not delivery.success:
            logger.warning("Verification email to %s failed: %s", email, delivery.error)
            self._compensate(user_id, email)
            return Err(ErrorKind.EMAIL_DELIVERY, EMAIL_DELIVERY_FAIL_MSG)

        logger.info("Registered unverified user %s", user_id)
        return Ok(REGISTER_SUCCESS_MSG, {'user_id': user_id, 'email': email})

    def _verify(self, email, otp_code):
        email = normalize_email(email)
        if isinstance(otp_code, str):
            otp_code = otp_code.strip()
        if not email or otp_code is None or otp_code == '':
            return Err(ErrorKind.MISSING_FIELD, VERIFY_MISSING_MSG)

        if not is_well_formed_otp(otp_code):
            return Err(ErrorKind.INVALID_OTP, INVALID_OTP_MSG)

        validation = self.otps.validate_otp(email, otp_code, OTPPurpose.REGISTRATION)
        if not validation.valid:
            return Err(ErrorKind.INVALID_OTP, validation.message)

        if validation.user_id:
            user = self.users.get(validation.user_id)
        else:
            user = self.users.find_by_email(email)
        if user is None or user.email != email:
            return Err(ErrorKind.NOT_FOUND, USER_NOT_FOUND_MSG)

        if self.users.mark_verified(user.id):
            logger.info("Verified user %s", user.id)
        return Ok(VERIFY_SUCCESS_MSG)

    def _resend(self, email):
        email = normalize_email(email)
        if not email:
            return Err(ErrorKind.MISSING_FIELD, RESEND_MISSING_MSG)

        if not self.otps.can_request_otp(email, OTPPurpose.REGISTRATION):
            return Err(ErrorKind.RATE_LIMIT, RESEND_COOLDOWN_MSG)

        user = self.users.find_by_email(email)
        if user is None:
            return Err(ErrorKind.NOT_FOUND, USER_NOT_FOUND_MSG)
        if user.verified:
            return Err(ErrorKind.ALREADY_VERIFIED, ALREADY_VERIFIED_MSG)

        try:
            code = self.otps.create_otp(email, user.id, OTPPurpose.REGISTRATION)
        except Exception as e:
            logger.error(f"OTP creation failed for {email}: {str(e)}", exc_info=True)
            return Err(ErrorKind.OTP_CREATION, OTP_CREATION_FAIL_MSG)

        delivery = self._deliver(user.name, email, code)
        if not delivery.success:
            logger.warning("Verification email to %s failed: %s", email, delivery.error)
            return Err(ErrorKind.EMAIL_DELIVERY, EMAIL_DELIVERY_FAIL_MSG)
        return Ok(RESEND_SUCCESS_MSG)

    def _sign_in(self, email, password):
        error = validate_sign_in_form(email, password)
        if error:
            return Err(ErrorKind.VALIDATION, error)

        user = self.users.find_by_email(normalize_email(email))
        if user is None:
            return Err(ErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MSG)
        if not user.verified:
            return Err(ErrorKind.UNVERIFIED_ACCOUNT, UNVERIFIED_ACCOUNT_MSG)
        if not verify_password(user.password_hash, password):
            return Err(ErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MSG)

        token = self.session_issuer.issue_session(user)
        logger.info("User %s signed in", user.id)
        return Ok(SIGN_IN_SUCCESS_MSG, {'token': token})

    def _sign_out(self):
        self.session_issuer.end_session()
        return Ok(SIGN_OUT_MSG)

    # ---------- helpers ----------

    def _deliver(self, name, email, code):
        """Any raised error from the sender counts as a failed delivery."""
        try:
            return self.send_otp_email(name, email, code)
        except Exception as e:
            logger.error(f"Email sender raised for {email}: {str(e)}", exc_info=True)
            return EmailResult(False, str(e))

    def _compensate(self, user_id, email):
        """Remove the unverified user and any code issued for it in the same registration."""
        self.otps.store.delete_for_user(email, OTPPurpose.REGISTRATION.value, user_id)
        self.users.delete(user_id)
        logger.info("Removed unverified user %s (%s) after failed registration", user_id, email)
