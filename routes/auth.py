"""
Authentication routes: register, email OTP verification, resend, login, logout
"""
from flask import Blueprint, request, jsonify, current_app
from flask_login import current_user

from services import get_auth_service
from services.results import ErrorKind

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')

ERROR_STATUS = {
    ErrorKind.VALIDATION.value: 400,
    ErrorKind.MISSING_FIELD.value: 400,
    ErrorKind.INVALID_OTP.value: 400,
    ErrorKind.INVALID_CREDENTIALS.value: 401,
    ErrorKind.UNVERIFIED_ACCOUNT.value: 403,
    ErrorKind.NOT_FOUND.value: 404,
    ErrorKind.DUPLICATE_EMAIL.value: 409,
    ErrorKind.ALREADY_VERIFIED.value: 409,
    ErrorKind.RATE_LIMIT.value: 429,
    ErrorKind.OTP_CREATION.value: 500,
    ErrorKind.INTERNAL.value: 500,
    ErrorKind.EMAIL_DELIVERY.value: 502,
}


def _form():
    return request.get_json(silent=True) or request.form


def _respond(result, success_status=200):
    if result['success']:
        return jsonify(result), success_status
    return jsonify(result), ERROR_STATUS.get(result.get('error'), 400)


@auth_bp.route('/register', methods=['POST'])
def register():
    """Create an unverified account and email a verification code."""
    data = _form()
    result = get_auth_service().register_user(
        data.get('name') or '',
        data.get('email') or '',
        data.get('password') or '',
        data.get('confirm_password') or data.get('confirmPassword') or '',
    )
    return _respond(result, success_status=201)


@auth_bp.route('/verify-otp', methods=['POST'])
def verify_otp():
    data = _form()
    otp_code = data.get('otp_code') or data.get('otpCode') or data.get('otp')
    # JSON clients may send the code as a number
    if isinstance(otp_code, int) and not isinstance(otp_code, bool):
        otp_code = str(otp_code)
    return _respond(get_auth_service().verify_registration_otp(data.get('email'), otp_code))


@auth_bp.route('/resend-otp', methods=['POST'])
def resend_otp():
    return _respond(get_auth_service().resend_otp(_form().get('email')))


@auth_bp.route('/login', methods=['POST'])
def login():
    data = _form()
    result = get_auth_service().sign_in_with_credentials(data.get('email') or '', data.get('password') or '')
    if result['success']:
        current_app.logger.info("Login succeeded for %s", current_user.get_id())
    return _respond(result)


@auth_bp.route('/logout', methods=['POST'])
def logout():
    return _respond(get_auth_service().sign_out())


@auth_bp.route('/session', methods=['GET'])
def session_info():
    """Current user from the login cookie or an Authorization: Bearer token."""
    user = current_user if current_user.is_authenticated else None
    if user is None:
        header = request.headers.get('Authorization', '')
        if header.lower().startswith('bearer '):
            user = get_auth_service().current_user_for_token(header[7:].strip())
    if user is None:
        return jsonify({'success': False, 'message': 'Not signed in'}), 401
    return jsonify({'success': True, 'user': user.to_dict()})
