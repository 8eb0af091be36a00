"""
Workflow results: Ok(data) or Err(kind, message), translated to
{success, message, ...} once at the service boundary.
"""
import enum
from dataclasses import dataclass, field


class ErrorKind(str, enum.Enum):
    VALIDATION = 'ValidationError'
    MISSING_FIELD = 'MissingFieldError'
    DUPLICATE_EMAIL = 'DuplicateEmailError'
    EMAIL_DELIVERY = 'EmailDeliveryError'
    OTP_CREATION = 'OTPCreationError'
    RATE_LIMIT = 'RateLimitError'
    NOT_FOUND = 'NotFoundError'
    ALREADY_VERIFIED = 'AlreadyVerifiedError'
    INVALID_OTP = 'InvalidOTPError'
    UNVERIFIED_ACCOUNT = 'UnverifiedAccountError'
    INVALID_CREDENTIALS = 'InvalidCredentialsError'
    INTERNAL = 'InternalError'


GENERIC_ERROR_MSG = "Something went wrong. Please try again later."


@dataclass
class Ok:
    message: str
    data: dict = field(default_factory=dict)

    success = True


@dataclass
class Err:
    kind: ErrorKind
    message: str

    success = False


def to_response(result):
    """Flatten a result into the dict returned to the UI layer."""
    if isinstance(result, Ok):
        response = {'success': True, 'message': result.message}
        response.update(result.data)
        return response
    return {'success': False, 'message': result.message, 'error': result.kind.value}
