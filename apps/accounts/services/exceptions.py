"""Domain-specific exceptions for accounts services."""
from apps.core.exceptions import CuppyError, InvalidRequestError, UnauthorizedError


class AccountsServiceError(CuppyError):
    """Base exception for accounts services."""
    pass


class UserRegistrationError(InvalidRequestError):
    """Raised when user registration fails."""
    default_detail = 'Registration failed.'
    default_code = 'registration_failed'


class InvalidCredentialsError(AccountsServiceError):
    """Raised when authentication credentials are invalid."""
    status_code = 401
    default_detail = 'Invalid email or password.'
    default_code = 'invalid_credentials'


class InactiveAccountError(UnauthorizedError):
    """Raised when account is deactivated."""
    default_detail = 'Account is deactivated.'
    default_code = 'inactive_account'


class PasswordConfirmationError(UnauthorizedError):
    """Raised when password confirmation fails."""
    default_detail = 'Invalid password.'
    default_code = 'invalid_password'
