"""User and authentication exceptions."""

from .base import AuthenticationError, ConflictError


class UserAlreadyExistsError(ConflictError):
    """Raised when the username or email is already registered."""

    def __init__(self, message: str = "User already exists"):
        super().__init__(message=message, error_code="USER_ALREADY_EXISTS")


class InvalidCredentialsError(AuthenticationError):
    """Raised for an unknown user and for a wrong password alike."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message=message, error_code="INVALID_CREDENTIALS")


class MissingTokenError(AuthenticationError):
    """Raised when a protected route is called without a bearer token."""

    def __init__(self, message: str = "Access token required"):
        super().__init__(message=message, error_code="TOKEN_REQUIRED")


class InvalidTokenError(AuthenticationError):
    """Raised for a bad signature, a malformed token or an expired token."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message=message, error_code="INVALID_TOKEN")
