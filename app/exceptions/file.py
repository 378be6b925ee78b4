"""File-related exceptions."""

from .base import AppPermissionError, BaseAppException, NotFoundError, ValidationError


class NoFileUploadedError(ValidationError):
    """Raised when the upload request carries no file part."""

    def __init__(self, message: str = "No file uploaded"):
        super().__init__(message=message)


class FilenameTooLongError(ValidationError):
    """Raised when the client's filename will not fit the metadata column."""

    def __init__(self, limit: int, message: str = "Filename too long"):
        super().__init__(message=message, details={"max_length": limit})


class PayloadTooLargeError(BaseAppException):
    """Raised when an upload exceeds the configured size limit."""

    def __init__(self, limit: int, message: str = "File too large"):
        self.limit = limit
        super().__init__(
            message=message,
            status_code=413,
            error_code="PAYLOAD_TOO_LARGE",
            details={"max_size": limit},
        )


class FileRecordNotFoundError(NotFoundError):
    """Raised when no file record has the requested id."""

    def __init__(self, message: str = "File not found"):
        super().__init__(message=message)


class FilePermissionError(AppPermissionError):
    """Raised when the file belongs to another user."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(message=message)


class BlobMissingError(NotFoundError):
    """Raised when the record exists but its bytes are gone from disk."""

    def __init__(self, message: str = "File not found on disk"):
        super().__init__(message=message)
