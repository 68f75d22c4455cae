from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.

    Each subclass declares the HTTP status and machine-readable type it maps to,
    so the web layer converts them in one place.
    """

    status_code: int = 400
    error_type: str = "bad_request"

    def __init__(self, message: str, error: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error = error


class ValidationError(UserError):
    """Raised when user input fails validation."""

    status_code = 400
    error_type = "validation_error"


class AuthenticationError(UserError):
    """Raised when authentication fails or credentials are missing."""

    status_code = 401
    error_type = "authentication_error"

    def __init__(self, message: str = "Authentication failed", error: str | None = None) -> None:
        super().__init__(message, error)


class AccessDeniedError(UserError):
    """Raised when a presented token is invalid or expired."""

    status_code = 403
    error_type = "access_denied"

    def __init__(self, message: str = "Invalid token", error: str | None = None) -> None:
        super().__init__(message, error)


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    status_code = 404
    error_type = "not_found"

    def __init__(self, message: str = "Document not found", error: str | None = None) -> None:
        super().__init__(message, error)


class MethodNotAllowedError(UserError):
    """Raised for HTTP verbs a resource does not support."""

    status_code = 405
    error_type = "method_not_allowed"

    def __init__(self, method: str, error: str | None = None) -> None:
        super().__init__("Method Not Allowed", error or f"{method} method is not supported")


class ConflictError(UserError):
    """Raised when a resource with the same unique key already exists."""

    status_code = 409
    error_type = "conflict"
