"""
Service Error Taxonomy

Every error raised by the service layer derives from ``ServiceError`` and
carries a machine-readable ``error_code`` plus the HTTP status the request
layer should answer with. Routers convert them with ``to_http_exception``.

Classes:
- ValidationError (400): malformed or missing input
- AuthenticationError (401): bad credentials or token
- ForbiddenError (403): authenticated but not permitted
- NotFoundError (404): principal, application, role or invitation absent
- ConflictError (409): the write conflicts with current state
- TransientIOError (500): email or store I/O failed
"""

import logging

from fastapi import HTTPException, status

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


# ============================================
# Taxonomy
# ============================================


class ValidationError(ServiceError):
    def __init__(self, message: str, error_code: str = "VALIDATION_ERROR"):
        super().__init__(message, error_code, status.HTTP_400_BAD_REQUEST)


class AuthenticationError(ServiceError):
    def __init__(
        self,
        message: str = "Invalid email or password.",
        error_code: str = "AUTHENTICATION_FAILED",
    ):
        super().__init__(message, error_code, status.HTTP_401_UNAUTHORIZED)


class ForbiddenError(ServiceError):
    def __init__(
        self,
        message: str = "You are not permitted to perform this action.",
        error_code: str = "FORBIDDEN",
    ):
        super().__init__(message, error_code, status.HTTP_403_FORBIDDEN)


class NotFoundError(ServiceError):
    def __init__(self, message: str = "Resource not found.", error_code: str = "NOT_FOUND"):
        super().__init__(message, error_code, status.HTTP_404_NOT_FOUND)


class ConflictError(ServiceError):
    def __init__(self, message: str, error_code: str = "CONFLICT"):
        super().__init__(message, error_code, status.HTTP_409_CONFLICT)


class TransientIOError(ServiceError):
    def __init__(self, message: str, error_code: str = "TRANSIENT_IO_ERROR"):
        super().__init__(message, error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)


# ============================================
# Specialisations
# ============================================


class RoleNotFoundError(NotFoundError):
    """Raised when a role name does not resolve to a seeded role."""

    def __init__(self, role_name: str):
        super().__init__(f"Role '{role_name}' not found.", "ROLE_NOT_FOUND")
        self.role_name = role_name


class InvalidTokenError(NotFoundError):
    """
    Raised when an invitation token is unknown, already consumed or expired.

    The message never says which of the three applies.
    """

    def __init__(self):
        super().__init__("Token has expired or is invalid.", "INVALID_TOKEN")


class StageMismatchError(ConflictError):
    """Raised in strict mode when an application is not at the approver's queue stage."""

    def __init__(self, current: str, expected: str | None):
        super().__init__(
            f"Application is at stage '{current}', expected '{expected}'.",
            "STAGE_MISMATCH",
        )
        self.current = current
        self.expected = expected


class StageConflictError(ConflictError):
    """Raised when the application stage changed between read and write."""

    def __init__(self):
        super().__init__(
            "Application was modified by another reviewer. Reload and try again.",
            "STAGE_CONFLICT",
        )


class DuplicateApplicationError(ConflictError):
    def __init__(self):
        super().__init__(
            "You already have an active application for this bursary.",
            "DUPLICATE_APPLICATION",
        )


class EmailAlreadyRegisteredError(ConflictError):
    def __init__(self):
        super().__init__("An account with this email already exists.", "EMAIL_ALREADY_REGISTERED")


class UsernameTakenError(ConflictError):
    def __init__(self, username: str):
        super().__init__(f"Username '{username}' is already taken.", "USERNAME_TAKEN")


class NotificationDeliveryError(TransientIOError):
    """Raised when the invitation email could not be delivered after retries."""

    def __init__(self, email: str):
        super().__init__(f"Failed to send invitation email to {email}.", "EMAIL_DELIVERY_FAILED")


class StoreTimeoutError(TransientIOError):
    def __init__(self, operation: str):
        super().__init__(f"Database operation '{operation}' timed out.", "STORE_TIMEOUT")


# ============================================
# HTTP mapping
# ============================================


def to_http_exception(e: ServiceError) -> HTTPException:
    """Convert a service error into the structured HTTPException body."""
    if e.status_code >= 500:
        logger.error(f"{e.error_code}: {e.message}")
    else:
        logger.info(f"{e.error_code}: {e.message}")
    return HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
    )


def internal_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred. Please try again later.",
        },
    )
