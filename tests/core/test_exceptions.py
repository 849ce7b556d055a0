"""
Unit tests for the service error taxonomy and its HTTP mapping.
"""

import pytest

from bursary.core.exceptions import (
    AuthenticationError,
    ConflictError,
    DuplicateApplicationError,
    EmailAlreadyRegisteredError,
    ForbiddenError,
    InvalidTokenError,
    NotFoundError,
    NotificationDeliveryError,
    RoleNotFoundError,
    StageConflictError,
    StageMismatchError,
    StoreTimeoutError,
    TransientIOError,
    ValidationError,
    internal_error,
    to_http_exception,
)


class TestTaxonomy:
    """Each error kind answers with its HTTP status."""

    @pytest.mark.parametrize(
        ("error", "status_code"),
        [
            (ValidationError("bad"), 400),
            (AuthenticationError(), 401),
            (ForbiddenError(), 403),
            (NotFoundError(), 404),
            (ConflictError("clash"), 409),
            (TransientIOError("io"), 500),
        ],
    )
    def test_status_codes(self, error, status_code):
        assert error.status_code == status_code

    def test_specialisations_inherit_kind(self):
        assert isinstance(RoleNotFoundError("dean"), NotFoundError)
        assert isinstance(InvalidTokenError(), NotFoundError)
        assert isinstance(StageMismatchError("submitted", "county"), ConflictError)
        assert isinstance(StageConflictError(), ConflictError)
        assert isinstance(DuplicateApplicationError(), ConflictError)
        assert isinstance(EmailAlreadyRegisteredError(), ConflictError)
        assert isinstance(NotificationDeliveryError("a@bursary.org"), TransientIOError)
        assert isinstance(StoreTimeoutError("op"), TransientIOError)

    def test_invalid_token_message_is_uniform(self):
        """Absent, consumed and expired tokens are indistinguishable."""
        assert InvalidTokenError().message == "Token has expired or is invalid."
        assert InvalidTokenError().error_code == "INVALID_TOKEN"

    def test_notification_error_code(self):
        assert NotificationDeliveryError("a@bursary.org").error_code == "EMAIL_DELIVERY_FAILED"

    def test_role_not_found_keeps_name(self):
        error = RoleNotFoundError("dean")
        assert error.role_name == "dean"
        assert "dean" in error.message


class TestHttpMapping:
    """Tests for to_http_exception and internal_error."""

    def test_to_http_exception(self):
        exc = to_http_exception(DuplicateApplicationError())
        assert exc.status_code == 409
        assert exc.detail["error"] == "DUPLICATE_APPLICATION"
        assert "active application" in exc.detail["message"]

    def test_internal_error(self):
        exc = internal_error()
        assert exc.status_code == 500
        assert exc.detail["error"] == "INTERNAL_ERROR"
