"""Tests for the Result type and error taxonomy."""

import pytest

from eventreel.results import AppError, ErrorType, Failure, Success, failure, service_boundary, success


class TestAppError:
    """Error kinds carry their conventional status codes."""

    @pytest.mark.parametrize(
        ("factory", "kind", "status_code"),
        [
            (AppError.not_found, ErrorType.NOT_FOUND, 404),
            (AppError.bad_request, ErrorType.BAD_REQUEST, 400),
            (AppError.internal, ErrorType.INTERNAL_SERVER_ERROR, 500),
            (AppError.business, ErrorType.BUSINESS_LOGIC_ERROR, 403),
            (AppError.database, ErrorType.DATABASE_ERROR, 500),
            (AppError.validation, ErrorType.VALIDATION_ERROR, 400),
            (AppError.conflict, ErrorType.CONFLICT, 409),
        ],
    )
    def test_factories(self, factory, kind, status_code):
        error = factory("message")
        assert error.kind == kind
        assert error.status_code == status_code
        assert error.message == "message"
        assert str(error) == "message"

    def test_explicit_status_code_wins(self):
        assert AppError(ErrorType.BUSINESS_LOGIC_ERROR, "boom", 500).status_code == 500

    def test_equality(self):
        assert AppError.not_found("x") == AppError.not_found("x")
        assert AppError.not_found("x") != AppError.bad_request("x")


class TestResult:
    def test_success(self):
        result = success(42)
        assert isinstance(result, Success)
        assert result.is_success is True
        assert result.is_failure is False
        assert result.unwrap() == 42

    def test_failure(self):
        error = AppError.not_found("missing")
        result = failure(error)
        assert isinstance(result, Failure)
        assert result.is_success is False
        assert result.is_failure is True
        assert result.is_kind(ErrorType.NOT_FOUND)
        with pytest.raises(AppError) as exc_info:
            result.unwrap()
        assert exc_info.value is error


class TestServiceBoundary:
    def test_passes_results_through(self):
        @service_boundary
        def ok():
            return success("fine")

        assert ok().value == "fine"

    def test_unexpected_exception_becomes_database_error(self):
        @service_boundary
        def broken():
            raise RuntimeError("connection reset")

        result = broken()
        assert result.is_failure
        assert result.error.kind == ErrorType.DATABASE_ERROR
        assert result.error.status_code == 500
        assert result.error.message == "connection reset"

    def test_raised_app_error_is_returned_as_failure(self):
        @service_boundary
        def raises():
            raise AppError.conflict("taken")

        result = raises()
        assert result.is_failure
        assert result.error == AppError.conflict("taken")
