"""Tests for the password reset service."""

import logging
from unittest.mock import patch

import pytest

from eventreel.results import AppError, ErrorType, failure
from eventreel.services.email import ConsoleEmailClient
from eventreel.services.password_reset import CODE_ALPHABET, PasswordResetService, generate_code
from eventreel.services.passwords import verify_password


def _issue_code(reset_service: PasswordResetService, email_client) -> str:
    reset_service.send_code("alex@example.com").unwrap()
    return email_client.sent[-1]["params"]["code"]


class TestCodeGeneration:
    def test_length_and_alphabet(self):
        for _ in range(50):
            code = generate_code()
            assert len(code) == 6
            assert set(code) <= set(CODE_ALPHABET)

    def test_alphabet_has_no_ambiguous_characters(self):
        assert not set("0O1I") & set(CODE_ALPHABET)


class TestEmailExist:
    def test_normalized_lookup(self, reset_service: PasswordResetService, test_user: dict):
        assert reset_service.is_email_exist("  ALEX@example.com ").value is True
        assert reset_service.is_email_exist("nobody@example.com").value is False


class TestSendCode:
    def test_sends_template_email(self, reset_service: PasswordResetService, email_client, test_user: dict):
        result = reset_service.send_code(" Alex@Example.com")
        assert result.is_success
        assert test_user["user_id"] in result.value
        assert len(email_client.sent) == 1
        sent = email_client.sent[0]
        assert sent["to"] == "alex@example.com"
        assert sent["template_id"] == 2
        assert len(sent["params"]["code"]) == 6

    def test_unknown_email_is_not_found(self, reset_service: PasswordResetService, email_client):
        result = reset_service.send_code("nobody@example.com")
        assert result.is_failure
        assert result.error.kind == ErrorType.NOT_FOUND
        assert email_client.sent == []

    @pytest.mark.parametrize("status_code", [400, 401, 500, 503])
    def test_provider_error_is_internal_server_error(
        self, reset_service: PasswordResetService, email_client, test_user: dict, status_code: int
    ):
        email_client.status_code = status_code
        result = reset_service.send_code("alex@example.com")
        assert result.is_failure
        assert result.error.kind == ErrorType.INTERNAL_SERVER_ERROR
        assert result.error.status_code == 500
        assert result.error.message == "email not sent"


class TestCodeValidity:
    def test_valid_immediately(self, reset_service, email_client, test_user):
        code = _issue_code(reset_service, email_client)
        assert reset_service.is_code_valid(code).value is True

    def test_valid_at_exactly_fifteen_minutes(self, reset_service, email_client, clock, test_user):
        code = _issue_code(reset_service, email_client)
        clock.advance(minutes=15)
        assert reset_service.is_code_valid(code).is_success

    def test_expired_after_fifteen_minutes(self, reset_service, email_client, clock, test_user):
        code = _issue_code(reset_service, email_client)
        clock.advance(minutes=15, seconds=1)
        result = reset_service.is_code_valid(code)
        assert result.is_failure
        assert result.error.kind == ErrorType.BAD_REQUEST
        assert result.error.message == "Code has expired"

    def test_expired_at_fifteen_minutes_one(self, reset_service, email_client, clock, test_user):
        code = _issue_code(reset_service, email_client)
        clock.advance(minutes=15, seconds=60)
        assert reset_service.is_code_valid(code).is_failure

    def test_unknown_code_is_not_found(self, reset_service):
        result = reset_service.is_code_valid("ZZZZZZ")
        assert result.is_failure
        assert result.error.kind == ErrorType.NOT_FOUND


class TestResetPassword:
    def test_resets_password_and_returns_user_info(self, reset_service, email_client, test_user):
        code = _issue_code(reset_service, email_client)
        info = reset_service.reset_password(code, "new-password").unwrap()
        assert info.id == test_user["user_id"]
        assert info.username == "alex"
        assert info.email == "alex@example.com"

        user = reset_service.users.get_by_id(test_user["user_id"]).unwrap()
        assert verify_password("new-password", user.password_hash)

    def test_code_is_single_use(self, reset_service, email_client, test_user):
        code = _issue_code(reset_service, email_client)
        reset_service.reset_password(code, "new-password").unwrap()

        result = reset_service.reset_password(code, "another-password")
        assert result.is_failure
        assert result.error.kind == ErrorType.BAD_REQUEST
        assert result.error.message == "Code has already been used"
        assert reset_service.is_code_valid(code).is_failure

    def test_code_stays_consumed_when_password_update_fails(self, reset_service, email_client, test_user):
        code = _issue_code(reset_service, email_client)
        with patch.object(
            reset_service.users, "update_password", return_value=failure(AppError.database("write failed"))
        ):
            first = reset_service.reset_password(code, "new-password")
        assert first.is_failure
        assert first.error.kind == ErrorType.DATABASE_ERROR

        second = reset_service.reset_password(code, "new-password")
        assert second.is_failure
        assert second.error.message == "Code has already been used"

    def test_expired_code_is_rejected(self, reset_service, email_client, clock, test_user):
        code = _issue_code(reset_service, email_client)
        clock.advance(minutes=16)
        result = reset_service.reset_password(code, "new-password")
        assert result.is_failure
        assert result.error.message == "Code has expired"

    def test_unexpected_exception_is_database_error(self, reset_service, email_client, test_user):
        code = _issue_code(reset_service, email_client)
        with patch("eventreel.services.password_reset.hash_password", side_effect=RuntimeError("hasher crashed")):
            result = reset_service.reset_password(code, "new-password")
        assert result.is_failure
        assert result.error.kind == ErrorType.DATABASE_ERROR
        assert result.error.message == "hasher crashed"


class TestConsoleEmailClient:
    def test_code_stays_out_of_info_logs(self, caplog):
        with caplog.at_level(logging.INFO, logger="eventreel.services.email"):
            response = ConsoleEmailClient().send_template_email("alex@example.com", 2, {"code": "ABC234"})
        assert response.status_code == 201
        assert "alex@example.com" in caplog.text
        assert "ABC234" not in caplog.text
