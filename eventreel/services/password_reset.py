"""Password reset service: one-time codes sent by email."""

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from eventreel.models.common import utcnow
from eventreel.repositories.password_reset import CodeEntity, PasswordResetRepository
from eventreel.repositories.users import UserRepository
from eventreel.results import AppError, Result, failure, service_boundary, success
from eventreel.services.email import EmailClient
from eventreel.services.passwords import hash_password
from eventreel.services.user import normalize

logger = logging.getLogger(__name__)

# No 0/O, 1/I
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


@dataclass(frozen=True)
class UserInfoDTO:
    id: str
    username: str
    email: str


def generate_code(length: int = 6) -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def is_code_expired(code: CodeEntity, now: datetime, ttl: timedelta) -> bool:
    return code.created_at + ttl < now


class PasswordResetService:
    """Issues, checks and consumes password reset codes."""

    def __init__(
        self,
        users: UserRepository,
        codes: PasswordResetRepository,
        email_client: EmailClient,
        template_id: int = 2,
        code_length: int = 6,
        code_ttl: timedelta = timedelta(minutes=15),
        bcrypt_rounds: int = 12,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.users = users
        self.codes = codes
        self.email_client = email_client
        self.template_id = template_id
        self.code_length = code_length
        self.code_ttl = code_ttl
        self.bcrypt_rounds = bcrypt_rounds
        self.clock = clock

    @service_boundary
    def is_email_exist(self, email: str) -> Result[bool]:
        return self.users.is_user_exist_by_email(normalize(email))

    @service_boundary
    def send_code(self, email: str) -> Result[str]:
        """Store a fresh code for the user and email it."""
        clean_email = normalize(email)
        user_result = self.users.get_by_email(clean_email)
        if user_result.is_failure:
            return failure(user_result.error)
        user_id = user_result.value.id

        code = generate_code(self.code_length)
        insert_result = self.codes.insert_code(user_id, code, self.clock())
        if insert_result.is_failure:
            return failure(insert_result.error)

        response = self.email_client.send_template_email(clean_email, self.template_id, {"code": code})
        if not 200 <= response.status_code < 300:
            logger.error("Email provider error for user %s: %s %s", user_id, response.status_code, response.text)
            return failure(AppError.internal("email not sent"))

        logger.info("Reset code emailed to user %s", user_id)
        return success(f"email sent to user with userId: {user_id}")

    @service_boundary
    def is_code_valid(self, code: str) -> Result[bool]:
        code_result = self.codes.get_code(code)
        if code_result.is_failure:
            return failure(code_result.error)
        entity = code_result.value

        if entity.used_at is not None:
            return failure(AppError.bad_request("Code has already been used"))
        if is_code_expired(entity, self.clock(), self.code_ttl):
            return failure(AppError.bad_request("Code has expired"))
        return success(True)

    @service_boundary
    def reset_password(self, code: str, password: str) -> Result[UserInfoDTO]:
        """Consume the code and set a new password.

        The code is marked used before the password update and stays used if
        the update fails.
        """
        valid_result = self.is_code_valid(code)
        if valid_result.is_failure:
            return failure(valid_result.error)

        code_result = self.codes.get_code(code)
        if code_result.is_failure:
            return failure(code_result.error)
        user_id = code_result.value.user_id

        used_result = self.codes.mark_used(code, self.clock())
        if used_result.is_failure:
            return failure(used_result.error)

        update_result = self.users.update_password(user_id, hash_password(password, self.bcrypt_rounds))
        if update_result.is_failure:
            return failure(update_result.error)

        user_result = self.users.get_by_id(user_id)
        if user_result.is_failure:
            return failure(user_result.error)
        user = user_result.value
        return success(UserInfoDTO(id=user.id, username=user.username, email=user.email))
