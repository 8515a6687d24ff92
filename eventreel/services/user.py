"""User service: registration, credential lookup and token issuance."""

import re
from dataclasses import dataclass

from eventreel.repositories.users import UserRepository
from eventreel.results import Result, failure, service_boundary, success
from eventreel.services.jwt import JWTService
from eventreel.services.passwords import hash_password, verify_password

EMAIL_PATTERN = re.compile(r"^[\w\-.]+@([\w-]+\.)+[\w-]{2,4}$")


@dataclass(frozen=True)
class UserDTO:
    """Credentials needed to check a login attempt."""

    id: str
    username: str
    email: str
    password_hash: str


def normalize(value: str) -> str:
    """Trim and lower-case a username, email or name."""
    return value.strip().lower()


def is_email(login: str) -> bool:
    return EMAIL_PATTERN.match(login) is not None


class UserService:
    """Handles user registration and authentication."""

    def __init__(self, users: UserRepository, jwt_service: JWTService, bcrypt_rounds: int = 12) -> None:
        self.users = users
        self.jwt_service = jwt_service
        self.bcrypt_rounds = bcrypt_rounds

    @service_boundary
    def is_username_email_in_use(self, username: str, email: str) -> Result[bool]:
        return self.users.is_user_exist(normalize(username), normalize(email))

    @service_boundary
    def add_new_user(self, username: str, email: str, password: str) -> Result[str]:
        """Insert a new user and return its id."""
        password_hash = hash_password(password, self.bcrypt_rounds)
        return self.users.insert_user(normalize(username), normalize(email), password_hash)

    @service_boundary
    def get_credentials(self, login: str) -> Result[UserDTO]:
        """Look up a user by email or username, depending on what the login looks like."""
        clean_login = normalize(login)
        if is_email(clean_login):
            result = self.users.get_by_email(clean_login)
        else:
            result = self.users.get_by_username(clean_login)
        if result.is_failure:
            return failure(result.error)

        user = result.value
        return success(UserDTO(id=user.id, username=user.username, email=user.email, password_hash=user.password_hash))

    def generate_jwt(self, user_id: str, username: str, email: str) -> str:
        return self.jwt_service.create_token(user_id=user_id, username=username, email=email)

    def compare_passwords(self, password: str, password_hash: str) -> bool:
        return verify_password(password, password_hash)
