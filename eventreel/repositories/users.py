"""User repository."""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, or_, select, update

from eventreel.models.user import User
from eventreel.repositories.base import Repository, db_errors
from eventreel.results import AppError, Result, failure, success


@dataclass(frozen=True)
class UserEntity:
    id: str
    username: str
    email: str
    password_hash: str
    created_at: datetime

    @classmethod
    def from_row(cls, user: User) -> "UserEntity":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            password_hash=user.password_hash,
            created_at=user.created_at,
        )


class UserRepository(Repository):
    """Users table access. Inputs arrive already trimmed and lower-cased."""

    @db_errors
    def is_user_exist(self, username: str, email: str) -> Result[bool]:
        count = self.db.scalar(
            select(func.count(User.id)).where(or_(User.username == username, User.email == email))
        )
        return success(bool(count))

    @db_errors
    def is_user_exist_by_email(self, email: str) -> Result[bool]:
        count = self.db.scalar(select(func.count(User.id)).where(User.email == email))
        return success(bool(count))

    @db_errors
    def insert_user(self, username: str, email: str, password_hash: str) -> Result[str]:
        user = User(username=username, email=email, password_hash=password_hash)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return success(user.id)

    @db_errors
    def get_by_username(self, username: str) -> Result[UserEntity]:
        user = self.db.scalar(select(User).where(User.username == username).limit(1))
        if user is None:
            return failure(AppError.not_found(f"account was not found: {username}"))
        return success(UserEntity.from_row(user))

    @db_errors
    def get_by_email(self, email: str) -> Result[UserEntity]:
        user = self.db.scalar(select(User).where(User.email == email).limit(1))
        if user is None:
            return failure(AppError.not_found(f"account was not found: {email}"))
        return success(UserEntity.from_row(user))

    @db_errors
    def get_by_id(self, user_id: str) -> Result[UserEntity]:
        user = self.db.get(User, user_id)
        if user is None:
            return failure(AppError.not_found(f"account was not found: {user_id}"))
        return success(UserEntity.from_row(user))

    @db_errors
    def update_password(self, user_id: str, password_hash: str) -> Result[str]:
        result = self.db.execute(update(User).where(User.id == user_id).values(password_hash=password_hash))
        if result.rowcount == 0:
            self.db.rollback()
            return failure(AppError.not_found(f"account was not found: {user_id}"))
        self.db.commit()
        return success(user_id)
