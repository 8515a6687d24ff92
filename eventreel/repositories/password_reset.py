"""Password reset code repository."""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select, update

from eventreel.models.password_reset import PasswordResetCode
from eventreel.repositories.base import Repository, db_errors
from eventreel.results import AppError, Result, failure, success


@dataclass(frozen=True)
class CodeEntity:
    id: str
    user_id: str
    code: str
    used_at: datetime | None
    created_at: datetime


class PasswordResetRepository(Repository):
    @db_errors
    def insert_code(self, user_id: str, code: str, created_at: datetime) -> Result[str]:
        row = PasswordResetCode(user_id=user_id, code=code, created_at=created_at)
        self.db.add(row)
        self.db.commit()
        return success(code)

    @db_errors
    def get_code(self, code: str) -> Result[CodeEntity]:
        """Return the newest row issued with this code."""
        row = self.db.scalar(
            select(PasswordResetCode)
            .where(PasswordResetCode.code == code)
            .order_by(PasswordResetCode.created_at.desc())
            .limit(1)
        )
        if row is None:
            return failure(AppError.not_found("Code not found"))
        return success(
            CodeEntity(id=row.id, user_id=row.user_id, code=row.code, used_at=row.used_at, created_at=row.created_at)
        )

    @db_errors
    def mark_used(self, code: str, used_at: datetime) -> Result[str]:
        result = self.db.execute(
            update(PasswordResetCode).where(PasswordResetCode.code == code).values(used_at=used_at)
        )
        if result.rowcount == 0:
            self.db.rollback()
            return failure(AppError.not_found("Code not found"))
        self.db.commit()
        return success(code)
