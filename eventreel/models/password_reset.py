"""Password reset code model."""

from sqlalchemy import Column, DateTime, ForeignKey, String

from eventreel.database import Base
from eventreel.models.common import new_id, utcnow


class PasswordResetCode(Base):
    """One-time code emailed to a user. Consumed by setting used_at."""

    __tablename__ = "password_reset_codes"

    id = Column(String(16), primary_key=True, default=new_id)
    user_id = Column(String(16), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    code = Column(String(16), nullable=False, index=True)
    used_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
