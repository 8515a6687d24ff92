"""User model."""

from sqlalchemy import Column, DateTime, String

from eventreel.database import Base
from eventreel.models.common import new_id, utcnow


class User(Base):
    """Registered account. Username and email are stored trimmed and lower-cased."""

    __tablename__ = "users"

    id = Column(String(16), primary_key=True, default=new_id)
    username = Column(String(32), unique=True, nullable=False, index=True)
    email = Column(String(256), unique=True, nullable=False, index=True)
    password_hash = Column(String(256), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
