"""Event, invitee and upload models."""

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint

from eventreel.database import Base
from eventreel.models.common import new_id, utcnow


class Event(Base):
    """Event owned by a user, open for uploads until its deadline."""

    __tablename__ = "events"

    id = Column(String(16), primary_key=True, default=new_id)
    owner_id = Column(String(16), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(64), nullable=False)
    deadline = Column(DateTime, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class Invitee(Base):
    """Named participant of an event."""

    __tablename__ = "invitees"
    __table_args__ = (UniqueConstraint("event_id", "name", name="uq_invitees_event_name"),)

    id = Column(String(16), primary_key=True, default=new_id)
    event_id = Column(String(16), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(60), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class Upload(Base):
    """Video uploaded by an invitee. One per invitee."""

    __tablename__ = "invitee_uploads"
    __table_args__ = (UniqueConstraint("event_id", "invitee_id", name="uq_invitee_uploads_event_invitee"),)

    id = Column(String(16), primary_key=True, default=new_id)
    event_id = Column(String(16), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    invitee_id = Column(String(16), ForeignKey("invitees.id", ondelete="CASCADE"), nullable=False, index=True)
    file_path = Column(String(1024), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class CompiledUpload(Base):
    """Final video of an event. Its presence marks the event as finished."""

    __tablename__ = "compiled_uploads"

    id = Column(String(16), primary_key=True, default=new_id)
    event_id = Column(String(16), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, unique=True)
    file_path = Column(String(1024), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
