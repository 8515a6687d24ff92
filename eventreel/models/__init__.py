"""SQLAlchemy models. Importing this package registers every table with Base.metadata."""

from eventreel.models.event import CompiledUpload, Event, Invitee, Upload
from eventreel.models.password_reset import PasswordResetCode
from eventreel.models.user import User

__all__ = ["User", "Event", "Invitee", "Upload", "CompiledUpload", "PasswordResetCode"]
