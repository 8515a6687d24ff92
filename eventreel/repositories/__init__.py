"""Repositories: persistence access returning typed Results."""

from eventreel.repositories.events import EventEntity, EventInviteeDTO, EventRepository
from eventreel.repositories.invitees import InviteeDTO, InviteeRepository
from eventreel.repositories.password_reset import CodeEntity, PasswordResetRepository
from eventreel.repositories.uploads import CompiledUploadDTO, EventUploadDTO, UploadRepository
from eventreel.repositories.users import UserEntity, UserRepository

__all__ = [
    "CodeEntity",
    "CompiledUploadDTO",
    "EventEntity",
    "EventInviteeDTO",
    "EventRepository",
    "EventUploadDTO",
    "InviteeDTO",
    "InviteeRepository",
    "PasswordResetRepository",
    "UploadRepository",
    "UserEntity",
    "UserRepository",
]
