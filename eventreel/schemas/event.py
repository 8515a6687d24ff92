"""Pydantic schemas for event endpoints."""

import calendar
from datetime import datetime, timedelta, timezone
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MIN_DEADLINE_AHEAD = timedelta(hours=12)
ALLOWED_VIDEO_EXTENSIONS = {".mp4"}


def add_one_month(moment: datetime) -> datetime:
    """Same day next month, clamped to the month's last day."""
    year, month = (moment.year + 1, 1) if moment.month == 12 else (moment.year, moment.month + 1)
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


class CreateEventRequest(BaseModel):
    name: str = Field(min_length=2, max_length=64)
    deadline: int = Field(description="Deadline as epoch milliseconds")

    @field_validator("deadline")
    @classmethod
    def deadline_in_window(cls, value: int) -> int:
        now = datetime.now(timezone.utc)
        if value < (now + MIN_DEADLINE_AHEAD).timestamp() * 1000:
            raise ValueError("Deadline must be at least 12 hours from now")
        if value > add_one_month(now).timestamp() * 1000:
            raise ValueError("Deadline must be earlier than next month")
        return value


class AddInviteesRequest(BaseModel):
    names: list[str] = Field(min_length=1, max_length=4)

    @field_validator("names")
    @classmethod
    def names_valid(cls, names: list[str]) -> list[str]:
        if any(not 2 <= len(name) <= 60 for name in names):
            raise ValueError("Each invitee name must be between 2 and 60 characters")
        if len({name.strip() for name in names}) != len(names):
            raise ValueError("All invitee names must be unique")
        return names


class CamelModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class EventResponse(CamelModel):
    id: str
    owner_id: str
    name: str
    created_at: datetime
    deadline: datetime


class CreateEventResponse(BaseModel):
    event_id: str


class InviteeResponse(CamelModel):
    id: str
    name: str
    created_at: datetime


class EventUploadResponse(CamelModel):
    invitee_id: str
    upload_id: str
    invitee_name: str
    invite_sent_at: datetime
    upload_path: str
    uploaded_at: datetime


class CompiledUploadResponse(CamelModel):
    upload_id: str
    upload_path: str
    uploaded_at: datetime


def validate_video_metadata(filename: str, content_type: str | None, size: int | None, max_bytes: int) -> str | None:
    """Validate an uploaded video (MIME or extension, size). Returns error message or None if valid."""
    if content_type:
        if not content_type.startswith("video/"):
            return "Only videos are allowed"
    elif Path(filename).suffix.lower() not in ALLOWED_VIDEO_EXTENSIONS:
        return "Only videos are allowed"

    if size is not None and size >= max_bytes:
        return f"The file size must be less than {max_bytes // (1024 * 1024)}MB"
    return None
