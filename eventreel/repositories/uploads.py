"""Invitee upload and compiled upload repository."""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import delete, select

from eventreel.models.event import CompiledUpload, Invitee, Upload
from eventreel.repositories.base import Repository, db_errors
from eventreel.results import AppError, Result, failure, success


@dataclass(frozen=True)
class EventUploadDTO:
    """An invitee upload joined with its invitee."""

    invitee_id: str
    upload_id: str
    invitee_name: str
    invite_sent_at: datetime
    upload_path: str
    uploaded_at: datetime


@dataclass(frozen=True)
class CompiledUploadDTO:
    upload_id: str
    upload_path: str
    uploaded_at: datetime


class UploadRepository(Repository):
    @db_errors
    def insert_invitee_upload(self, event_id: str, invitee_id: str, file_path: str) -> Result[str]:
        upload = Upload(event_id=event_id, invitee_id=invitee_id, file_path=file_path)
        self.db.add(upload)
        self.db.commit()
        self.db.refresh(upload)
        return success(upload.id)

    @db_errors
    def get_event_uploads(self, event_id: str) -> Result[list[EventUploadDTO]]:
        rows = self.db.execute(
            select(Invitee.id, Upload.id, Invitee.name, Invitee.created_at, Upload.file_path, Upload.created_at)
            .join(Upload, Upload.invitee_id == Invitee.id)
            .where(Invitee.event_id == event_id)
            .order_by(Upload.created_at)
        ).all()
        if not rows:
            return failure(AppError.not_found("uploads for specified event not found"))
        return success([EventUploadDTO(*row) for row in rows])

    @db_errors
    def delete_upload(self, event_id: str, upload_id: str) -> Result[str]:
        result = self.db.execute(delete(Upload).where(Upload.event_id == event_id, Upload.id == upload_id))
        if result.rowcount == 0:
            self.db.rollback()
            return failure(AppError.not_found("No upload found with specified ID for the event"))
        self.db.commit()
        return success(upload_id)

    @db_errors
    def insert_compiled_upload(self, event_id: str, file_path: str) -> Result[str]:
        upload = CompiledUpload(event_id=event_id, file_path=file_path)
        self.db.add(upload)
        self.db.commit()
        self.db.refresh(upload)
        return success(upload.id)

    @db_errors
    def get_compiled_upload(self, event_id: str) -> Result[list[CompiledUploadDTO]]:
        """Zero or one compiled upload, as a list. Absence is not an error here."""
        row = self.db.scalar(select(CompiledUpload).where(CompiledUpload.event_id == event_id).limit(1))
        if row is None:
            return success([])
        return success([CompiledUploadDTO(upload_id=row.id, upload_path=row.file_path, uploaded_at=row.created_at)])

    @db_errors
    def delete_compiled_upload(self, event_id: str, upload_id: str) -> Result[str]:
        result = self.db.execute(
            delete(CompiledUpload).where(CompiledUpload.event_id == event_id, CompiledUpload.id == upload_id)
        )
        if result.rowcount == 0:
            self.db.rollback()
            return failure(AppError.not_found("No compiled upload found with specified ID for the event"))
        self.db.commit()
        return success(upload_id)
