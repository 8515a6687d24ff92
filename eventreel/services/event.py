"""Event service: events, invitees and video uploads.

Each event moves through open -> deadline passed -> finished without a stored
status; see ``event_state``. Capacity checks (invitees, uploads) read then
write without a surrounding transaction, so two concurrent requests for the
same event can both pass them. One-upload-per-invitee and one compiled upload
per event are additionally backed by unique constraints.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import BinaryIO

from eventreel.models.common import utcnow
from eventreel.repositories.events import EventEntity, EventRepository
from eventreel.repositories.invitees import InviteeDTO, InviteeRepository
from eventreel.repositories.uploads import CompiledUploadDTO, EventUploadDTO, UploadRepository
from eventreel.results import AppError, ErrorType, Result, failure, service_boundary, success
from eventreel.services.event_state import EventState, derive_event_state, is_deadline_passed
from eventreel.services.storage import ObjectStorage

logger = logging.getLogger(__name__)


def normalize_name(name: str) -> str:
    return name.strip().lower()


def millis_to_datetime(millis: int) -> datetime:
    """Epoch milliseconds to the stored naive-UTC timestamp, truncated to milliseconds."""
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc).replace(tzinfo=None)


def datetime_to_millis(value: datetime) -> int:
    return int(value.replace(tzinfo=timezone.utc).timestamp() * 1000)


class EventService:
    """Business rules for events, their invitees and uploads."""

    def __init__(
        self,
        events: EventRepository,
        invitees: InviteeRepository,
        uploads: UploadRepository,
        storage: ObjectStorage,
        invitees_bucket: str,
        compiled_bucket: str,
        max_invitees: int = 5,
        max_uploads: int = 5,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.events = events
        self.invitees = invitees
        self.uploads = uploads
        self.storage = storage
        self.invitees_bucket = invitees_bucket
        self.compiled_bucket = compiled_bucket
        self.max_invitees = max_invitees
        self.max_uploads = max_uploads
        self.clock = clock

    # --- Events ---

    @service_boundary
    def create_event(self, owner_id: str, name: str, deadline_millis: int) -> Result[str]:
        return self.events.insert_event(owner_id, normalize_name(name), millis_to_datetime(deadline_millis))

    @service_boundary
    def get_events_by_owner_id(self, owner_id: str) -> Result[list[EventEntity]]:
        result = self.events.get_events_by_owner_id(owner_id)
        if result.is_failure and result.is_kind(ErrorType.NOT_FOUND):
            return success([])
        return result

    @service_boundary
    def get_event_by_id(self, event_id: str) -> Result[EventEntity]:
        return self.events.get_event_by_id(event_id)

    @service_boundary
    def delete_event(self, event_id: str) -> Result[str]:
        return self.events.delete_event(event_id)

    @service_boundary
    def get_event_state(self, event_id: str) -> Result[EventState]:
        event_result = self.events.get_event_by_id(event_id)
        if event_result.is_failure:
            return failure(event_result.error)
        compiled_result = self.uploads.get_compiled_upload(event_id)
        if compiled_result.is_failure:
            return failure(compiled_result.error)
        return success(derive_event_state(event_result.value.deadline, len(compiled_result.value) != 0, self.clock()))

    @service_boundary
    def is_event_accessible(self, event_id: str, user_id: str) -> Result[bool]:
        """Gate for owner actions: the caller must own the event and its deadline must not have passed."""
        result = self.events.get_event_by_id(event_id)
        if result.is_failure:
            return failure(result.error)
        event = result.value

        if event.owner_id != user_id:
            return failure(AppError.business(f'User "{user_id}" is not owner of the event "{event_id}"'))
        if is_deadline_passed(event.deadline, self.clock()):
            return failure(AppError.business("The deadline for this event has passed"))
        return success(True)

    @service_boundary
    def is_event_invitee_valid(self, event_id: str, invitee_id: str) -> Result[bool]:
        """Gate for invitee uploads: the invitee must belong to an event whose deadline has not passed."""
        event_result = self.events.get_event_by_id(event_id)
        if event_result.is_failure:
            return failure(event_result.error)

        link_result = self.events.get_event_invitee(event_id, invitee_id)
        if link_result.is_failure:
            logger.error("No event-invitee association for event %s and invitee %s", event_id, invitee_id)
            return failure(link_result.error)

        if is_deadline_passed(link_result.value.event_deadline, self.clock()):
            return failure(AppError.business("The deadline for this event has passed"))
        return success(True)

    # --- Invitees ---

    @service_boundary
    def insert_invitees(self, event_id: str, names: list[str], owner_name: str) -> Result[list[InviteeDTO]]:
        existing_result = self.invitees.get_invitees_by_event_id(event_id)
        if existing_result.is_success:
            existing = existing_result.value
        elif existing_result.is_kind(ErrorType.NOT_FOUND):
            existing = []
        else:
            return failure(existing_result.error)

        if len(existing) + len(names) > self.max_invitees:
            return failure(AppError.business(f"The invitees list must contain {self.max_invitees} names at most"))

        clean_owner = normalize_name(owner_name)
        if any(normalize_name(name) == clean_owner for name in names):
            return failure(AppError.business("The owner name cannot be duplicated in the invitees list"))

        new_names = [name.strip() for name in names]
        if any(invitee.name.strip() in new_names for invitee in existing):
            return failure(AppError.business("The invitees cannot be duplicated"))

        return self.invitees.insert_invitees(event_id, new_names)

    @service_boundary
    def get_invitees_by_event_id(self, event_id: str) -> Result[list[InviteeDTO]]:
        result = self.invitees.get_invitees_by_event_id(event_id)
        if result.is_failure and result.is_kind(ErrorType.NOT_FOUND):
            return success([])
        return result

    @service_boundary
    def delete_invitee(self, event_id: str, invitee_id: str) -> Result[str]:
        return self.invitees.delete_invitee(event_id, invitee_id)

    # --- Uploads ---

    @service_boundary
    def get_event_uploads(self, event_id: str) -> Result[list[EventUploadDTO]]:
        result = self.uploads.get_event_uploads(event_id)
        if result.is_failure and result.is_kind(ErrorType.NOT_FOUND):
            return success([])
        return result

    @service_boundary
    def get_invitee_uploads(self, event_id: str, invitee_id: str) -> Result[list[EventUploadDTO]]:
        result = self.get_event_uploads(event_id)
        if result.is_failure:
            return result
        return success([upload for upload in result.value if upload.invitee_id == invitee_id])

    @service_boundary
    def get_compiled_upload(self, event_id: str) -> Result[list[CompiledUploadDTO]]:
        """Zero or one compiled upload. A non-empty list means the event is finished."""
        return self.uploads.get_compiled_upload(event_id)

    @service_boundary
    def upload_video(
        self, event_id: str, invitee_id: str, video: BinaryIO, content_type: str | None
    ) -> Result[str]:
        """Record and store an invitee's video.

        Callers check ``is_event_invitee_valid`` and that the event is not
        finished beforehand.
        """
        uploads_result = self.get_event_uploads(event_id)
        if uploads_result.is_failure:
            return failure(uploads_result.error)
        uploads = uploads_result.value

        if len(uploads) >= self.max_uploads:
            return failure(AppError.business("The event has reached the maximum number of uploads"))
        if any(upload.invitee_id == invitee_id for upload in uploads):
            return failure(AppError.business("You have already uploaded a video"))

        key = f"{invitee_id}-{datetime_to_millis(self.clock())}"
        insert_result = self.uploads.insert_invitee_upload(
            event_id, invitee_id, self.storage.object_url(self.invitees_bucket, key)
        )
        if insert_result.is_failure:
            return failure(insert_result.error)
        upload_id = insert_result.value

        status = self.storage.put_object(self.invitees_bucket, key, video, content_type)
        if status != 200:
            self._discard_upload(lambda: self.uploads.delete_upload(event_id, upload_id), upload_id)
            return failure(AppError.internal(f"Video was not saved: storage responded with status {status}"))

        logger.info("Invitee %s uploaded video %s to event %s", invitee_id, upload_id, event_id)
        return success(f"Video {upload_id} successfully uploaded")

    @service_boundary
    def upload_owner_video(
        self, event_id: str, owner_name: str, video: BinaryIO, content_type: str | None
    ) -> Result[str]:
        """Upload the owner's own video into an invitee slot named after the owner.

        The slot only lives as long as its upload: if the upload is rejected or
        storage fails, the slot is deleted again.
        """
        slot_result = self.insert_invitees(event_id, [owner_name], "")
        if slot_result.is_failure:
            return failure(slot_result.error)
        slot_id = slot_result.value[0].id

        upload_result = self.upload_video(event_id, slot_id, video, content_type)
        if upload_result.is_failure:
            delete_result = self.invitees.delete_invitee(event_id, slot_id)
            if delete_result.is_failure:
                logger.error("Could not remove owner slot %s: %s", slot_id, delete_result.error.message)
        return upload_result

    @service_boundary
    def upload_compiled_video(self, event_id: str, video: BinaryIO, content_type: str | None) -> Result[str]:
        """Record and store the compiled video. This finishes the event."""
        compiled_result = self.uploads.get_compiled_upload(event_id)
        if compiled_result.is_failure:
            return failure(compiled_result.error)
        if len(compiled_result.value) >= 1:
            return failure(AppError.business("The event has already a compiled video uploaded"))

        key = f"{event_id}-{datetime_to_millis(self.clock())}"
        insert_result = self.uploads.insert_compiled_upload(
            event_id, self.storage.object_url(self.compiled_bucket, key)
        )
        if insert_result.is_failure:
            return failure(insert_result.error)
        upload_id = insert_result.value

        status = self.storage.put_object(self.compiled_bucket, key, video, content_type)
        if status != 200:
            self._discard_upload(lambda: self.uploads.delete_compiled_upload(event_id, upload_id), upload_id)
            return failure(AppError.internal(f"Video was not saved: storage responded with status {status}"))

        logger.info("Compiled video %s uploaded to event %s", upload_id, event_id)
        return success(f"Video {upload_id} successfully uploaded")

    @service_boundary
    def delete_upload(self, event_id: str, upload_id: str) -> Result[str]:
        return self.uploads.delete_upload(event_id, upload_id)

    @service_boundary
    def delete_owner_upload(self, event_id: str, upload_id: str, owner_name: str) -> Result[str]:
        """Delete an upload as the owner.

        When the upload sits in the owner's own invitee slot, that slot is
        removed too so the owner can upload again.
        """
        uploads_result = self.get_event_uploads(event_id)
        if uploads_result.is_failure:
            return failure(uploads_result.error)
        owner_slot = next(
            (
                upload.invitee_id
                for upload in uploads_result.value
                if upload.upload_id == upload_id and upload.invitee_name == owner_name
            ),
            None,
        )

        delete_result = self.uploads.delete_upload(event_id, upload_id)
        if delete_result.is_failure:
            return failure(delete_result.error)

        if owner_slot is not None:
            invitee_result = self.invitees.delete_invitee(event_id, owner_slot)
            if invitee_result.is_failure:
                return failure(invitee_result.error)
        return delete_result

    def _discard_upload(self, delete: Callable[[], Result[str]], upload_id: str) -> None:
        """Remove an upload row whose file never reached storage."""
        result = delete()
        if result.is_failure:
            logger.error("Could not remove upload %s after storage failure: %s", upload_id, result.error.message)
        else:
            logger.warning("Removed upload %s after storage failure", upload_id)
