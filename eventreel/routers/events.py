"""Event API endpoints."""

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse

from eventreel.config import Settings, get_settings
from eventreel.dependencies import CurrentUser, get_current_user, get_event_service
from eventreel.results import AppError
from eventreel.schemas.auth import MessageResponse
from eventreel.schemas.event import (
    AddInviteesRequest,
    CompiledUploadResponse,
    CreateEventRequest,
    CreateEventResponse,
    EventResponse,
    EventUploadResponse,
    InviteeResponse,
    validate_video_metadata,
)
from eventreel.services.event import EventService
from eventreel.services.event_state import EventState

router = APIRouter(prefix="/api/v1/events", tags=["Events"])

EVENT_FINISHED_MESSAGE = "The event has already been finished"


def _check_video(video: UploadFile, settings: Settings) -> None:
    error = validate_video_metadata(
        video.filename or "", video.content_type, video.size, settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024
    )
    if error:
        raise AppError.validation(error)


def _forbidden(message: str) -> JSONResponse:
    return JSONResponse(status_code=403, content={"message": message})


@router.post("", response_model=CreateEventResponse, status_code=201)
def create_event(
    body: CreateEventRequest,
    user: CurrentUser = Depends(get_current_user),
    service: EventService = Depends(get_event_service),
) -> CreateEventResponse:
    """Create an event owned by the caller."""
    event_id = service.create_event(user.user_id, body.name, body.deadline).unwrap()
    return CreateEventResponse(event_id=event_id)


@router.get("", response_model=list[EventResponse])
def list_events(
    user: CurrentUser = Depends(get_current_user),
    service: EventService = Depends(get_event_service),
) -> list[EventResponse]:
    """List the caller's events."""
    events = service.get_events_by_owner_id(user.user_id).unwrap()
    return [EventResponse.model_validate(e) for e in events]


@router.get("/{event_id}", response_model=EventResponse)
def get_event(
    event_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: EventService = Depends(get_event_service),
) -> EventResponse:
    """Get a single event."""
    return EventResponse.model_validate(service.get_event_by_id(event_id).unwrap())


@router.delete("/{event_id}", response_model=MessageResponse)
def delete_event(
    event_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: EventService = Depends(get_event_service),
) -> MessageResponse:
    """Delete an event before its deadline."""
    service.is_event_accessible(event_id, user.user_id).unwrap()
    deleted_id = service.delete_event(event_id).unwrap()
    return MessageResponse(message=f"event {deleted_id} was deleted")


@router.post("/{event_id}/invitees", response_model=list[InviteeResponse], status_code=201)
def add_invitees(
    event_id: str,
    body: AddInviteesRequest,
    user: CurrentUser = Depends(get_current_user),
    service: EventService = Depends(get_event_service),
) -> list[InviteeResponse]:
    """Invite named participants."""
    service.is_event_accessible(event_id, user.user_id).unwrap()
    invitees = service.insert_invitees(event_id, body.names, user.username).unwrap()
    return [InviteeResponse.model_validate(i) for i in invitees]


@router.get("/{event_id}/invitees", response_model=list[InviteeResponse])
def list_invitees(
    event_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: EventService = Depends(get_event_service),
) -> list[InviteeResponse]:
    """List an event's invitees."""
    service.get_event_by_id(event_id).unwrap()
    invitees = service.get_invitees_by_event_id(event_id).unwrap()
    return [InviteeResponse.model_validate(i) for i in invitees]


@router.delete("/{event_id}/invitees/{invitee_id}", response_model=MessageResponse)
def delete_invitee(
    event_id: str,
    invitee_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: EventService = Depends(get_event_service),
) -> MessageResponse:
    """Remove an invitee (and their upload)."""
    service.is_event_accessible(event_id, user.user_id).unwrap()
    service.is_event_invitee_valid(event_id, invitee_id).unwrap()
    deleted_id = service.delete_invitee(event_id, invitee_id).unwrap()
    return MessageResponse(message=f"invitee {deleted_id} was deleted")


@router.post("/{event_id}/invitees/{invitee_id}/upload", response_model=MessageResponse, status_code=201)
def invitee_upload(
    event_id: str,
    invitee_id: str,
    video: UploadFile = File(...),
    service: EventService = Depends(get_event_service),
    settings: Settings = Depends(get_settings),
):
    """Upload an invitee's video. Invitees are not authenticated; the invitee id is the credential."""
    _check_video(video, settings)
    service.is_event_invitee_valid(event_id, invitee_id).unwrap()

    if service.get_invitee_uploads(event_id, invitee_id).unwrap():
        return _forbidden("You have already uploaded a video")
    if service.get_event_state(event_id).unwrap() == EventState.FINISHED:
        return _forbidden(EVENT_FINISHED_MESSAGE)

    message = service.upload_video(event_id, invitee_id, video.file, video.content_type).unwrap()
    return MessageResponse(message=message)


@router.post("/{event_id}/upload", response_model=MessageResponse, status_code=201)
def owner_upload(
    event_id: str,
    video: UploadFile = File(...),
    user: CurrentUser = Depends(get_current_user),
    service: EventService = Depends(get_event_service),
    settings: Settings = Depends(get_settings),
):
    """Upload the owner's own video. The owner takes an invitee slot named after their username."""
    _check_video(video, settings)
    service.is_event_accessible(event_id, user.user_id).unwrap()
    if service.get_event_state(event_id).unwrap() == EventState.FINISHED:
        return _forbidden(EVENT_FINISHED_MESSAGE)

    message = service.upload_owner_video(event_id, user.username, video.file, video.content_type).unwrap()
    return MessageResponse(message=message)


@router.post("/{event_id}/compiled/upload", response_model=MessageResponse, status_code=201)
def compiled_upload(
    event_id: str,
    video: UploadFile = File(...),
    user: CurrentUser = Depends(get_current_user),
    service: EventService = Depends(get_event_service),
    settings: Settings = Depends(get_settings),
):
    """Upload the compiled video, finishing the event."""
    _check_video(video, settings)
    event = service.get_event_by_id(event_id).unwrap()
    if event.owner_id != user.user_id:
        return _forbidden(f'User "{user.user_id}" is not owner of the event "{event_id}"')

    message = service.upload_compiled_video(event_id, video.file, video.content_type).unwrap()
    return MessageResponse(message=message)


@router.get("/{event_id}/compiled/upload", response_model=list[CompiledUploadResponse])
def get_compiled_upload(
    event_id: str,
    service: EventService = Depends(get_event_service),
) -> list[CompiledUploadResponse]:
    """Public: the compiled video, if any, as a list of zero or one."""
    service.get_event_by_id(event_id).unwrap()
    uploads = service.get_compiled_upload(event_id).unwrap()
    return [CompiledUploadResponse.model_validate(u) for u in uploads]


@router.get("/{event_id}/uploads", response_model=list[EventUploadResponse])
def list_uploads(
    event_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: EventService = Depends(get_event_service),
) -> list[EventUploadResponse]:
    """List every invitee upload of an event."""
    service.get_event_by_id(event_id).unwrap()
    uploads = service.get_event_uploads(event_id).unwrap()
    return [EventUploadResponse.model_validate(u) for u in uploads]


@router.get("/{event_id}/invitees/{invitee_id}/uploads", response_model=list[EventUploadResponse])
def list_invitee_uploads(
    event_id: str,
    invitee_id: str,
    service: EventService = Depends(get_event_service),
) -> list[EventUploadResponse]:
    """List the uploads of one invitee."""
    service.get_event_by_id(event_id).unwrap()
    uploads = service.get_invitee_uploads(event_id, invitee_id).unwrap()
    return [EventUploadResponse.model_validate(u) for u in uploads]


@router.delete("/{event_id}/uploads/{upload_id}", response_model=MessageResponse)
def delete_upload(
    event_id: str,
    upload_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: EventService = Depends(get_event_service),
) -> MessageResponse:
    """Delete an upload before the deadline."""
    service.is_event_accessible(event_id, user.user_id).unwrap()
    deleted_id = service.delete_owner_upload(event_id, upload_id, user.username).unwrap()
    return MessageResponse(message=f"upload {deleted_id} was deleted")
