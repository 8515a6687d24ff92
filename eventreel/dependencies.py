"""FastAPI dependencies: authentication and service construction."""

from dataclasses import dataclass
from datetime import timedelta

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from eventreel.config import Settings, get_settings
from eventreel.database import get_db
from eventreel.repositories import (
    EventRepository,
    InviteeRepository,
    PasswordResetRepository,
    UploadRepository,
    UserRepository,
)
from eventreel.services.email import EmailClient
from eventreel.services.event import EventService
from eventreel.services.jwt import JWTService, get_jwt_service
from eventreel.services.password_reset import PasswordResetService
from eventreel.services.storage import ObjectStorage
from eventreel.services.user import UserService


@dataclass
class CurrentUser:
    """Authenticated user context, taken from the JWT claims."""

    user_id: str
    username: str
    email: str


def get_current_user(
    request: Request,
    jwt_service: JWTService = Depends(get_jwt_service),
) -> CurrentUser:
    """Extract and validate user from the Bearer token. Raises 401 if invalid."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated", headers={"WWW-Authenticate": "Bearer"})

    payload = jwt_service.decode_token(auth_header[7:])
    if not payload:
        raise HTTPException(
            status_code=401, detail="Invalid or expired token", headers={"WWW-Authenticate": "Bearer"}
        )

    return CurrentUser(user_id=payload["iss"], username=payload["username"], email=payload["email"])


def get_storage(request: Request) -> ObjectStorage:
    """Object storage client built at startup."""
    return request.app.state.storage


def get_email_client(request: Request) -> EmailClient:
    """Email client built at startup."""
    return request.app.state.email_client


def get_user_service(
    db: Session = Depends(get_db),
    jwt_service: JWTService = Depends(get_jwt_service),
    settings: Settings = Depends(get_settings),
) -> UserService:
    return UserService(UserRepository(db), jwt_service, bcrypt_rounds=settings.BCRYPT_ROUNDS)


def get_password_reset_service(
    db: Session = Depends(get_db),
    email_client: EmailClient = Depends(get_email_client),
    settings: Settings = Depends(get_settings),
) -> PasswordResetService:
    return PasswordResetService(
        UserRepository(db),
        PasswordResetRepository(db),
        email_client,
        template_id=settings.RESET_EMAIL_TEMPLATE_ID,
        code_length=settings.RESET_CODE_LENGTH,
        code_ttl=timedelta(minutes=settings.RESET_CODE_TTL_MINUTES),
        bcrypt_rounds=settings.BCRYPT_ROUNDS,
    )


def get_event_service(
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> EventService:
    return EventService(
        EventRepository(db),
        InviteeRepository(db),
        UploadRepository(db),
        storage,
        invitees_bucket=settings.INVITEES_BUCKET,
        compiled_bucket=settings.COMPILED_BUCKET,
        max_invitees=settings.MAX_INVITEES,
        max_uploads=settings.MAX_UPLOADS,
    )
