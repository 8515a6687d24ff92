"""Authentication API endpoints."""

import logging

from fastapi import APIRouter, Depends, Request, Response

from eventreel.dependencies import CurrentUser, get_current_user, get_user_service
from eventreel.rate_limit import limiter
from eventreel.results import AppError
from eventreel.schemas.auth import LoginRequest, SignUpRequest, TokenResponse
from eventreel.services.user import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


@router.post("/signup", response_model=TokenResponse, status_code=201)
@limiter.limit("5/minute")
def signup(
    request: Request,
    body: SignUpRequest,
    service: UserService = Depends(get_user_service),
) -> TokenResponse:
    """Register a new account and return a JWT."""
    in_use = service.is_username_email_in_use(body.username, body.email).unwrap()
    if in_use:
        raise AppError.conflict("The username or email is already in use")

    user_id = service.add_new_user(body.username, body.email, body.password).unwrap()
    logger.info("Registered user %s", user_id)
    token = service.generate_jwt(user_id, body.username.strip().lower(), body.email.strip().lower())
    return TokenResponse(token=token)


@router.post("/login", response_model=TokenResponse)
@limiter.limit("10/minute")
def login(
    request: Request,
    body: LoginRequest,
    service: UserService = Depends(get_user_service),
) -> TokenResponse:
    """Authenticate with username or email and receive a JWT."""
    user = service.get_credentials(body.login).unwrap()
    if not service.compare_passwords(body.password, user.password_hash):
        raise AppError.bad_request("Invalid login or password")
    return TokenResponse(token=service.generate_jwt(user.id, user.username, user.email))


@router.get("/me")
def me(user: CurrentUser = Depends(get_current_user)) -> dict:
    """Return the identity carried by the token."""
    return {"iss": user.user_id, "username": user.username, "email": user.email}


@router.post("/logout", status_code=204)
def logout(user: CurrentUser = Depends(get_current_user)) -> Response:
    """Tokens are stateless; the client discards its copy."""
    return Response(status_code=204)
