"""Forgot/reset password API endpoints."""

from fastapi import APIRouter, Depends, Query, Request

from eventreel.dependencies import get_password_reset_service, get_user_service
from eventreel.rate_limit import limiter
from eventreel.schemas.auth import ForgotPasswordRequest, MessageResponse, ResetPasswordRequest, TokenResponse
from eventreel.services.password_reset import PasswordResetService
from eventreel.services.user import UserService

router = APIRouter(prefix="/api/v1", tags=["Password Reset"])

FORGOT_PASSWORD_MESSAGE = "If email exists, you will receive a code."


@router.post("/forgot-password", response_model=MessageResponse)
@limiter.limit("3/minute")
def forgot_password(
    request: Request,
    body: ForgotPasswordRequest,
    service: PasswordResetService = Depends(get_password_reset_service),
) -> MessageResponse:
    """Email a reset code. The response does not reveal whether the account exists."""
    if service.is_email_exist(body.email).unwrap():
        service.send_code(body.email).unwrap()
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.get("/reset-password", response_model=MessageResponse)
@limiter.limit("10/minute")
def check_reset_code(
    request: Request,
    code: str = Query(min_length=1),
    service: PasswordResetService = Depends(get_password_reset_service),
) -> MessageResponse:
    """Check a reset code before showing the new-password form."""
    service.is_code_valid(code).unwrap()
    return MessageResponse(message="Code is valid/ redirecting to reset password page")


@router.post("/reset-password", response_model=TokenResponse, status_code=201)
@limiter.limit("5/minute")
def reset_password(
    request: Request,
    body: ResetPasswordRequest,
    code: str = Query(min_length=1),
    service: PasswordResetService = Depends(get_password_reset_service),
    user_service: UserService = Depends(get_user_service),
) -> TokenResponse:
    """Consume a reset code, set the new password and log the user in."""
    user = service.reset_password(code, body.password).unwrap()
    return TokenResponse(token=user_service.generate_jwt(user.id, user.username, user.email))
