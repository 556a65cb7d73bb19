"""Endpoints for signing in and managing passwords."""

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from fellowship.application.exceptions import (
    InvalidCredentialsError,
    InvalidOrExpiredOtpError,
    InvalidResetTokenError,
    RateLimitedError,
    ValidationError,
)
from fellowship.application.use_cases.users import (
    AuthenticationStatus,
    authenticate_user,
    change_password,
    request_password_reset,
    reset_password,
    verify_password_reset_otp,
)
from fellowship.config import get_settings
from fellowship.domain.entities import User
from fellowship.infrastructure.database import get_db
from fellowship.infrastructure.email import (
    send_password_reset_confirmation_email,
    send_password_reset_otp_email,
)
from fellowship.infrastructure.security import create_access_token
from fellowship.interfaces.api.dependencies import get_current_active_user
from fellowship.interfaces.api.schemas import (
    ActionResponse,
    ChangePasswordRequest,
    ErrorResponse,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    Token,
    VerifyOtpRequest,
    VerifyOtpResponse,
)

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)

_PASSWORD_RESET_MESSAGE = (
    "If the email is registered, you will receive a code to reset your password."
)


def _error_response(
    status_code: int,
    message: str,
    *,
    fields: list[str] | None = None,
    retry_after: int | None = None,
) -> JSONResponse:
    body = ErrorResponse(message=message, fields=fields, retry_after=retry_after)
    headers = {"Retry-After": str(retry_after)} if retry_after is not None else None
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers=headers,
    )


@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    """Authenticate by email and password and return a bearer token."""

    user, auth_status = authenticate_user(db, form_data.username, form_data.password)

    if auth_status is AuthenticationStatus.INVALID_CREDENTIALS:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if auth_status is AuthenticationStatus.INACTIVE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(
        data={"sub": user.email, "role": user.role},
        expires_delta=timedelta(minutes=get_settings().access_token_expire_minutes),
    )
    return {"access_token": access_token, "token_type": "bearer", "role": user.role}


@router.post("/forgot-password", response_model=ActionResponse)
def forgot_password(
    payload: ForgotPasswordRequest,
    db: Session = Depends(get_db),
):
    """Send a one-time reset code to the email when it belongs to an account.

    The response is the same whether or not the email is registered.
    """

    try:
        issued = request_password_reset(db, email=payload.email)
    except RateLimitedError as exc:
        return _error_response(
            status.HTTP_429_TOO_MANY_REQUESTS,
            str(exc),
            retry_after=exc.retry_after,
        )

    if issued is not None:
        user, otp = issued
        sent = send_password_reset_otp_email(
            user.email,
            user.name,
            otp,
            expires_in_minutes=get_settings().password_reset_otp_ttl_minutes,
        )
        if not sent:
            logger.warning("Could not send the password reset code to user %s", user.id)

    return ActionResponse(message=_PASSWORD_RESET_MESSAGE)


@router.post("/verify-otp", response_model=VerifyOtpResponse)
def verify_otp(
    payload: VerifyOtpRequest,
    db: Session = Depends(get_db),
):
    """Exchange a valid reset code for a short-lived reset token."""

    try:
        reset_token = verify_password_reset_otp(
            db, email=payload.email, otp=payload.otp.strip()
        )
    except InvalidOrExpiredOtpError as exc:
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))

    return VerifyOtpResponse(
        message="Code verified",
        reset_token=reset_token,
        expires_in=get_settings().password_reset_token_expire_minutes * 60,
    )


@router.post("/reset-password", response_model=ActionResponse)
def reset_password_with_token(
    payload: ResetPasswordRequest,
    db: Session = Depends(get_db),
):
    try:
        user = reset_password(
            db,
            reset_token=payload.reset_token,
            new_password=payload.password,
            email=payload.email,
        )
    except ValidationError as exc:
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc), fields=list(exc.fields))
    except InvalidResetTokenError as exc:
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))

    if not send_password_reset_confirmation_email(user.email, user.name):
        logger.warning("Could not send the password reset confirmation to user %s", user.id)

    return ActionResponse(message="Password has been reset")


@router.post("/change-password", response_model=ActionResponse)
def change_own_password(
    payload: ChangePasswordRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Replace the password of the signed-in user."""

    try:
        change_password(
            db,
            user_id=current_user.id,
            old_password=payload.old_password,
            new_password=payload.new_password,
        )
    except InvalidCredentialsError as exc:
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))
    except ValidationError as exc:
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc), fields=list(exc.fields))

    return ActionResponse(message="Password updated")
