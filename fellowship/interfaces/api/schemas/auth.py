"""Authentication related schemas."""

from pydantic import BaseModel, EmailStr, Field

from .common import CamelModel


class Token(BaseModel):
    access_token: str
    token_type: str
    role: str


class ForgotPasswordRequest(CamelModel):
    email: EmailStr = Field(..., description="Registered email address of the user")


class VerifyOtpRequest(CamelModel):
    email: EmailStr
    otp: str = Field(..., pattern=r"^\s*\d{6}\s*$", description="6-digit code sent by email")


class VerifyOtpResponse(CamelModel):
    success: bool = True
    message: str
    reset_token: str
    expires_in: int = Field(..., description="Seconds until the reset token expires")


class ResetPasswordRequest(CamelModel):
    reset_token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)
    email: EmailStr | None = None


class ChangePasswordRequest(CamelModel):
    old_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)
