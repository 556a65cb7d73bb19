"""Security helpers for hashing and token generation."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from hashlib import sha256
import secrets

from jose import JWTError, jwt
from passlib.context import CryptContext

from fellowship.config import get_settings

ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"
PASSWORD_RESET_PURPOSE = "password-reset"

# ---- Password hashing (passlib) ----
pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
    pbkdf2_sha256__rounds=310_000,
)

# OTPs live for minutes only, so a lighter salted hash is enough.
otp_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
    pbkdf2_sha256__rounds=29_000,
)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def generate_otp() -> str:
    """Return a random 6-digit numeric code."""

    return f"{secrets.randbelow(1_000_000):06d}"


def hash_otp(code: str) -> str:
    return otp_context.hash(code)


def verify_otp_hash(code: str, otp_hash: str | None) -> bool:
    if not otp_hash:
        return False
    return otp_context.verify(code.strip(), otp_hash)


def otp_fingerprint(otp_hash: str) -> str:
    """Return a short digest identifying one pending OTP hash."""

    return sha256(otp_hash.encode()).hexdigest()[:32]


# ---- JWT ----


def _encode(claims: dict, expire: datetime) -> str:
    settings = get_settings()
    return jwt.encode({**claims, "exp": expire}, settings.secret_key, algorithm=ALGORITHM)


def _decode(token: str) -> dict:
    settings = get_settings()
    return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return _encode({**data, "type": ACCESS_TOKEN_TYPE}, expire)


def decode_access_token(token: str) -> dict:
    try:
        payload = _decode(token)
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise ValueError("Could not validate credentials")
    return payload


def create_reset_token(
    *,
    user_id: int,
    otp_hash: str,
    issued_at: datetime | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Issue a credential that only authorizes a password reset for ``user_id``.

    The credential embeds a fingerprint of the OTP hash it was issued for.
    Clearing or replacing that hash invalidates the credential.
    """

    settings = get_settings()
    issued = issued_at or datetime.now(timezone.utc)
    expire = issued + (
        expires_delta or timedelta(minutes=settings.password_reset_token_expire_minutes)
    )
    claims = {
        "sub": str(user_id),
        "purpose": PASSWORD_RESET_PURPOSE,
        "fp": otp_fingerprint(otp_hash),
        "iat": int(issued.timestamp()),
    }
    return _encode(claims, expire)


def decode_reset_token(token: str) -> dict:
    """Validate signature, expiry and purpose of a reset credential."""

    try:
        payload = _decode(token)
    except JWTError as exc:
        raise ValueError("Invalid or expired reset token") from exc
    if payload.get("purpose") != PASSWORD_RESET_PURPOSE:
        raise ValueError("Invalid or expired reset token")
    if not payload.get("sub") or not payload.get("fp"):
        raise ValueError("Invalid or expired reset token")
    return payload
