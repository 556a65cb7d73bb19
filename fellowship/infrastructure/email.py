"""Utility helpers for sending transactional email notifications via SendGrid."""

from __future__ import annotations

import json
import logging
from html import escape
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from fellowship.config import get_settings

logger = logging.getLogger(__name__)


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages: list[str] = []
            for item in errors:
                if not isinstance(item, dict):
                    continue
                message = item.get("message")
                field = item.get("field")
                if message and field:
                    messages.append(f"{message} (field: {field})")
                elif message:
                    messages.append(str(message))
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def _log_sendgrid_failure(source: Any, *, raised: bool) -> None:
    """Log a failed SendGrid call, whether it raised or returned an error status."""

    status_code = getattr(source, "status_code", None)
    details = _extract_sendgrid_error_details(getattr(source, "body", None))

    if status_code and details:
        logger.error("SendGrid API request failed with status %s: %s", status_code, details)
    elif status_code:
        logger.error("SendGrid API request failed with status %s", status_code)
    elif details:
        logger.error("SendGrid API request failed: %s", details)
    elif raised:
        logger.error("Error sending email via SendGrid: %s", source)
    else:
        logger.error("SendGrid API returned an unexpected response")


def send_email(subject: str, html_content: str, recipient: str) -> bool:
    """Send an email using the configured SendGrid credentials.

    Returns ``False`` instead of raising on every failure; callers treat
    email as best effort.
    """

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid configuration incomplete; skipping email delivery")
        return False

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        client = SendGridAPIClient(settings.sendgrid_api_key)
        response = client.send(message)
    except Exception as exc:  # network and HTTP errors are both reported this way
        _log_sendgrid_failure(exc, raised=True)
        return False

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        _log_sendgrid_failure(response, raised=False)
        return False

    return True


def send_password_reset_otp_email(
    email: str, name: str, otp: str, *, expires_in_minutes: int
) -> bool:
    """Send the one-time code used to start a password reset."""

    subject = "Your password reset code"
    html_content = "".join(
        (
            f"<p>Hi {escape(name)},</p>",
            "<p>Use the following code to reset your password:</p>",
            f"<p style=\"font-size:24px;letter-spacing:6px\"><strong>{otp}</strong></p>",
            f"<p>The code expires in {expires_in_minutes} minutes.</p>",
            "<p>If you did not request a password reset you can ignore this email.</p>",
        )
    )
    return send_email(subject, html_content, email)


def send_password_reset_confirmation_email(email: str, name: str) -> bool:
    """Tell the user their password was changed through the reset flow."""

    subject = "Password reset successful"
    html_content = "".join(
        (
            f"<p>Hi {escape(name)},</p>",
            "<p>Your password has been reset. You can now sign in with your new password.</p>",
            "<p>If you did not make this change, please contact the church office immediately.</p>",
        )
    )
    return send_email(subject, html_content, email)


__all__ = [
    "send_email",
    "send_password_reset_confirmation_email",
    "send_password_reset_otp_email",
]
