import logging
from dataclasses import dataclass

import resend
from resend.exceptions import ResendError

from app.core.config import settings

log = logging.getLogger(__name__)


@dataclass
class EmailResult:
    success: bool
    message: str
    error: str | None = None


def send_email(
    to: str, subject: str, body: str, html_body: str | None = None
) -> EmailResult:
    """Send a transactional email through Resend.

    Never raises. Without an API key the message is logged instead of sent
    and the result reports failure so callers can surface it.
    """
    if not settings.RESEND_API_KEY:
        log.warning("RESEND_API_KEY not set, simulating email to %s", to)
        log.info("Subject: %s\n%s", subject, body)
        return EmailResult(
            success=False,
            message="Email sending disabled: RESEND_API_KEY not found.",
            error="RESEND_API_KEY_MISSING",
        )

    resend.api_key = settings.RESEND_API_KEY

    params: resend.Emails.SendParams = {
        "from": settings.RESEND_FROM_EMAIL,
        "to": [to],
        "subject": subject,
        "text": body,
    }
    if html_body:
        params["html"] = html_body

    try:
        response = resend.Emails.send(params)
    except ResendError as e:
        log.error("Resend API error sending to %s: %s", to, e)
        return EmailResult(
            success=False,
            message=f"Failed to send email via Resend: {e}",
            error=str(e),
        )
    except Exception as e:
        log.exception("Unexpected error sending email to %s", to)
        return EmailResult(
            success=False,
            message=f"Exception during email sending: {e}",
            error=str(e),
        )

    log.info("Email sent to %s via Resend, id=%s", to, response.get("id"))
    return EmailResult(success=True, message=f"Email sent successfully to {to} via Resend.")


def with_email_outcome(message: str, email: EmailResult) -> str:
    """Append the delivery failure, if any, to a user-facing result message."""
    if email.success:
        return message
    return f"{message} (email not sent: {email.message})"
