"""Single-use tokens embedded in mentor decision emails."""

import logging
import secrets
from datetime import datetime, timedelta, timezone

from supabase import Client

from app.core.config import settings
from app.schemas.email_token import EmailToken, TokenVerification
from app.schemas.mentor_request import DecisionAction

log = logging.getLogger(__name__)

TABLE = "email_tokens"


def generate_secure_token() -> str:
    return secrets.token_hex(32)


def create_email_token(
    db: Client,
    request_id: str,
    mentor_email: str,
    action: DecisionAction | None = None,
) -> str:
    token_id = generate_secure_token()
    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(days=settings.EMAIL_TOKEN_TTL_DAYS)

    db.table(TABLE).insert(
        {
            "id": token_id,
            "request_id": request_id,
            "mentor_email": mentor_email,
            "action": action.value if action else None,
            "created_at": now.isoformat(),
            "expires_at": expires_at.isoformat(),
            "used": False,
        }
    ).execute()

    return token_id


def get_email_token(db: Client, token_id: str) -> EmailToken | None:
    result = db.table(TABLE).select("*").eq("id", token_id).maybe_single().execute()
    row = result.data if result else None
    return EmailToken(**row) if row else None


def verify_email_token(db: Client, token_id: str) -> TokenVerification:
    """Check that a token exists, has not expired and has not been used.

    Expired tokens are deleted on sight.
    """
    try:
        token = get_email_token(db, token_id)
        if token is None:
            return TokenVerification(valid=False, error="Invalid token")

        if datetime.now(timezone.utc) > token.expires_at:
            db.table(TABLE).delete().eq("id", token_id).execute()
            return TokenVerification(valid=False, error="Token has expired")

        if token.used:
            return TokenVerification(valid=False, error="Token has already been used")

        return TokenVerification(valid=True, token=token)
    except Exception as e:
        log.error("Error verifying email token: %s", e)
        return TokenVerification(valid=False, error="Failed to verify token")


def mark_token_as_used(db: Client, token_id: str) -> None:
    db.table(TABLE).update({"used": True}).eq("id", token_id).execute()


def cleanup_expired_tokens(db: Client) -> int:
    now = datetime.now(timezone.utc).isoformat()
    result = db.table(TABLE).delete().lt("expires_at", now).execute()
    count = len(result.data or [])
    log.info("Cleaned up %d expired email tokens", count)
    return count
