import hmac
import logging
from typing import Annotated

from fastapi import APIRouter, Header, HTTPException, status

from app.core.config import settings
from app.core.deps import Database
from app.schemas.email_token import CleanupResponse
from app.services import email_tokens

log = logging.getLogger(__name__)

router = APIRouter(prefix="/maintenance", tags=["maintenance"])


def _check_cleanup_key(authorization: str | None) -> None:
    expected = f"Bearer {settings.CLEANUP_API_KEY}" if settings.CLEANUP_API_KEY else None
    if not expected or not authorization or not hmac.compare_digest(authorization, expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


@router.post("/cleanup-tokens", response_model=CleanupResponse)
async def cleanup_tokens(
    db: Database,
    authorization: Annotated[str | None, Header()] = None,
):
    """Delete expired email tokens. Meant for a scheduled job."""
    _check_cleanup_key(authorization)

    try:
        count = email_tokens.cleanup_expired_tokens(db)
    except Exception as e:
        log.error("Token cleanup error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Cleanup failed: {e}",
        )

    if not count:
        return CleanupResponse(message="No expired tokens to clean up", count=0)
    return CleanupResponse(
        message=f"Successfully cleaned up {count} expired tokens", count=count
    )
