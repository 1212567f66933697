import logging

from fastapi import HTTPException, status
from postgrest.exceptions import APIError

from app.schemas.mentor_request import ActionOutcome, ActionResult

# PostgREST / Postgres error codes that deserve an extra hint in the logs.
PERMISSION_DENIED = "42501"
UNDEFINED_TABLE = "42P01"
UNIQUE_VIOLATION = "23505"


def error_code(exc: Exception) -> str | None:
    if isinstance(exc, APIError):
        return exc.code
    return None


def log_store_error(log: logging.Logger, context: str, table: str, exc: Exception) -> None:
    log.error("%s: %s", context, exc)

    code = error_code(exc)
    if code == PERMISSION_DENIED:
        log.error("Permission denied: check row level security policies for %s", table)
    elif code == UNDEFINED_TABLE:
        log.error("Table %s might not exist; apply supabase/schema.sql", table)


_OUTCOME_STATUS = {
    ActionOutcome.INVALID: status.HTTP_400_BAD_REQUEST,
    ActionOutcome.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ActionOutcome.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ActionOutcome.CONFLICT: status.HTTP_409_CONFLICT,
    ActionOutcome.ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def raise_for_result(result: ActionResult) -> ActionResult:
    """Turn a failed workflow result into the matching HTTP error."""
    if result.success:
        return result
    raise HTTPException(
        status_code=_OUTCOME_STATUS.get(result.outcome, status.HTTP_400_BAD_REQUEST),
        detail=result.message,
    )
