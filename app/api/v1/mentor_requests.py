import logging
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from app.core.deps import AdminUser, AuthenticatedUser, Database
from app.core.errors import log_store_error, raise_for_result
from app.schemas.mentor_request import (
    ActionResult,
    MentorDecision,
    MentorRequestCreate,
    MentorRequestListResponse,
    MentorRequestResponse,
    MentorRequestStatus,
)
from app.services import mentor_requests as service

log = logging.getLogger(__name__)

router = APIRouter(prefix="/mentor-requests", tags=["mentor-requests"])


def _list_response(rows: list[dict]) -> MentorRequestListResponse:
    requests = [MentorRequestResponse(**row) for row in rows]
    return MentorRequestListResponse(requests=requests, total=len(requests))


@router.post("", response_model=ActionResult, status_code=status.HTTP_201_CREATED)
async def submit_mentor_request(
    body: MentorRequestCreate,
    user: AuthenticatedUser,
    db: Database,
):
    """Ask to be connected with a mentor. The request waits for admin review."""
    user_result = (
        db.table("users")
        .select("name, email")
        .eq("id", str(user.id))
        .maybe_single()
        .execute()
    )
    user_data = (user_result.data if user_result else None) or {}
    user_name = user_data.get("name") or user.email.split("@")[0]

    result = service.submit_mentor_request(
        db, str(user.id), user.email, user_name, body
    )
    return raise_for_result(result)


@router.get("/me", response_model=MentorRequestListResponse)
async def get_my_mentor_requests(user: AuthenticatedUser, db: Database):
    """Requests sent by the current user, newest first."""
    try:
        result = (
            db.table(service.TABLE)
            .select("*")
            .eq("user_id", str(user.id))
            .order("created_at", desc=True)
            .execute()
        )
        return _list_response(result.data or [])
    except Exception as e:
        log_store_error(log, "Error fetching user mentor requests", service.TABLE, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )


# ==================================================================
# Admin gate
# ==================================================================


@router.get("", response_model=MentorRequestListResponse)
async def get_admin_mentor_requests(
    admin: AdminUser,
    db: Database,
    status_filter: MentorRequestStatus | None = Query(None, alias="status"),
):
    """All mentor requests for admin review, newest first."""
    try:
        query = db.table(service.TABLE).select("*")
        if status_filter:
            query = query.eq("status", status_filter.value)

        result = query.order("created_at", desc=True).execute()
        return _list_response(result.data or [])
    except Exception as e:
        log_store_error(log, "Error fetching mentor requests", service.TABLE, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )


@router.post("/{request_id}/admin-decision", response_model=ActionResult)
async def decide_as_admin(
    request_id: UUID,
    body: MentorDecision,
    admin: AdminUser,
    db: Database,
):
    """Approve (forward to the mentor) or reject a pending request."""
    result = service.process_admin_decision(db, str(admin.id), str(request_id), body)
    return raise_for_result(result)
