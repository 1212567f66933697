import logging
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from app.core.deps import Database, MentorUser
from app.core.errors import log_store_error, raise_for_result
from app.core import workflow
from app.schemas.mentor_request import (
    ActionResult,
    MentorDecision,
    MentorRequestDetailResponse,
    MentorRequestListResponse,
    MentorRequestResponse,
    MentorRequestStatus,
    TokenDecision,
    TokenRequestResponse,
)
from app.schemas.user import UserProfile, UserProfileDetails
from app.services import email_tokens
from app.services import mentor_requests as service

log = logging.getLogger(__name__)

router = APIRouter(prefix="/mentor", tags=["mentor"])


# ==================================================================
# Email links (no login)
# ==================================================================


@router.get("/requests/token", response_model=TokenRequestResponse)
async def resolve_token(
    db: Database,
    token: str = Query(..., min_length=1),
):
    """Look up the request behind an emailed link without consuming the token."""
    verification = email_tokens.verify_email_token(db, token)
    if not verification.valid or verification.token is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=service.INVALID_TOKEN_MESSAGE,
        )

    request = service.get_request(db, verification.token.request_id)
    if not request:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Request not found."
        )

    return TokenRequestResponse(
        request=MentorRequestResponse(**request),
        action=verification.token.action,
    )


@router.post("/requests/token/decision", response_model=ActionResult)
async def decide_with_token(body: TokenDecision, db: Database):
    """Approve or decline a request from an emailed single-use link."""
    decision = MentorDecision(action=body.action, notes=body.notes)
    result = service.process_mentor_decision_by_token(db, body.token, decision)
    return raise_for_result(result)


# ==================================================================
# Mentor dashboard
# ==================================================================


@router.get("/requests", response_model=MentorRequestListResponse)
async def get_my_requests(
    mentor: MentorUser,
    db: Database,
    status_filter: MentorRequestStatus | None = Query(None, alias="status"),
):
    """Requests forwarded to the current mentor."""
    visible = [s.value for s in workflow.MENTOR_VISIBLE_STATUSES]
    if status_filter:
        if status_filter.value not in visible:
            return MentorRequestListResponse(requests=[], total=0)
        visible = [status_filter.value]

    try:
        result = (
            db.table(service.TABLE)
            .select("*")
            .eq("mentor_email", mentor.email)
            .in_("status", visible)
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as e:
        log_store_error(log, "Error fetching mentor requests", service.TABLE, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )

    requests = [MentorRequestResponse(**row) for row in result.data or []]
    return MentorRequestListResponse(requests=requests, total=len(requests))


@router.get("/requests/{request_id}", response_model=MentorRequestDetailResponse)
async def get_request_detail(request_id: UUID, mentor: MentorUser, db: Database):
    """One request plus the student's profile, for the assigned mentor only."""
    request = service.get_request(db, str(request_id))
    if not request:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Request not found."
        )

    if (request.get("mentor_email") or "").lower() != mentor.email.lower():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not authorized to view this request.",
        )

    details = service.get_user_profile_details(db, request["user_id"]) or UserProfileDetails(
        name=request.get("user_name") or "Unknown User",
        email=request.get("user_email") or "",
    )
    return MentorRequestDetailResponse(
        request=MentorRequestResponse(**request), user_details=details
    )


@router.post("/requests/{request_id}/decision", response_model=ActionResult)
async def decide_as_mentor(
    request_id: UUID,
    body: MentorDecision,
    mentor: MentorUser,
    db: Database,
):
    """Accept or decline a request the admin has forwarded."""
    result = service.process_mentor_decision(db, str(request_id), body, mentor.email)
    return raise_for_result(result)


# ==================================================================
# Mentees
# ==================================================================


@router.get("/mentees", response_model=MentorRequestListResponse)
async def get_approved_mentees(mentor: MentorUser, db: Database):
    """Accepted mentorships, most recently accepted first."""
    try:
        result = (
            db.table(service.TABLE)
            .select("*")
            .eq("mentor_email", mentor.email)
            .eq("status", MentorRequestStatus.MENTOR_APPROVED.value)
            .order("mentor_processed_at", desc=True)
            .execute()
        )
    except Exception as e:
        log_store_error(log, "Error fetching approved mentees", service.TABLE, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch mentees.",
        )

    mentees = [MentorRequestResponse(**row) for row in result.data or []]
    return MentorRequestListResponse(requests=mentees, total=len(mentees))


@router.get("/mentees/{user_id}", response_model=UserProfile)
async def get_mentee_profile(user_id: UUID, mentor: MentorUser, db: Database):
    """Full profile of a mentee; requires an accepted mentorship with this mentor."""
    relationship = (
        db.table(service.TABLE)
        .select("id")
        .eq("user_id", str(user_id))
        .eq("mentor_email", mentor.email)
        .eq("status", MentorRequestStatus.MENTOR_APPROVED.value)
        .execute()
    )
    if not relationship.data:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized: You are not the mentor for this user.",
        )

    user_result = (
        db.table("users").select("*").eq("id", str(user_id)).maybe_single().execute()
    )
    user_data = user_result.data if user_result else None
    if not user_data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Could not retrieve mentee profile.",
        )

    return UserProfile(**user_data)
