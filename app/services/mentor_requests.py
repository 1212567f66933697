"""Student -> admin -> mentor handoff for mentorship requests.

Every operation reads the request, checks the transition is allowed, writes the
new status and then performs its side effects: one best-effort email and the
in-app notifications. A failed email is reported in the result message but
never rolls the status back. Guard failures come back as a failed
``ActionResult``; they are not raised.
"""

import logging
from datetime import datetime, timezone

from postgrest.exceptions import APIError
from supabase import Client

from app.core import workflow
from app.core.email import send_email, with_email_outcome
from app.core.email_templates import DecisionLinks, decision_email, token_url
from app.core.errors import UNIQUE_VIOLATION, log_store_error
from app.core.notifications import create_notification
from app.schemas.mentor_request import (
    ActionOutcome,
    ActionResult,
    Actor,
    DecisionAction,
    MentorDecision,
    MentorRequestCreate,
    MentorRequestStatus,
)
from app.schemas.notification import NotificationType
from app.schemas.user import UserProfileDetails
from app.services import email_tokens

log = logging.getLogger(__name__)

TABLE = "mentor_requests"

DUPLICATE_REQUEST_MESSAGE = "You already have a pending request for this mentor"
INVALID_TOKEN_MESSAGE = "Invalid or expired token."


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _same_email(a: str | None, b: str | None) -> bool:
    return bool(a) and bool(b) and a.strip().lower() == b.strip().lower()


def get_request(db: Client, request_id: str) -> dict | None:
    result = db.table(TABLE).select("*").eq("id", request_id).maybe_single().execute()
    return result.data if result else None


def _update_status(
    db: Client, request_id: str, current: MentorRequestStatus, fields: dict
) -> bool:
    """Write the new status only if the row is still in ``current``."""
    result = (
        db.table(TABLE)
        .update(fields)
        .eq("id", request_id)
        .eq("status", current.value)
        .execute()
    )
    return bool(result.data)


def get_user_profile_details(db: Client, user_id: str) -> UserProfileDetails | None:
    """Profile of a student, from ``users`` or else their onboarding submission."""
    try:
        user_result = (
            db.table("users").select("*").eq("id", user_id).maybe_single().execute()
        )
        user = user_result.data if user_result else None
        if user:
            return UserProfileDetails(
                name=user.get("name") or "N/A",
                email=user.get("email") or "N/A",
                phone=user.get("phone"),
                college=user.get("college"),
                course=user.get("course"),
                year_of_study=user.get("year_of_study"),
                skills=user.get("skills"),
                bio=user.get("bio"),
                linkedin_url=user.get("linkedin_url"),
                portfolio_url=user.get("portfolio_url"),
            )

        submissions = (
            db.table("submissions").select("*").eq("uid", user_id).limit(1).execute()
        )
        if submissions.data:
            row = submissions.data[0]
            personal = row.get("personal_info") or {}
            technical = row.get("technical_info") or {}
            return UserProfileDetails(
                name=personal.get("full_name") or row.get("name") or "N/A",
                email=personal.get("email") or row.get("email") or "N/A",
                phone=personal.get("phone_number"),
                college=personal.get("college_name"),
                course=personal.get("course"),
                year_of_study=personal.get("year_of_study"),
                skills=technical.get("technical_skills"),
                bio=personal.get("about_yourself"),
                linkedin_url=personal.get("linkedin_profile"),
                portfolio_url=personal.get("portfolio_website"),
            )
    except Exception as e:
        log.error("Error fetching user profile details for %s: %s", user_id, e)

    return None


# ==================================================================
# 1. Student submits a request
# ==================================================================


def submit_mentor_request(
    db: Client,
    user_id: str,
    user_email: str,
    user_name: str,
    form: MentorRequestCreate,
) -> ActionResult:
    try:
        mentor_result = (
            db.table("mentors")
            .select("id, name, email")
            .eq("id", form.mentor_id)
            .maybe_single()
            .execute()
        )
        mentor = mentor_result.data if mentor_result else None
        if not mentor:
            log.warning("Mentor not found: %s", form.mentor_id)
            return ActionResult.fail(ActionOutcome.NOT_FOUND, "Mentor not found")

        existing = (
            db.table(TABLE)
            .select("id")
            .eq("user_id", user_id)
            .eq("mentor_id", form.mentor_id)
            .in_("status", [s.value for s in workflow.ACTIVE_STATUSES])
            .execute()
        )
        if existing.data:
            return ActionResult.fail(ActionOutcome.CONFLICT, DUPLICATE_REQUEST_MESSAGE)

        now = _now()
        try:
            result = (
                db.table(TABLE)
                .insert(
                    {
                        "user_id": user_id,
                        "user_email": user_email,
                        "user_name": user_name,
                        "mentor_id": form.mentor_id,
                        "mentor_email": mentor["email"],
                        "mentor_name": mentor["name"],
                        "status": MentorRequestStatus.PENDING.value,
                        "request_message": form.request_message,
                        "created_at": now,
                        "updated_at": now,
                    }
                )
                .execute()
            )
        except APIError as e:
            # The partial unique index closes the window between the check above and this insert.
            if e.code == UNIQUE_VIOLATION:
                return ActionResult.fail(ActionOutcome.CONFLICT, DUPLICATE_REQUEST_MESSAGE)
            raise

        request_id = str(result.data[0]["id"])
        log.info("Mentor request %s created by %s for mentor %s", request_id, user_id, form.mentor_id)
        return ActionResult.ok(
            "Mentor request submitted successfully! Admin will review your request.",
            request_id=request_id,
        )
    except Exception as e:
        log_store_error(log, "Error submitting mentor request", TABLE, e)
        return ActionResult.fail(ActionOutcome.ERROR, "Failed to submit mentor request")


# ==================================================================
# 2. Admin gate
# ==================================================================


def _issue_decision_links(db: Client, request_id: str, mentor_email: str) -> DecisionLinks | None:
    try:
        approve = email_tokens.create_email_token(db, request_id, mentor_email, DecisionAction.APPROVE)
        reject = email_tokens.create_email_token(db, request_id, mentor_email, DecisionAction.REJECT)
        review = email_tokens.create_email_token(db, request_id, mentor_email)
    except Exception as e:
        log.error("Could not issue email tokens for request %s: %s", request_id, e)
        return None

    return DecisionLinks(
        approve_url=token_url(approve, DecisionAction.APPROVE),
        reject_url=token_url(reject, DecisionAction.REJECT),
        review_url=token_url(review),
    )


def process_admin_decision(
    db: Client, admin_id: str, request_id: str, decision: MentorDecision
) -> ActionResult:
    try:
        request = get_request(db, request_id)
        if not request:
            return ActionResult.fail(ActionOutcome.NOT_FOUND, "Request not found")

        current = MentorRequestStatus(request["status"])
        new_status = workflow.next_status(current, Actor.ADMIN, decision.action)
        if new_status is None:
            return ActionResult.fail(ActionOutcome.CONFLICT, "Request has already been processed")

        now = _now()
        updated = _update_status(
            db,
            request_id,
            current,
            {
                "status": new_status.value,
                "admin_notes": decision.notes or "",
                "admin_processed_at": now,
                "admin_processed_by": admin_id,
                "updated_at": now,
            },
        )
        if not updated:
            return ActionResult.fail(ActionOutcome.CONFLICT, "Request has already been processed")

        log.info("Request %s moved %s -> %s by admin %s", request_id, current.value, new_status.value, admin_id)

        if decision.action is DecisionAction.REJECT:
            message = decision_email(Actor.ADMIN, decision.action, request, decision.notes)
            email = send_email(request["user_email"], message.subject, message.text, message.html)

            create_notification(
                db,
                user_id=request["user_id"],
                notification_type=NotificationType.MENTOR_REQUEST_REJECTED,
                title="Mentor Request Update",
                message=f"Your request to connect with {request['mentor_name']} was not approved by admin",
                request_id=request_id,
                mentor_id=request["mentor_id"],
                mentor_name=request["mentor_name"],
            )
            return ActionResult.ok(
                with_email_outcome("Request rejected and user notified.", email),
                request_id=request_id,
            )

        profile = get_user_profile_details(db, request["user_id"])
        if profile and profile.name != "N/A":
            request = {**request, "user_name": profile.name}

        links = _issue_decision_links(db, request_id, request["mentor_email"])
        message = decision_email(Actor.ADMIN, decision.action, request, decision.notes, links)
        email = send_email(request["mentor_email"], message.subject, message.text, message.html)

        create_notification(
            db,
            user_id=request["user_id"],
            notification_type=NotificationType.MENTOR_REQUEST_ADMIN_APPROVED,
            title="Mentor Request Forwarded",
            message=f"Your request to connect with {request['mentor_name']} has been forwarded to the mentor",
            request_id=request_id,
            mentor_id=request["mentor_id"],
            mentor_name=request["mentor_name"],
        )
        create_notification(
            db,
            user_id=request["mentor_id"],
            notification_type=NotificationType.MENTOR_REQUEST_RECEIVED,
            title="New Mentorship Request",
            message=f"{request['user_name']} would like you to be their mentor",
            request_id=request_id,
            mentor_id=request["mentor_id"],
            mentor_name=request["mentor_name"],
        )
        return ActionResult.ok(
            with_email_outcome("Request approved and mentor has been notified.", email),
            request_id=request_id,
        )
    except Exception as e:
        log_store_error(log, "Error processing admin mentor request", TABLE, e)
        return ActionResult.fail(ActionOutcome.ERROR, "Failed to process request")


# ==================================================================
# 3. Mentor decision
# ==================================================================


def process_mentor_decision(
    db: Client, request_id: str, decision: MentorDecision, mentor_email: str
) -> ActionResult:
    try:
        request = get_request(db, request_id)
        if not request:
            return ActionResult.fail(ActionOutcome.NOT_FOUND, "Request not found")

        if not _same_email(request.get("mentor_email"), mentor_email):
            return ActionResult.fail(
                ActionOutcome.FORBIDDEN,
                "Unauthorized: You are not the assigned mentor for this request.",
            )

        current = MentorRequestStatus(request["status"])
        new_status = workflow.next_status(current, Actor.MENTOR, decision.action)
        if new_status is None:
            return ActionResult.fail(
                ActionOutcome.CONFLICT,
                "Request is not in a state to be processed by mentor",
            )

        now = _now()
        updated = _update_status(
            db,
            request_id,
            current,
            {
                "status": new_status.value,
                "mentor_notes": decision.notes or "",
                "mentor_processed_at": now,
                "updated_at": now,
            },
        )
        if not updated:
            return ActionResult.fail(
                ActionOutcome.CONFLICT,
                "Request is not in a state to be processed by mentor",
            )

        log.info("Request %s moved %s -> %s by mentor %s", request_id, current.value, new_status.value, mentor_email)

        message = decision_email(Actor.MENTOR, decision.action, request, decision.notes)
        email = send_email(request["user_email"], message.subject, message.text, message.html)

        if decision.action is DecisionAction.APPROVE:
            create_notification(
                db,
                user_id=request["user_id"],
                notification_type=NotificationType.MENTOR_REQUEST_APPROVED,
                title="Mentorship Approved!",
                message=f"{request['mentor_name']} has accepted your mentorship request",
                request_id=request_id,
                mentor_id=request["mentor_id"],
                mentor_name=request["mentor_name"],
            )
            summary = "Mentorship request approved! User has been notified."
        else:
            create_notification(
                db,
                user_id=request["user_id"],
                notification_type=NotificationType.MENTOR_REQUEST_REJECTED,
                title="Mentorship Request Update",
                message=f"{request['mentor_name']} was unable to accept your mentorship request",
                request_id=request_id,
                mentor_id=request["mentor_id"],
                mentor_name=request["mentor_name"],
            )
            summary = "Mentorship request declined. User has been notified."

        return ActionResult.ok(with_email_outcome(summary, email), request_id=request_id)
    except Exception as e:
        log_store_error(log, "Error processing mentor decision", TABLE, e)
        return ActionResult.fail(ActionOutcome.ERROR, "Failed to process mentor decision")


def process_mentor_decision_by_token(
    db: Client, token_id: str, decision: MentorDecision
) -> ActionResult:
    """Mentor decision through an emailed link, without a login.

    The token is burned before the decision is written, so a store failure
    after that point leaves a used token and an undecided request.
    """
    verification = email_tokens.verify_email_token(db, token_id)
    if not verification.valid or verification.token is None:
        log.info("Rejected email token: %s", verification.error)
        return ActionResult.fail(ActionOutcome.INVALID, INVALID_TOKEN_MESSAGE)

    token = verification.token
    if token.action is not None and token.action is not decision.action:
        return ActionResult.fail(ActionOutcome.INVALID, "This link is not valid for that action.")

    try:
        request = get_request(db, token.request_id)
        if not request:
            return ActionResult.fail(ActionOutcome.NOT_FOUND, "Request not found")

        if not _same_email(request.get("mentor_email"), token.mentor_email):
            return ActionResult.fail(
                ActionOutcome.FORBIDDEN,
                "Unauthorized: You are not the assigned mentor for this request.",
            )

        if request["status"] != MentorRequestStatus.ADMIN_APPROVED.value:
            return ActionResult.fail(
                ActionOutcome.CONFLICT,
                "Request is not in a state to be processed by mentor",
            )

        email_tokens.mark_token_as_used(db, token_id)
    except Exception as e:
        log_store_error(log, "Error validating token decision", TABLE, e)
        return ActionResult.fail(ActionOutcome.ERROR, "Failed to process mentor decision")

    return process_mentor_decision(db, token.request_id, decision, token.mentor_email)
