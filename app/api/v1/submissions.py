import logging
import secrets
import string
from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from app.core.deps import AdminUser, Database
from app.core.email import send_email, with_email_outcome
from app.core.email_templates import (
    application_accepted_email,
    application_rejected_email,
)
from app.core.errors import log_store_error
from app.schemas.submission import (
    SUBMISSION_TABLES,
    ApplicationAction,
    ApplicationDecision,
    CampusStatus,
    EmailPreview,
    ProcessApplicationResponse,
    SubmissionCreate,
    SubmissionCreatedResponse,
    SubmissionListResponse,
    SubmissionResponse,
    SubmissionStatus,
)

log = logging.getLogger(__name__)

router = APIRouter(prefix="/submissions", tags=["submissions"])

_ALPHABET = string.ascii_lowercase + string.digits


def _random_string(length: int) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


@router.post(
    "",
    response_model=SubmissionCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_submission(body: SubmissionCreate, db: Database):
    """Public incubation application form."""
    table = SUBMISSION_TABLES[body.campus_status]
    data = body.model_dump(mode="json")
    data.update(
        {
            "name": body.full_name,
            "email": body.company_email,
            "idea": body.startup_idea,
            "status": SubmissionStatus.PENDING.value,
            "submitted_at": datetime.now(timezone.utc).isoformat(),
        }
    )

    try:
        result = db.table(table).insert(data).execute()
    except Exception as e:
        log_store_error(log, "Error creating submission", table, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save application",
        )

    submission_id = str(result.data[0]["id"])
    log.info("Submission %s added to %s", submission_id, table)
    return SubmissionCreatedResponse(
        message="Application submitted successfully", id=submission_id
    )


@router.get("", response_model=SubmissionListResponse)
async def get_submissions(
    admin: AdminUser,
    db: Database,
    campus_status: CampusStatus = Query(CampusStatus.CAMPUS),
    status_filter: SubmissionStatus | None = Query(None, alias="status"),
):
    table = SUBMISSION_TABLES[campus_status]
    try:
        query = db.table(table).select("*")
        if status_filter:
            query = query.eq("status", status_filter.value)

        result = query.order("submitted_at", desc=True).execute()
    except Exception as e:
        log_store_error(log, "Error fetching submissions", table, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )

    submissions = [SubmissionResponse(**row) for row in result.data or []]
    return SubmissionListResponse(submissions=submissions, total=len(submissions))


@router.post("/{submission_id}/process", response_model=ProcessApplicationResponse)
async def process_application(
    submission_id: UUID,
    body: ApplicationDecision,
    admin: AdminUser,
    db: Database,
    campus_status: CampusStatus = Query(CampusStatus.CAMPUS),
):
    """Accept or reject a pending application and email the applicant.

    Accepting generates temporary portal credentials.
    """
    table = SUBMISSION_TABLES[campus_status]

    try:
        existing = (
            db.table(table)
            .select("*")
            .eq("id", str(submission_id))
            .maybe_single()
            .execute()
        )
        submission = existing.data if existing else None
        if not submission:
            return ProcessApplicationResponse(
                status="error",
                message=f"Submission with ID {submission_id} not found.",
            )

        if submission["status"] != SubmissionStatus.PENDING.value:
            return ProcessApplicationResponse(
                status="error",
                message=f"Submission {submission_id} has already been processed (status: {submission['status']}).",
            )

        applicant_name = submission.get("name") or submission.get("full_name") or "Applicant"
        applicant_email = submission.get("email") or submission.get("company_email")

        update_data: dict = {
            "processed_by_admin_at": datetime.now(timezone.utc).isoformat(),
        }
        temporary_user_id = None
        temporary_password = None

        if body.action is ApplicationAction.ACCEPT:
            temporary_user_id = _random_string(8)
            temporary_password = _random_string(10)
            update_data.update(
                {
                    "status": SubmissionStatus.ACCEPTED.value,
                    "temporary_user_id": temporary_user_id,
                    "temporary_password": temporary_password,
                }
            )
            message = application_accepted_email(
                applicant_name, temporary_user_id, temporary_password
            )
        else:
            update_data["status"] = SubmissionStatus.REJECTED.value
            message = application_rejected_email(applicant_name)

        # Write only while still pending.
        updated = (
            db.table(table)
            .update(update_data)
            .eq("id", str(submission_id))
            .eq("status", SubmissionStatus.PENDING.value)
            .execute()
        )
        if not updated.data:
            return ProcessApplicationResponse(
                status="error",
                message=f"Submission {submission_id} has already been processed.",
            )
    except Exception as e:
        log_store_error(log, "Error processing application", table, e)
        return ProcessApplicationResponse(
            status="error", message=f"Failed to process application: {e}"
        )

    email = send_email(applicant_email, message.subject, message.text, message.html)
    if not email.success:
        log.warning("Application %s processed but email failed: %s", submission_id, email.message)

    verb = "accepted" if body.action is ApplicationAction.ACCEPT else "rejected"
    return ProcessApplicationResponse(
        status="success",
        message=with_email_outcome(f"Application {verb} successfully.", email),
        email=EmailPreview(to=applicant_email, subject=message.subject, body=message.text),
        temporary_user_id=temporary_user_id,
        temporary_password=temporary_password,
    )
