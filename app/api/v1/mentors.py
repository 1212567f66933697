import logging
from datetime import datetime, timezone
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, status
from supabase_auth.errors import AuthApiError

from app.core.deps import AdminUser, Database
from app.core.errors import log_store_error
from app.schemas.mentor import MentorCreate, MentorListResponse, MentorResponse
from app.schemas.user import AppRole

log = logging.getLogger(__name__)

router = APIRouter(prefix="/mentors", tags=["mentors"])


def _placeholder_avatar(name: str) -> str:
    return f"https://placehold.co/100x100/7DF9FF/121212.png?text={quote(name[:2])}"


@router.get("", response_model=MentorListResponse)
async def get_mentors(db: Database):
    """Public mentor directory."""
    try:
        result = db.table("mentors").select("*").order("name").execute()
    except Exception as e:
        log_store_error(log, "Error fetching mentors", "mentors", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )

    mentors = [MentorResponse(**row) for row in result.data or []]
    return MentorListResponse(mentors=mentors, total=len(mentors))


@router.post("", response_model=MentorResponse, status_code=status.HTTP_201_CREATED)
async def create_mentor(body: MentorCreate, admin: AdminUser, db: Database):
    """Create a mentor login plus the mentor directory entry. Admin only."""
    email = body.email.lower()

    try:
        auth_response = db.auth.admin.create_user(
            {"email": email, "password": body.password, "email_confirm": True}
        )
    except AuthApiError as e:
        if e.code == "email_exists" or "already" in str(e).lower():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="This email is already registered. Please use a different email.",
            )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    uid = str(auth_response.user.id)
    now = datetime.now(timezone.utc).isoformat()

    mentor_data = {
        "id": uid,
        "name": body.name,
        "designation": body.designation,
        "expertise": body.expertise,
        "description": body.description,
        "profile_picture_url": (
            str(body.profile_picture_url)
            if body.profile_picture_url
            else _placeholder_avatar(body.name)
        ),
        "linkedin_url": str(body.linkedin_url) if body.linkedin_url else None,
        "email": email,
        "created_at": now,
        "updated_at": now,
    }

    try:
        result = db.table("mentors").insert(mentor_data).execute()
        db.table("users").upsert(
            {
                "id": uid,
                "email": email,
                "name": body.name,
                "role": AppRole.MENTOR.value,
                "created_at": now,
            },
            on_conflict="id",
        ).execute()
    except Exception as e:
        log_store_error(log, "Error saving mentor", "mentors", e)
        # Remove the partial mentor and its login so the same email can be retried.
        try:
            db.table("mentors").delete().eq("id", uid).execute()
            db.auth.admin.delete_user(uid)
        except Exception as cleanup_error:
            log.error("Could not delete auth user %s: %s", uid, cleanup_error)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to add mentor.",
        )

    log.info("Mentor %s created (%s)", uid, email)
    return MentorResponse(**result.data[0])
