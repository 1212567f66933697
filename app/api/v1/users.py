import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, status
from supabase import Client

from app.core.deps import AuthenticatedUser, Database
from app.core.errors import log_store_error
from app.schemas.user import (
    NotificationPreferencesUpdate,
    OnboardingStep,
    UserActionResponse,
    UserProfile,
    UserProfileUpdate,
)

log = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _get_user_row(db: Client, user_id: str) -> dict:
    try:
        result = db.table("users").select("*").eq("id", user_id).maybe_single().execute()
    except Exception as e:
        log_store_error(log, "Error fetching user", "users", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )

    if not result or not result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User not found."
        )
    return result.data


def _with_step(row: dict, step: OnboardingStep, now: str) -> dict:
    """Onboarding progress with ``step`` ticked off, keeping earlier steps."""
    progress = dict(row.get("onboarding_progress") or {})
    progress[step.value] = True
    progress[f"{step.value}_at"] = now
    return progress


def _update_user(db: Client, user_id: str, data: dict, context: str) -> dict:
    try:
        result = db.table("users").update(data).eq("id", user_id).execute()
    except Exception as e:
        log_store_error(log, context, "users", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )
    return result.data[0]


@router.get("/me", response_model=UserProfile)
async def get_my_profile(user: AuthenticatedUser, db: Database):
    return UserProfile(**_get_user_row(db, str(user.id)))


@router.patch("/me", response_model=UserProfile)
async def update_my_profile(
    body: UserProfileUpdate, user: AuthenticatedUser, db: Database
):
    """Profile fields mentors see when reviewing a request."""
    row = _get_user_row(db, str(user.id))
    now = _now()

    update_data = body.model_dump(mode="json", exclude_unset=True)
    update_data.update(
        {
            "name": f"{body.first_name} {body.last_name}",
            "onboarding_progress": _with_step(row, OnboardingStep.PROFILE_COMPLETED, now),
            "updated_at": now,
        }
    )

    updated = _update_user(db, str(user.id), update_data, "Error updating user profile")
    return UserProfile(**updated)


@router.patch("/me/notification-preferences", response_model=UserActionResponse)
async def update_notification_preferences(
    body: NotificationPreferencesUpdate, user: AuthenticatedUser, db: Database
):
    row = _get_user_row(db, str(user.id))
    now = _now()

    _update_user(
        db,
        str(user.id),
        {
            "notification_preferences": {
                "email_notifications": body.email_notifications,
                "updated_at": now,
            },
            "onboarding_progress": _with_step(row, OnboardingStep.NOTIFICATIONS_CONFIGURED, now),
            "updated_at": now,
        },
        "Error updating notification preferences",
    )
    return UserActionResponse(
        success=True, message="Notification preferences updated successfully!"
    )


@router.post("/me/password-changed", response_model=UserActionResponse)
async def mark_password_changed(user: AuthenticatedUser, db: Database):
    """Record that the temporary password was replaced."""
    row = _get_user_row(db, str(user.id))
    now = _now()

    _update_user(
        db,
        str(user.id),
        {
            "onboarding_progress": _with_step(row, OnboardingStep.PASSWORD_CHANGED, now),
            "updated_at": now,
        },
        "Error marking password as changed",
    )
    return UserActionResponse(success=True, message="Password change recorded successfully!")


@router.post("/me/onboarding/complete", response_model=UserActionResponse)
async def complete_onboarding(user: AuthenticatedUser, db: Database):
    row = _get_user_row(db, str(user.id))
    now = _now()

    _update_user(
        db,
        str(user.id),
        {
            "onboarding_completed": True,
            "onboarding_progress": _with_step(row, OnboardingStep.COMPLETED, now),
            "updated_at": now,
        },
        "Error completing onboarding",
    )
    return UserActionResponse(success=True, message="Onboarding completed successfully!")
