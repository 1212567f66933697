import logging
from datetime import datetime, timezone

from supabase import Client

from app.core.push import send_push_to_user
from app.schemas.notification import NotificationType

log = logging.getLogger(__name__)


def create_notification(
    db: Client,
    user_id: str,
    notification_type: NotificationType,
    title: str,
    message: str,
    request_id: str | None = None,
    mentor_id: str | None = None,
    mentor_name: str | None = None,
) -> None:
    """Store an in-app notification and push it to the user's devices.

    Failures are logged, never raised: a missing notification must not undo
    the workflow step that triggered it.
    """
    try:
        db.table("notifications").insert(
            {
                "user_id": user_id,
                "type": notification_type.value,
                "title": title,
                "message": message,
                "mentor_id": mentor_id,
                "mentor_name": mentor_name,
                "request_id": request_id,
                "read": False,
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
        ).execute()
    except Exception as e:
        log.error("Error creating %s notification for %s: %s", notification_type.value, user_id, e)

    payload = {"type": notification_type.value, "title": title, "body": message}
    if request_id:
        payload["request_id"] = request_id

    send_push_to_user(db, user_id, payload)
