import json
import logging

from pywebpush import webpush, WebPushException
from supabase import Client

from app.core.config import settings

log = logging.getLogger(__name__)


def send_push_to_user(db: Client, user_id: str, payload: dict) -> None:
    """Send a Web Push notification to all of a user's subscriptions.

    Silently skips if VAPID keys are not configured.
    Removes stale subscriptions (expired/unsubscribed endpoints).
    """
    if not settings.VAPID_PRIVATE_KEY or not settings.VAPID_PUBLIC_KEY:
        return

    try:
        result = (
            db.table("push_subscriptions")
            .select("id, endpoint, p256dh, auth")
            .eq("user_id", user_id)
            .execute()
        )
    except Exception as e:
        log.warning("Could not load push subscriptions for %s: %s", user_id, e)
        return

    for sub in result.data or []:
        try:
            webpush(
                subscription_info={
                    "endpoint": sub["endpoint"],
                    "keys": {
                        "p256dh": sub["p256dh"],
                        "auth": sub["auth"],
                    },
                },
                data=json.dumps(payload),
                vapid_private_key=settings.VAPID_PRIVATE_KEY,
                vapid_claims={
                    "sub": settings.VAPID_SUBJECT,
                },
            )
        except WebPushException as e:
            if e.response is not None and e.response.status_code in (404, 410):
                try:
                    db.table("push_subscriptions").delete().eq(
                        "id", sub["id"]
                    ).execute()
                except Exception as cleanup_error:
                    log.warning("Could not drop stale subscription %s: %s", sub["id"], cleanup_error)
            else:
                log.warning("Web push to %s failed: %s", user_id, e)
        except Exception as e:
            log.warning("Web push to %s failed: %s", user_id, e)
