import uuid

from app.core.notifications import create_notification
from app.schemas.notification import NotificationType


def _notify(db, user, title="Hello"):
    create_notification(
        db,
        user["id"],
        NotificationType.MENTOR_REQUEST_ADMIN_APPROVED,
        title,
        "Your request was forwarded.",
    )
    return db.rows("notifications")[-1]


def test_create_notification_row(db, student):
    row = _notify(db, student)
    assert row["user_id"] == student["id"]
    assert row["type"] == "mentor_request_admin_approved"
    assert row["read"] is False
    assert row["created_at"]


def test_list_counts_unread(client, login, db, student, admin):
    _notify(db, student, "one")
    second = _notify(db, student, "two")
    _notify(db, admin, "not mine")
    second["read"] = True
    login(student)

    r = client.get("/api/v1/notifications")
    assert r.status_code == 200
    data = r.json()
    assert data["total"] == 2
    assert data["unread_count"] == 1

    r = client.get("/api/v1/notifications", params={"unread_only": True})
    assert [n["title"] for n in r.json()["notifications"]] == ["one"]


def test_mark_read_and_read_all(client, login, db, student):
    first = _notify(db, student, "one")
    _notify(db, student, "two")
    login(student)

    r = client.patch(f"/api/v1/notifications/{first['id']}/read")
    assert r.status_code == 200
    assert db.rows("notifications")[0]["read"] is True

    r = client.patch("/api/v1/notifications/read-all")
    assert r.status_code == 200
    assert all(n["read"] for n in db.rows("notifications"))


def test_cannot_touch_someone_elses_notification(client, login, db, student, admin):
    row = _notify(db, admin)
    login(student)

    assert client.patch(f"/api/v1/notifications/{row['id']}/read").status_code == 404
    assert client.delete(f"/api/v1/notifications/{row['id']}").status_code == 404
    assert len(db.rows("notifications")) == 1


def test_delete_notification(client, login, db, student):
    row = _notify(db, student)
    login(student)

    r = client.delete(f"/api/v1/notifications/{row['id']}")
    assert r.status_code == 200
    assert db.rows("notifications") == []

    r = client.delete(f"/api/v1/notifications/{uuid.uuid4()}")
    assert r.status_code == 404


def test_push_subscription_roundtrip(client, login, db, student):
    login(student)
    sub = {"endpoint": "https://push.example.com/abc", "p256dh": "key", "auth": "secret"}

    r = client.post("/api/v1/notifications/push/subscribe", json=sub)
    assert r.status_code == 201
    assert db.rows("push_subscriptions")[0]["user_id"] == student["id"]

    r = client.request("DELETE", "/api/v1/notifications/push/subscribe", json=sub)
    assert r.status_code == 200
    assert db.rows("push_subscriptions") == []
