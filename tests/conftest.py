import os
import uuid
from datetime import datetime, timezone
from uuid import UUID

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ["RESEND_API_KEY"] = ""
os.environ["VAPID_PUBLIC_KEY"] = ""
os.environ["VAPID_PRIVATE_KEY"] = ""
os.environ["CLEANUP_API_KEY"] = "cleanup-secret"

import pytest
from fastapi.testclient import TestClient

from app.api.v1 import submissions as submissions_router
from app.core.deps import CurrentUser, get_current_user
from app.core.email import EmailResult
from app.core.supabase_client import get_supabase
from app.main import app
from app.services import mentor_requests as mentor_request_service
from supabase_fake import FakeSupabase


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@pytest.fixture
def db():
    fake = FakeSupabase()
    app.dependency_overrides[get_supabase] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_supabase, None)


@pytest.fixture
def client(db):
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture
def login():
    """Act as the given user row for subsequent requests."""

    def _login(user: dict) -> CurrentUser:
        current = CurrentUser(id=UUID(user["id"]), email=user["email"])
        app.dependency_overrides[get_current_user] = lambda: current
        return current

    return _login


class Outbox:
    def __init__(self):
        self.sent = []
        self.fail_with = None

    def send(self, to, subject, body, html_body=None):
        self.sent.append({"to": to, "subject": subject, "body": body, "html": html_body})
        if self.fail_with:
            return EmailResult(success=False, message=self.fail_with, error=self.fail_with)
        return EmailResult(success=True, message=f"Email sent successfully to {to} via Resend.")


@pytest.fixture
def outbox(monkeypatch):
    box = Outbox()
    monkeypatch.setattr(mentor_request_service, "send_email", box.send)
    monkeypatch.setattr(submissions_router, "send_email", box.send)
    return box


@pytest.fixture
def student(db):
    return db.add(
        "users",
        id=str(uuid.uuid4()),
        email="student@example.com",
        name="Asha Student",
        role="USER",
        college="RCOEM",
    )


@pytest.fixture
def admin(db):
    return db.add(
        "users",
        id=str(uuid.uuid4()),
        email="admin@example.com",
        name="Program Admin",
        role="ADMIN",
    )


@pytest.fixture
def mentor(db):
    mentor_id = str(uuid.uuid4())
    db.add("users", id=mentor_id, email="mentor@example.com", name="Ravi Mentor", role="MENTOR")
    return db.add(
        "mentors",
        id=mentor_id,
        name="Ravi Mentor",
        email="mentor@example.com",
        designation="CTO",
        expertise="SaaS",
        description="Builds developer tools.",
    )


@pytest.fixture
def make_request(db, student, mentor):
    def _make(status: str = "pending", **overrides) -> dict:
        now = _now()
        row = {
            "id": str(uuid.uuid4()),
            "user_id": student["id"],
            "user_email": student["email"],
            "user_name": student["name"],
            "mentor_id": mentor["id"],
            "mentor_email": mentor["email"],
            "mentor_name": mentor["name"],
            "status": status,
            "request_message": "I would love guidance on go-to-market.",
            "created_at": now,
            "updated_at": now,
        }
        row.update(overrides)
        return db.add("mentor_requests", **row)

    return _make
