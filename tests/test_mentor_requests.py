from postgrest.exceptions import APIError

from app.schemas.mentor_request import MentorDecision, MentorRequestCreate
from app.services import mentor_requests as service

MESSAGE = "I am building an edtech startup and need advice."


def _submit(db, student, mentor_id):
    return service.submit_mentor_request(
        db,
        student["id"],
        student["email"],
        student["name"],
        MentorRequestCreate(mentor_id=mentor_id, request_message=MESSAGE),
    )


# ------------------------------------------------------------------
# Submission
# ------------------------------------------------------------------


def test_submit_creates_pending_request(db, student, mentor):
    result = _submit(db, student, mentor["id"])

    assert result.success
    row = db.rows("mentor_requests")[0]
    assert row["id"] == result.request_id
    assert row["status"] == "pending"
    assert row["mentor_email"] == mentor["email"]
    assert row["mentor_name"] == mentor["name"]


def test_submit_unknown_mentor(db, student):
    result = _submit(db, student, "missing")
    assert not result.success
    assert result.message == "Mentor not found"


def test_duplicate_while_pending_is_rejected(db, student, mentor):
    assert _submit(db, student, mentor["id"]).success

    second = _submit(db, student, mentor["id"])
    assert not second.success
    assert second.message == service.DUPLICATE_REQUEST_MESSAGE
    assert len(db.rows("mentor_requests")) == 1


def test_duplicate_while_admin_approved_is_rejected(db, student, mentor, make_request):
    make_request("admin_approved")
    assert _submit(db, student, mentor["id"]).message == service.DUPLICATE_REQUEST_MESSAGE


def test_resubmit_after_terminal_state_is_allowed(db, student, mentor, make_request):
    make_request("mentor_rejected")
    assert _submit(db, student, mentor["id"]).success


def test_unique_violation_on_insert_reports_duplicate(db, student, mentor):
    db.fail_next(
        "mentor_requests",
        "insert",
        APIError({"code": "23505", "message": "duplicate key value violates unique constraint"}),
    )

    result = _submit(db, student, mentor["id"])
    assert not result.success
    assert result.message == service.DUPLICATE_REQUEST_MESSAGE


def test_store_failure_becomes_result(db, student, mentor):
    db.fail_next("mentor_requests", "insert", APIError({"code": "42501", "message": "denied"}))

    result = _submit(db, student, mentor["id"])
    assert not result.success
    assert result.message == "Failed to submit mentor request"


# ------------------------------------------------------------------
# Admin gate
# ------------------------------------------------------------------


def test_admin_reject_emails_and_notifies_student(db, admin, make_request, outbox):
    request = make_request()

    result = service.process_admin_decision(
        db, admin["id"], request["id"], MentorDecision(action="reject", notes="Not a fit")
    )

    assert result.success
    row = db.rows("mentor_requests")[0]
    assert row["status"] == "admin_rejected"
    assert row["admin_notes"] == "Not a fit"
    assert row["admin_processed_by"] == admin["id"]

    assert [m["to"] for m in outbox.sent] == [request["user_email"]]
    assert outbox.sent[0]["subject"] == "Update on Your Mentor Request"

    notifications = db.rows("notifications")
    assert len(notifications) == 1
    assert notifications[0]["type"] == "mentor_request_rejected"
    assert notifications[0]["user_id"] == request["user_id"]


def test_admin_approve_issues_tokens_and_emails_mentor(db, admin, make_request, outbox):
    request = make_request()

    result = service.process_admin_decision(
        db, admin["id"], request["id"], MentorDecision(action="approve")
    )

    assert result.success
    assert result.message == "Request approved and mentor has been notified."
    assert db.rows("mentor_requests")[0]["status"] == "admin_approved"

    tokens = db.rows("email_tokens")
    assert sorted(str(t["action"]) for t in tokens) == ["None", "approve", "reject"]
    assert all(t["request_id"] == request["id"] for t in tokens)

    assert len(outbox.sent) == 1
    mail = outbox.sent[0]
    assert mail["to"] == request["mentor_email"]
    for token in tokens:
        assert f"token={token['id']}" in mail["body"]

    types = sorted(n["type"] for n in db.rows("notifications"))
    assert types == ["mentor_request_admin_approved", "mentor_request_received"]


def test_admin_cannot_process_twice(db, admin, make_request, outbox):
    request = make_request("admin_approved")

    result = service.process_admin_decision(
        db, admin["id"], request["id"], MentorDecision(action="reject")
    )
    assert not result.success
    assert result.message == "Request has already been processed"
    assert outbox.sent == []


def test_admin_decision_on_missing_request(db, admin):
    result = service.process_admin_decision(
        db, admin["id"], "missing", MentorDecision(action="approve")
    )
    assert result.message == "Request not found"


def test_email_failure_does_not_roll_back(db, admin, make_request, outbox):
    outbox.fail_with = "Email sending disabled: RESEND_API_KEY not found."
    request = make_request()

    result = service.process_admin_decision(
        db, admin["id"], request["id"], MentorDecision(action="reject")
    )

    assert result.success
    assert "email not sent" in result.message
    assert db.rows("mentor_requests")[0]["status"] == "admin_rejected"
    assert len(db.rows("notifications")) == 1


# ------------------------------------------------------------------
# Mentor decision
# ------------------------------------------------------------------


def test_mentor_approves(db, make_request, outbox):
    request = make_request("admin_approved")

    result = service.process_mentor_decision(
        db, request["id"], MentorDecision(action="approve", notes="Happy to help"), request["mentor_email"]
    )

    assert result.success
    row = db.rows("mentor_requests")[0]
    assert row["status"] == "mentor_approved"
    assert row["mentor_notes"] == "Happy to help"
    assert row["mentor_processed_at"]
    assert outbox.sent[0]["subject"] == "Mentorship Request Approved!"
    assert db.rows("notifications")[0]["type"] == "mentor_request_approved"


def test_mentor_rejects(db, make_request, outbox):
    request = make_request("admin_approved")

    result = service.process_mentor_decision(
        db, request["id"], MentorDecision(action="reject"), request["mentor_email"]
    )

    assert result.success
    assert db.rows("mentor_requests")[0]["status"] == "mentor_rejected"
    assert outbox.sent[0]["subject"] == "Update on Your Mentorship Request"
    assert db.rows("notifications")[0]["type"] == "mentor_request_rejected"


def test_mentor_cannot_skip_admin_gate(db, make_request, outbox):
    request = make_request("pending")

    result = service.process_mentor_decision(
        db, request["id"], MentorDecision(action="approve"), request["mentor_email"]
    )

    assert not result.success
    assert result.message == "Request is not in a state to be processed by mentor"
    assert db.rows("mentor_requests")[0]["status"] == "pending"
    assert outbox.sent == []


def test_other_mentor_is_refused(db, make_request, outbox):
    request = make_request("admin_approved")

    result = service.process_mentor_decision(
        db, request["id"], MentorDecision(action="approve"), "someone@example.com"
    )

    assert not result.success
    assert result.message.startswith("Unauthorized")


# ------------------------------------------------------------------
# Token decisions
# ------------------------------------------------------------------


def _approve_as_admin(db, admin, request):
    service.process_admin_decision(db, admin["id"], request["id"], MentorDecision(action="approve"))
    return {t["action"]: t["id"] for t in db.rows("email_tokens")}


def test_token_decision_approves(db, admin, make_request, outbox):
    request = make_request()
    tokens = _approve_as_admin(db, admin, request)

    result = service.process_mentor_decision_by_token(
        db, tokens["approve"], MentorDecision(action="approve")
    )

    assert result.success
    assert db.rows("mentor_requests")[0]["status"] == "mentor_approved"
    used = {t["id"]: t["used"] for t in db.rows("email_tokens")}
    assert used[tokens["approve"]] is True


def test_token_cannot_be_used_twice(db, admin, make_request, outbox):
    request = make_request()
    tokens = _approve_as_admin(db, admin, request)

    first = service.process_mentor_decision_by_token(db, tokens[None], MentorDecision(action="reject"))
    second = service.process_mentor_decision_by_token(db, tokens[None], MentorDecision(action="reject"))

    assert first.success
    assert not second.success
    assert second.message == service.INVALID_TOKEN_MESSAGE


def test_scoped_token_rejects_other_action(db, admin, make_request, outbox):
    request = make_request()
    tokens = _approve_as_admin(db, admin, request)

    result = service.process_mentor_decision_by_token(
        db, tokens["approve"], MentorDecision(action="reject")
    )

    assert not result.success
    assert db.rows("mentor_requests")[0]["status"] == "admin_approved"


def test_sibling_token_fails_after_decision(db, admin, make_request, outbox):
    request = make_request()
    tokens = _approve_as_admin(db, admin, request)
    service.process_mentor_decision_by_token(db, tokens["approve"], MentorDecision(action="approve"))

    result = service.process_mentor_decision_by_token(
        db, tokens["reject"], MentorDecision(action="reject")
    )

    assert not result.success
    assert result.message == "Request is not in a state to be processed by mentor"
    assert db.rows("mentor_requests")[0]["status"] == "mentor_approved"


def test_token_mentor_mismatch(db, make_request, outbox):
    request = make_request("admin_approved")
    token_id = service.email_tokens.create_email_token(db, request["id"], "intruder@example.com")

    result = service.process_mentor_decision_by_token(db, token_id, MentorDecision(action="approve"))

    assert not result.success
    assert result.message.startswith("Unauthorized")


def test_unknown_token(db):
    result = service.process_mentor_decision_by_token(db, "nope", MentorDecision(action="approve"))
    assert result.message == service.INVALID_TOKEN_MESSAGE


# ------------------------------------------------------------------
# HTTP surface
# ------------------------------------------------------------------


def test_submit_over_http(client, login, student, mentor):
    login(student)

    r = client.post(
        "/api/v1/mentor-requests",
        json={"mentor_id": mentor["id"], "request_message": MESSAGE},
    )
    assert r.status_code == 201
    assert r.json()["success"] is True
    assert "outcome" not in r.json()

    r = client.post(
        "/api/v1/mentor-requests",
        json={"mentor_id": mentor["id"], "request_message": MESSAGE},
    )
    assert r.status_code == 409
    assert r.json()["detail"] == service.DUPLICATE_REQUEST_MESSAGE


def test_short_message_is_invalid(client, login, student, mentor):
    login(student)
    r = client.post(
        "/api/v1/mentor-requests",
        json={"mentor_id": mentor["id"], "request_message": "hi"},
    )
    assert r.status_code == 422


def test_my_requests(client, login, student, make_request):
    make_request()
    login(student)

    r = client.get("/api/v1/mentor-requests/me")
    assert r.status_code == 200
    assert r.json()["total"] == 1


def test_admin_list_requires_admin(client, login, student):
    login(student)
    r = client.get("/api/v1/mentor-requests")
    assert r.status_code == 403


def test_admin_list_and_decide(client, login, admin, make_request, outbox):
    request = make_request()
    login(admin)

    r = client.get("/api/v1/mentor-requests", params={"status": "pending"})
    assert r.status_code == 200
    assert r.json()["requests"][0]["id"] == request["id"]

    r = client.post(
        f"/api/v1/mentor-requests/{request['id']}/admin-decision",
        json={"action": "approve"},
    )
    assert r.status_code == 200

    r = client.post(
        f"/api/v1/mentor-requests/{request['id']}/admin-decision",
        json={"action": "approve"},
    )
    assert r.status_code == 409
