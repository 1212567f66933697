import uuid

from app.services import email_tokens


def test_non_mentor_is_refused(client, login, student):
    login(student)
    r = client.get("/api/v1/mentor/requests")
    assert r.status_code == 403


def test_mentor_sees_only_forwarded_requests(client, login, db, mentor, make_request):
    make_request("pending")
    forwarded = make_request("admin_approved", user_id=str(uuid.uuid4()))
    login({"id": mentor["id"], "email": mentor["email"]})

    r = client.get("/api/v1/mentor/requests")
    assert r.status_code == 200
    data = r.json()
    assert data["total"] == 1
    assert data["requests"][0]["id"] == forwarded["id"]


def test_request_detail_includes_student_profile(client, login, mentor, student, make_request):
    request = make_request("admin_approved")
    login({"id": mentor["id"], "email": mentor["email"]})

    r = client.get(f"/api/v1/mentor/requests/{request['id']}")
    assert r.status_code == 200
    data = r.json()
    assert data["request"]["id"] == request["id"]
    assert data["user_details"]["name"] == student["name"]
    assert data["user_details"]["college"] == "RCOEM"


def test_request_detail_falls_back_to_submission(client, login, db, mentor, make_request):
    applicant_id = str(uuid.uuid4())
    db.add(
        "submissions",
        uid=applicant_id,
        personal_info={"full_name": "Kiran Applicant", "email": "kiran@example.com", "course": "B.Tech"},
        technical_info={"technical_skills": ["python"]},
    )
    request = make_request("admin_approved", user_id=applicant_id)
    login({"id": mentor["id"], "email": mentor["email"]})

    r = client.get(f"/api/v1/mentor/requests/{request['id']}")
    assert r.status_code == 200
    details = r.json()["user_details"]
    assert details["name"] == "Kiran Applicant"
    assert details["skills"] == ["python"]


def test_request_detail_for_other_mentor(client, login, db, make_request):
    request = make_request("admin_approved")
    other = db.add("users", id=str(uuid.uuid4()), email="other@example.com", name="Other", role="MENTOR")
    login(other)

    r = client.get(f"/api/v1/mentor/requests/{request['id']}")
    assert r.status_code == 403


def test_mentor_decision_over_http(client, login, mentor, make_request, outbox):
    request = make_request("admin_approved")
    login({"id": mentor["id"], "email": mentor["email"]})

    r = client.post(
        f"/api/v1/mentor/requests/{request['id']}/decision",
        json={"action": "approve", "notes": "Welcome aboard"},
    )
    assert r.status_code == 200
    assert r.json()["success"] is True

    r = client.post(
        f"/api/v1/mentor/requests/{request['id']}/decision",
        json={"action": "reject"},
    )
    assert r.status_code == 409


def test_mentees_and_profile(client, login, mentor, student, make_request):
    make_request("mentor_approved", mentor_processed_at="2026-01-02T00:00:00+00:00")
    login({"id": mentor["id"], "email": mentor["email"]})

    r = client.get("/api/v1/mentor/mentees")
    assert r.status_code == 200
    assert r.json()["total"] == 1

    r = client.get(f"/api/v1/mentor/mentees/{student['id']}")
    assert r.status_code == 200
    assert r.json()["email"] == student["email"]


def test_mentee_profile_requires_relationship(client, login, mentor, student, make_request):
    make_request("admin_approved")
    login({"id": mentor["id"], "email": mentor["email"]})

    r = client.get(f"/api/v1/mentor/mentees/{student['id']}")
    assert r.status_code == 403


def test_token_links_work_without_login(client, db, make_request, outbox):
    request = make_request("admin_approved")
    token_id = email_tokens.create_email_token(db, request["id"], request["mentor_email"])

    r = client.get("/api/v1/mentor/requests/token", params={"token": token_id})
    assert r.status_code == 200
    assert r.json()["request"]["id"] == request["id"]
    assert r.json()["action"] is None

    r = client.post(
        "/api/v1/mentor/requests/token/decision",
        json={"token": token_id, "action": "reject", "notes": "Fully booked"},
    )
    assert r.status_code == 200

    r = client.post(
        "/api/v1/mentor/requests/token/decision",
        json={"token": token_id, "action": "reject"},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid or expired token."


def test_resolve_unknown_token(client):
    r = client.get("/api/v1/mentor/requests/token", params={"token": "missing"})
    assert r.status_code == 400
