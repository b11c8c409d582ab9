"""End-to-end behaviour of the HTTP API."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.models import FlightLogStatus, UserRole

from conftest import PASSWORD


@pytest.fixture
def aircraft(store):
    return store.create_aircraft(tail_number="N7711L", type="Cessna 152", model="Aerobat")


def _future(hours: float) -> str:
    return (datetime.now(timezone.utc) + timedelta(hours=hours)).isoformat()


def _flight_log_body(aircraft_id: int, **overrides):
    body = {
        "aircraftId": aircraft_id,
        "date": datetime.now(timezone.utc).isoformat(),
        "duration": 2.5,
        "departureAirport": "KBOS",
        "destinationAirport": "KBED",
        "flightType": "solo",
    }
    body.update(overrides)
    return body


# ---------------------------------------------------------------- auth


def test_service_endpoints(client):
    assert client.get("/health").json()["status"] == "healthy"
    assert client.get("/").json()["status"] == "operational"
    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert "http_requests_total" in metrics.text


def test_protected_routes_require_session(client):
    for method, path in [
        ("get", "/api/auth/me"),
        ("get", "/api/dashboard/student"),
        ("get", "/api/messages/contacts"),
        ("post", "/api/bookings"),
    ]:
        response = getattr(client, method)(path)
        assert response.status_code == 401, path
        assert response.json() == {"message": "Unauthorized. Please log in."}


def test_register_login_me_logout(client, student):
    assert "passwordHash" not in student.user
    assert student.client.get("/api/auth/me").json()["username"] == student.user["username"]

    login = client.post(
        "/api/auth/login",
        json={"username": student.user["username"], "password": PASSWORD},
    )
    assert login.status_code == 200
    assert login.json()["role"] == "student"
    assert client.get("/api/auth/me").status_code == 200

    assert client.post("/api/auth/logout").json() == {"message": "Logged out successfully"}
    assert client.get("/api/auth/me").status_code == 401


def test_logout_revokes_the_token_itself(app, student):
    token = student.client.cookies.get("session")
    student.client.post("/api/auth/logout")

    with TestClient(app) as replay:
        response = replay.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_bearer_header_is_accepted(app, student):
    token = student.client.cookies.get("session")

    with TestClient(app) as other:
        response = other.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["id"] == student.id


def test_logout_without_session_succeeds(client):
    assert client.post("/api/auth/logout").status_code == 200


def test_bad_credentials_rejected(client, student):
    response = client.post(
        "/api/auth/login",
        json={"username": student.user["username"], "password": "wrong-password"},
    )

    assert response.status_code == 401
    assert response.json() == {"message": "Invalid username or password"}


def test_duplicate_registration_rejected(student):
    response = student.client.post(
        "/api/auth/register",
        json={
            "username": student.user["username"],
            "password": PASSWORD,
            "email": "someone.else@example.com",
            "firstName": "Some",
            "lastName": "One",
        },
    )

    assert response.status_code == 400
    assert response.json() == {"message": "Username already exists"}


def test_validation_errors_are_400_with_message(client):
    response = client.post("/api/auth/register", json={"username": "ab"})

    assert response.status_code == 400
    assert response.json()["message"].startswith("Validation error:")


def test_role_gates(student, instructor):
    assert student.client.get("/api/dashboard/instructor").status_code == 403
    assert instructor.client.get("/api/dashboard/student").status_code == 403
    assert student.client.get("/api/instructor/students").json() == {
        "message": "Forbidden. Insufficient permissions."
    }


# ------------------------------------------------------------ bookings


def test_booking_round_trip(student, instructor, aircraft):
    created = student.client.post(
        "/api/bookings",
        json={
            "instructorId": instructor.id,
            "startTime": _future(24),
            "endTime": _future(26),
            "trainingType": "pattern",
            "aircraftId": aircraft.id,
        },
    )
    assert created.status_code == 201
    booking = created.json()
    assert booking["status"] == "pending"
    assert booking["studentId"] == student.id

    assert [b["id"] for b in student.client.get("/api/bookings/student").json()] == [booking["id"]]
    assert student.client.get(f"/api/bookings/{booking['id']}").json() == booking

    confirmed = instructor.client.patch(
        f"/api/bookings/{booking['id']}/status", json={"status": "confirmed"}
    )
    assert confirmed.json()["status"] == "confirmed"
    assert instructor.client.get("/api/bookings/instructor").json()[0]["status"] == "confirmed"


def test_booking_time_range_validated(student):
    response = student.client.post(
        "/api/bookings",
        json={"startTime": _future(5), "endTime": _future(4), "trainingType": "pattern"},
    )

    assert response.status_code == 400
    assert "endTime must be after startTime" in response.json()["message"]


def test_student_cannot_book_for_someone_else(student, make_actor):
    other = make_actor(UserRole.STUDENT)

    response = student.client.post(
        "/api/bookings",
        json={
            "studentId": other.id,
            "startTime": _future(5),
            "endTime": _future(6),
            "trainingType": "pattern",
        },
    )

    assert response.status_code == 403


def test_unknown_instructor_is_rejected(student):
    response = student.client.post(
        "/api/bookings",
        json={
            "instructorId": 999,
            "startTime": _future(5),
            "endTime": _future(6),
            "trainingType": "pattern",
        },
    )

    assert response.status_code == 400
    assert "999" in response.json()["message"]


def test_booking_not_found_and_not_owned(student, make_actor, instructor):
    assert instructor.client.patch(
        "/api/bookings/999/status", json={"status": "confirmed"}
    ).status_code == 404
    assert student.client.get("/api/bookings/999").status_code == 404

    other = make_actor(UserRole.STUDENT)
    created = other.client.post(
        "/api/bookings",
        json={"startTime": _future(5), "endTime": _future(6), "trainingType": "pattern"},
    ).json()
    assert student.client.get(f"/api/bookings/{created['id']}").status_code == 403
    assert instructor.client.get(f"/api/bookings/{created['id']}").status_code == 200


# --------------------------------------------------------- flight logs


def test_solo_flight_updates_dashboard(student, aircraft):
    created = student.client.post("/api/flightlogs", json=_flight_log_body(aircraft.id))
    assert created.status_code == 201
    assert created.json()["status"] == "pending"

    dashboard = student.client.get("/api/dashboard/student").json()

    assert dashboard["totalHours"] == pytest.approx(2.5)
    assert dashboard["soloHours"] == pytest.approx(2.5)
    assert dashboard["crossCountryHours"] == 0
    assert [log["id"] for log in dashboard["recentLogs"]] == [created.json()["id"]]


def test_invalid_flight_log_status_leaves_record_unchanged(student, instructor, aircraft):
    log = student.client.post(
        "/api/flightlogs", json=_flight_log_body(aircraft.id, instructorId=instructor.id)
    ).json()

    response = instructor.client.patch(
        f"/api/flightlogs/{log['id']}/status", json={"status": "bogus"}
    )

    assert response.status_code == 400
    assert student.client.get("/api/flightlogs").json()[0]["status"] == "pending"


def test_instructor_reviews_pending_log(store, student, instructor, aircraft):
    log = student.client.post(
        "/api/flightlogs", json=_flight_log_body(aircraft.id, instructorId=instructor.id)
    ).json()

    pending = instructor.client.get("/api/flightlogs/instructor").json()
    assert [item["id"] for item in pending] == [log["id"]]

    approved = instructor.client.patch(
        f"/api/flightlogs/{log['id']}/status", json={"status": "approved"}
    ).json()

    assert approved["status"] == "approved"
    assert store.get_flight_log(log["id"]).status == FlightLogStatus.APPROVED
    assert instructor.client.get("/api/flightlogs/instructor").json() == []
    students = instructor.client.get("/api/instructor/students").json()
    assert [s["id"] for s in students] == [student.id]
    assert "passwordHash" not in students[0]


def test_students_cannot_review_logs(student, aircraft):
    log = student.client.post("/api/flightlogs", json=_flight_log_body(aircraft.id)).json()

    response = student.client.patch(
        f"/api/flightlogs/{log['id']}/status", json={"status": "approved"}
    )

    assert response.status_code == 403


def test_non_positive_duration_rejected(student, aircraft):
    response = student.client.post(
        "/api/flightlogs", json=_flight_log_body(aircraft.id, duration=0)
    )

    assert response.status_code == 400


# ---------------------------------------------------------- milestones


def test_milestone_lifecycle(student, instructor):
    created = instructor.client.post(
        "/api/milestones",
        json={"studentId": student.id, "title": "First Solo", "requiredHours": 20},
    )
    assert created.status_code == 201
    milestone = created.json()
    assert milestone["status"] == "not_started"

    progressed = student.client.patch(
        f"/api/milestones/{milestone['id']}/progress", json={"progress": 100}
    ).json()
    assert progressed["status"] == "completed"
    assert progressed["completionDate"] is not None

    completed = instructor.client.patch(f"/api/milestones/{milestone['id']}/complete").json()
    assert completed["approvedBy"] == instructor.id
    assert completed["completionDate"] == progressed["completionDate"]

    assert [m["id"] for m in student.client.get("/api/milestones").json()] == [milestone["id"]]
    listed = instructor.client.get(f"/api/milestones/student/{student.id}").json()
    assert listed[0]["status"] == "completed"


def test_students_only_update_their_own_milestones(student, make_actor, instructor):
    other = make_actor(UserRole.STUDENT)
    milestone = instructor.client.post(
        "/api/milestones", json={"studentId": other.id, "title": "Night Flying"}
    ).json()

    response = student.client.patch(
        f"/api/milestones/{milestone['id']}/progress", json={"progress": 50}
    )

    assert response.status_code == 403
    assert student.client.patch("/api/milestones/999/progress", json={"progress": 5}).status_code == 404


def test_progress_out_of_range_rejected(student, instructor):
    milestone = instructor.client.post(
        "/api/milestones", json={"studentId": student.id, "title": "Checkride"}
    ).json()

    response = student.client.patch(
        f"/api/milestones/{milestone['id']}/progress", json={"progress": 120}
    )

    assert response.status_code == 400


# ------------------------------------------------------------ messages


def test_reading_a_conversation_marks_it_read(student, instructor):
    for text in ("Preflight at 1:30", "Bring your logbook"):
        sent = instructor.client.post(
            "/api/messages", json={"receiverId": student.id, "content": text}
        )
        assert sent.status_code == 201

    contacts = student.client.get("/api/messages/contacts").json()
    assert contacts[0]["id"] == instructor.id
    assert contacts[0]["unreadCount"] == 2

    conversation = student.client.get(f"/api/messages/{instructor.id}").json()
    assert [m["content"] for m in conversation] == ["Preflight at 1:30", "Bring your logbook"]
    assert all(m["isRead"] for m in conversation)

    contacts = student.client.get("/api/messages/contacts").json()
    assert contacts[0]["unreadCount"] == 0


def test_mark_read_endpoint(student, instructor):
    instructor.client.post("/api/messages", json={"receiverId": student.id, "content": "Hi"})

    response = student.client.patch(f"/api/messages/read/{instructor.id}")

    assert response.json() == {"message": "Messages marked as read", "updated": 1}


def test_message_to_unknown_user(student):
    response = student.client.post("/api/messages", json={"receiverId": 999, "content": "hello"})

    assert response.status_code == 404


# ------------------------------------------------------------ dashboard


def test_instructor_dashboard_counts(student, instructor, aircraft):
    student.client.post(
        "/api/bookings",
        json={
            "instructorId": instructor.id,
            "startTime": _future(48),
            "endTime": _future(50),
            "trainingType": "navigation",
        },
    )

    dashboard = instructor.client.get("/api/dashboard/instructor").json()

    assert dashboard["totalStudents"] == 1
    assert len(dashboard["pendingBookings"]) == 1
    assert dashboard["pendingLogs"] == []


def test_aircraft_and_instructor_directory(student, instructor, aircraft):
    assert [a["tailNumber"] for a in student.client.get("/api/aircraft").json()] == ["N7711L"]
    instructors = student.client.get("/api/users/instructors").json()
    assert [i["id"] for i in instructors] == [instructor.id]


def test_unexpected_errors_are_generic_500(app, store, student, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(store, "get_bookings_by_student", explode)
    token = student.client.cookies.get("session")

    with TestClient(app, raise_server_exceptions=False) as quiet:
        response = quiet.get(
            "/api/bookings/student", headers={"Authorization": f"Bearer {token}"}
        )

    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error"}
