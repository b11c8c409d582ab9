"""Cache invalidation in the API client."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.client import INVALIDATIONS, ApiError, QueryCache, TrainingApiClient
from app.models import UserRole


@pytest.fixture
def aircraft(store):
    return store.create_aircraft(tail_number="N2234A", type="Piper PA-28", model="Archer")


@pytest.fixture
def api(student) -> TrainingApiClient:
    return TrainingApiClient(session=student.client)


def test_query_cache_prefix_invalidation():
    cache = QueryCache()
    cache.set(("flightlogs",), [1])
    cache.set(("flightlogs", "instructor"), [2])
    cache.set(("dashboard", "student"), {})

    assert cache.invalidate(("flightlogs",)) == 2
    assert ("dashboard", "student") in cache
    assert len(cache) == 1


def test_every_mutation_has_invalidations():
    assert all(INVALIDATIONS.values())
    assert ("dashboard", "student") in INVALIDATIONS["create_flight_log"]
    assert ("instructor", "students") in INVALIDATIONS["update_flight_log_status"]


def test_reads_are_cached(api, store):
    first = api.student_dashboard()
    store.flight_logs.clear()

    assert api.student_dashboard() is first


def test_creating_a_flight_log_refreshes_dashboard(api, aircraft):
    before = api.student_dashboard()
    api.flight_logs()
    api.aircraft()

    api.create_flight_log(
        aircraftId=aircraft.id,
        date=datetime.now(timezone.utc).isoformat(),
        duration=1.7,
        departureAirport="KBOS",
        destinationAirport="KBED",
        flightType="solo",
    )

    assert ("aircraft",) in api.cache
    assert ("flightlogs",) not in api.cache
    assert ("dashboard", "student") not in api.cache

    after = api.student_dashboard()
    assert before["totalHours"] == 0
    assert after["soloHours"] == pytest.approx(1.7)
    assert len(api.flight_logs()) == 1


def test_opening_a_conversation_refreshes_contacts(api, make_actor, student):
    instructor = make_actor(UserRole.INSTRUCTOR)
    TrainingApiClient(session=instructor.client).send_message(student.id, "See you at 2PM")

    assert api.contacts()[0]["unreadCount"] == 1

    conversation = api.conversation(instructor.id)

    assert conversation[0]["isRead"] is True
    assert api.contacts()[0]["unreadCount"] == 0


def test_errors_carry_status_and_message(api):
    with pytest.raises(ApiError) as excinfo:
        api.instructor_dashboard()

    assert excinfo.value.status == 403
    assert excinfo.value.message == "Forbidden. Insufficient permissions."
    assert ("dashboard", "instructor") not in api.cache


def test_logout_clears_cache(api):
    api.me()
    api.logout()

    assert len(api.cache) == 0
    with pytest.raises(ApiError) as excinfo:
        api.me()
    assert excinfo.value.status == 401


def test_reviewing_a_log_refreshes_instructor_student_list(api, make_actor, student, aircraft):
    instructor = make_actor(UserRole.INSTRUCTOR)
    reviewer = TrainingApiClient(session=instructor.client)
    assert reviewer.my_students() == []

    log = api.create_flight_log(
        aircraftId=aircraft.id,
        date=datetime.now(timezone.utc).isoformat(),
        duration=1.2,
        departureAirport="KBOS",
        destinationAirport="KBED",
        flightType="dual",
    )
    reviewer.update_flight_log_status(log["id"], "approved")

    assert [s["id"] for s in reviewer.my_students()] == [student.id]
    assert reviewer.instructor_dashboard()["totalStudents"] == 1


def test_instructor_booking_refreshes_instructor_views(make_actor, student):
    instructor = make_actor(UserRole.INSTRUCTOR)
    client = TrainingApiClient(session=instructor.client)
    assert client.instructor_bookings() == []
    assert client.instructor_dashboard()["totalStudents"] == 0
    assert client.my_students() == []

    start = datetime.now(timezone.utc) + timedelta(days=1)
    client.create_booking(
        studentId=student.id,
        instructorId=instructor.id,
        startTime=start.isoformat(),
        endTime=(start + timedelta(hours=2)).isoformat(),
        trainingType="pattern",
    )

    assert len(client.instructor_bookings()) == 1
    assert client.instructor_dashboard()["totalStudents"] == 1
    assert [s["id"] for s in client.my_students()] == [student.id]
