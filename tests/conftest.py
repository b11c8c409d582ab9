"""Shared fixtures: an isolated store, a fresh app, and signed-in clients."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from itertools import count
from typing import Any, Callable

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.main import create_app
from app.models import User, UserRole
from app.services.storage import TrainingStore

PASSWORD = "s3cure-pass"

_usernames = count(1)


@dataclass
class Actor:
    """A signed-in test client together with the profile it registered."""

    client: TestClient
    user: dict[str, Any]

    @property
    def id(self) -> int:
        return self.user["id"]


@pytest.fixture
def store() -> TrainingStore:
    return TrainingStore()


@pytest.fixture
def app(store: TrainingStore) -> FastAPI:
    return create_app(store=store, seed=False)


@pytest.fixture
def client(app: FastAPI):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_actor(app: FastAPI) -> Callable[..., Actor]:
    """Register a user through the API on its own client so cookies don't mix."""

    clients: list[TestClient] = []

    def _make(role: UserRole = UserRole.STUDENT, **overrides: Any) -> Actor:
        n = next(_usernames)
        payload = {
            "username": f"{role.value}{n}",
            "password": PASSWORD,
            "email": f"{role.value}{n}@example.com",
            "firstName": role.value.title(),
            "lastName": f"Number{n}",
            "role": role.value,
        }
        payload.update(overrides)

        test_client = TestClient(app)
        clients.append(test_client)
        response = test_client.post("/api/auth/register", json=payload)
        assert response.status_code == 201, response.text
        return Actor(client=test_client, user=response.json())

    yield _make

    for test_client in clients:
        test_client.close()


@pytest.fixture
def student(make_actor) -> Actor:
    return make_actor(UserRole.STUDENT)


@pytest.fixture
def instructor(make_actor) -> Actor:
    return make_actor(UserRole.INSTRUCTOR)


@pytest.fixture
def people(store: TrainingStore) -> dict[str, User]:
    """Two instructors and two students created straight in the store."""

    def _user(username: str, role: UserRole) -> User:
        return store.create_user(
            username=username,
            password_hash="unused",
            email=f"{username}@example.com",
            first_name=username.title(),
            last_name="Tester",
            role=role,
        )

    return {
        "sarah": _user("sarah", UserRole.INSTRUCTOR),
        "michael": _user("michael", UserRole.INSTRUCTOR),
        "alex": _user("alex", UserRole.STUDENT),
        "jamie": _user("jamie", UserRole.STUDENT),
    }


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)
