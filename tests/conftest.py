"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests. It
points the settings at the testing environment and gives every test its own
in-memory database and rate limiter store.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DATABASE_AUTO_CREATE", "false")
os.environ.setdefault("AUTH_PASSWORD_HASH_ITERATIONS", "1000")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import Callable, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from areca.core.app_factory import create_app
from areca.core.config import settings
from areca.core.rate_limit import RateLimiterRegistry
from areca.db import models  # noqa: F401  (registers tables)
from areca.db.base import Base
from areca.db.session import build_engine, get_db, get_session_maker


@pytest.fixture
def engine() -> Iterator[Engine]:
    """Private in-memory SQLite database shared by all connections of one test."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return get_session_maker(engine)


@pytest.fixture
def db_session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def rate_limiters() -> RateLimiterRegistry:
    """Registry with the configured quotas and a fresh bucket store."""
    return RateLimiterRegistry.from_settings(settings.rate_limit)


@pytest.fixture
def upload_dir(tmp_path, monkeypatch) -> str:
    path = str(tmp_path / "uploads")
    monkeypatch.setattr(settings.app, "upload_dir", path)
    return path


@pytest.fixture
def app(session_factory: sessionmaker[Session], rate_limiters: RateLimiterRegistry, upload_dir: str) -> FastAPI:
    app = create_app(rate_limiters)

    def override_get_db() -> Iterator[Session]:
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def register_user(client: TestClient) -> Callable[..., dict]:
    """Register a user through the API and return the response body."""
    counter = {"n": 0}

    def _register(email: str | None = None, username: str | None = None, password: str = "s3cret-pass") -> dict:
        counter["n"] += 1
        payload = {
            "email": email or f"owner{counter['n']}@example.com",
            "username": username or f"owner{counter['n']}",
            "password": password,
            "firstName": "Test",
            "lastName": "Owner",
        }
        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def auth_headers(register_user) -> dict[str, str]:
    body = register_user()
    return {"Authorization": f"Bearer {body['token']}"}


@pytest.fixture
def other_auth_headers(register_user) -> dict[str, str]:
    body = register_user(email="someone.else@example.com", username="someoneelse")
    return {"Authorization": f"Bearer {body['token']}"}


@pytest.fixture
def create_employee(client: TestClient) -> Callable[..., dict]:
    def _create(headers: dict[str, str], name: str = "Ana", **extra) -> dict:
        response = client.post("/api/employees", json={"name": name, **extra}, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()["employee"]

    return _create


@pytest.fixture
def create_work_record(client: TestClient) -> Callable[..., dict]:
    def _create(headers: dict[str, str], employee_id: str, kilograms: float, date: str = "2024-03-01") -> dict:
        response = client.post(
            "/api/work-records",
            json={"employeeId": employee_id, "date": date, "kilograms": kilograms},
            headers=headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["workRecord"]

    return _create
