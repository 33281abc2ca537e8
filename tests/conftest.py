from __future__ import annotations

import os
from typing import Any

import pytest
from fastapi.testclient import TestClient


def pytest_configure() -> None:
    # Ensure the SQLAlchemy engine is created against sqlite for tests.
    os.environ.setdefault("DB_URL", "sqlite:///./test.db")
    os.environ["ORM_DB_URL"] = "sqlite:///./test.db"
    os.environ["ORM_USE_MYSQL"] = "false"
    os.environ.setdefault("ADMIN_EMAILS", '["admin@example.com"]')

    # Ensure a local .env cannot point the tests at a shared database.
    os.environ["ENVIRONMENT"] = "test"


def reset_database() -> None:
    from careerlink.database import Base, engine
    from careerlink import models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


@pytest.fixture()
def db() -> Any:
    from careerlink.database import SessionLocal

    reset_database()
    with SessionLocal() as session:
        yield session


@pytest.fixture()
def client(monkeypatch: pytest.MonkeyPatch) -> Any:
    # Ensure admin check can be exercised in tests.
    monkeypatch.setenv("ADMIN_EMAILS", '["admin@example.com"]')

    from careerlink.main import create_app

    reset_database()

    app = create_app()
    with TestClient(app) as c:
        yield c
