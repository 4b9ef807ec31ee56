# tests/conftest.py

import logging

import pytest
from fastapi.testclient import TestClient

from product_service import models  # noqa: F401  (registers the products table)
from product_service.config import Settings
from product_service.db import Base, create_db_engine, create_session_factory
from product_service.main import create_app

# Suppress noisy logs from SQLAlchemy/FastAPI during tests for cleaner output
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("uvicorn.error").setLevel(logging.WARNING)
logging.getLogger("fastapi").setLevel(logging.WARNING)


@pytest.fixture
def test_settings() -> Settings:
    # Every app built from these settings gets its own empty in-memory database.
    return Settings(
        database_url="sqlite://",
        db_connect_max_retries=1,
        db_connect_retry_delay_seconds=0,
        log_level="WARNING",
    )


@pytest.fixture
def client(test_settings: Settings):
    with TestClient(create_app(test_settings)) as test_client:
        yield test_client


@pytest.fixture
def db_session():
    engine = create_db_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def tablet_data():
    return {"name": "Tablet", "price": 399.99, "category": "Electronics"}
