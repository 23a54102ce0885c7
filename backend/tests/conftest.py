"""Pytest configuration and shared fixtures for Patient Registry backend tests.

This module provides common fixtures for testing the backend components
including database engines, sessions, an API client and payload factories.
"""

from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from patient_registry.models import PatientAddress
from patient_registry.models.base import create_db_engine, create_session_maker, init_models


@pytest.fixture
async def db_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a file-backed SQLite database with all tables."""
    engine = create_db_engine(f"sqlite+aiosqlite:///{tmp_path / 'registry.db'}")
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test database."""
    return create_session_maker(db_engine)


@pytest.fixture
async def db_session(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Provide a session for a single test."""
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the full application wired to the test database."""
    from patient_registry.main import create_application

    app = create_application()
    # ASGITransport does not run the lifespan, so install the session factory directly
    app.state.db_session_maker = session_maker

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


@pytest.fixture
def primary_address() -> dict[str, Any]:
    """Primary address payload."""
    return {
        "addressLine1": "1 Main St",
        "city": "Springfield",
        "state": "IL",
        "zipCode": "62704",
    }


@pytest.fixture
def secondary_address() -> dict[str, Any]:
    """Secondary (work) address payload."""
    return {
        "addressLine1": "200 Office Park",
        "addressLine2": "Suite 12",
        "city": "Chicago",
        "state": "IL",
        "zipCode": "60601",
        "addressType": "work",
    }


@pytest.fixture
def patient_payload(primary_address: dict[str, Any]) -> dict[str, Any]:
    """Minimal valid patient creation payload."""
    return {
        "firstName": "Jane",
        "lastName": "Doe",
        "dateOfBirth": "1990-01-01",
        "address": primary_address,
    }


@pytest.fixture
def make_patient_payload(
    patient_payload: dict[str, Any],
) -> Callable[..., dict[str, Any]]:
    """Factory returning a copy of the base payload with overrides applied."""

    def factory(**overrides: Any) -> dict[str, Any]:
        payload = dict(patient_payload)
        payload.update(overrides)
        return payload

    return factory


@pytest.fixture
def failing_address_insert():
    """Make every address INSERT fail after the patient row was written."""

    def fail(mapper, connection, target) -> None:
        raise OperationalError(
            "INSERT INTO patient_addresses", {}, Exception("disk I/O error")
        )

    event.listen(PatientAddress, "before_insert", fail)
    yield
    event.remove(PatientAddress, "before_insert", fail)
