"""
Shared pytest fixtures for all tests.

Everything runs against the in-memory store with the clock pinned to
NOW, so time-window assertions are deterministic.
"""

import os

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

# Ensure test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["STORAGE_BACKEND"] = "memory"

from slotbook.app import create_app  # noqa: E402
from slotbook.models import AppointmentInDB, ProviderCreate, ProviderInDB  # noqa: E402
from slotbook.repositories import MemoryDatabase, memory_repositories  # noqa: E402
from slotbook.services import Services, build_services, fixed_clock  # noqa: E402

from tests.helpers import NOW  # noqa: E402


# ============================================================================
# STORE & SERVICES
# ============================================================================


@pytest.fixture
def memory_db() -> MemoryDatabase:
    return MemoryDatabase()


@pytest.fixture
def repositories(memory_db):
    return memory_repositories(memory_db)


@pytest.fixture
def services(repositories) -> Services:
    return build_services(repositories, fixed_clock(NOW))


@pytest_asyncio.fixture
async def provider(services) -> ProviderInDB:
    return await services.providers.add_provider(
        ProviderCreate(
            name="Dr. A",
            email="dr.a@example.com",
            specialization="Psychiatry",
            fees_per_session=80,
        )
    )


@pytest.fixture
def book_at(services):
    """Book the slot at ``time`` on ``date`` for ``patient_id``"""

    async def _book(provider_id: str, date: str, time: str, patient_id: str = "p1") -> AppointmentInDB:
        schedule = await services.schedules.get_or_create_date_schedule(provider_id, date)
        slot = next(s for s in schedule.slots if s.time == time)
        return await services.bookings.book_slot(
            provider_id, schedule.id, slot.id, patient_id, f"Patient {patient_id}"
        )

    return _book


# ============================================================================
# API
# ============================================================================


@pytest.fixture
def client(repositories):
    app = create_app(repositories=repositories, clock=fixed_clock(NOW))
    with TestClient(app) as test_client:
        yield test_client
