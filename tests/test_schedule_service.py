import pytest

from slotbook.errors import NotFoundError
from slotbook.models import ProviderCreate

from tests.helpers import run_in_threads


class TestGetOrCreateDateSchedule:
    @pytest.mark.asyncio
    async def test_first_access_creates_template(self, services, provider):
        schedule = await services.schedules.get_or_create_date_schedule(provider.id, "2024-06-01")

        assert schedule.date == "2024-06-01"
        assert [s.time for s in schedule.slots] == ["09:00:00", "12:00:00", "15:00:00"]
        assert all(not s.is_booked for s in schedule.slots)

    @pytest.mark.asyncio
    async def test_second_access_returns_same_schedule(self, services, provider, memory_db):
        first = await services.schedules.get_or_create_date_schedule(provider.id, "2024-06-01")
        second = await services.schedules.get_or_create_date_schedule(provider.id, "2024-06-01")

        assert second == first
        assert len(memory_db.dates[provider.id]) == 1

    @pytest.mark.asyncio
    async def test_existing_schedule_reflects_bookings(self, services, provider, book_at):
        await book_at(provider.id, "2024-06-01", "09:00:00")

        schedule = await services.schedules.get_or_create_date_schedule(provider.id, "2024-06-01")

        assert [s.is_booked for s in schedule.slots] == [True, False, False]

    @pytest.mark.asyncio
    async def test_dates_are_opaque_strings(self, services, provider):
        a = await services.schedules.get_or_create_date_schedule(provider.id, "2024-06-01")
        b = await services.schedules.get_or_create_date_schedule(provider.id, "2024-6-1")

        assert a.id != b.id
        schedules = await services.schedules.list_date_schedules(provider.id)
        assert [s.date for s in schedules] == ["2024-06-01", "2024-6-1"]

    @pytest.mark.asyncio
    async def test_unknown_provider(self, services):
        with pytest.raises(NotFoundError) as exc_info:
            await services.schedules.get_or_create_date_schedule("nobody", "2024-06-01")

        assert exc_info.value.entity == "Provider"

    @pytest.mark.asyncio
    async def test_schedules_are_per_provider(self, services, provider):
        other = await services.providers.add_provider(
            ProviderCreate(name="Dr. B", email="dr.b@example.com")
        )
        mine = await services.schedules.get_or_create_date_schedule(provider.id, "2024-06-01")
        theirs = await services.schedules.get_or_create_date_schedule(other.id, "2024-06-01")

        assert mine.id != theirs.id


class TestConcurrentScheduleCreation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("callers", [2, 8])
    async def test_one_schedule_per_date(self, services, provider, memory_db, callers):
        results = run_in_threads(
            callers,
            lambda _: services.schedules.get_or_create_date_schedule(provider.id, "2024-07-15"),
        )

        assert not [r for r in results if isinstance(r, Exception)]
        assert len({r.id for r in results}) == 1

        stored = [d for d in memory_db.dates[provider.id] if d.date == "2024-07-15"]
        assert len(stored) == 1
        assert [s.time for s in stored[0].slots] == ["09:00:00", "12:00:00", "15:00:00"]
        assert not any(s.is_booked for s in stored[0].slots)
