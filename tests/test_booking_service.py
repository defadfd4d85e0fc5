import pytest

from slotbook.errors import AlreadyBookedError, NotFoundError
from slotbook.models import ProviderUpdate

from tests.helpers import run_in_threads


@pytest.fixture
def open_date(services, provider):
    async def _open(date: str = "2024-06-01"):
        return await services.schedules.get_or_create_date_schedule(provider.id, date)

    return _open


class TestBookSlot:
    @pytest.mark.asyncio
    async def test_booking_snapshots_provider_and_slot(self, services, provider, open_date):
        schedule = await open_date()
        noon = schedule.slots[1]

        appointment = await services.bookings.book_slot(
            provider.id, schedule.id, noon.id, "p1", "Pat One"
        )

        assert appointment.doctor_id == provider.id
        assert appointment.date_id == schedule.id
        assert appointment.slot_id == noon.id
        assert appointment.patient_id == "p1"
        assert appointment.date == "2024-06-01"
        assert appointment.slot_time == "12:00:00"
        assert appointment.doctor_name == "Dr. A"
        assert appointment.doctor_email == "dr.a@example.com"
        assert appointment.patient_name == "Pat One"
        assert appointment.meet_link == ""
        assert appointment.feedback.given is False

    @pytest.mark.asyncio
    async def test_booking_marks_only_that_slot(self, services, provider, open_date):
        schedule = await open_date()
        await services.bookings.book_slot(provider.id, schedule.id, schedule.slots[2].id, "p1", "")

        schedule = await open_date()
        assert [s.is_booked for s in schedule.slots] == [False, False, True]

    @pytest.mark.asyncio
    async def test_second_claim_is_rejected(self, services, provider, open_date, memory_db):
        schedule = await open_date()
        slot = schedule.slots[0]
        await services.bookings.book_slot(provider.id, schedule.id, slot.id, "p1", "")

        with pytest.raises(AlreadyBookedError):
            await services.bookings.book_slot(provider.id, schedule.id, slot.id, "p2", "")

        assert len(memory_db.appointments) == 1

    @pytest.mark.asyncio
    async def test_unknown_provider_is_reported_before_slot(self, services, open_date):
        with pytest.raises(NotFoundError) as exc_info:
            await services.bookings.book_slot("nobody", "no-date", "no-slot", "p1", "")

        assert exc_info.value.entity == "Provider"

    @pytest.mark.asyncio
    async def test_unknown_date(self, services, provider, open_date):
        await open_date()
        with pytest.raises(NotFoundError) as exc_info:
            await services.bookings.book_slot(provider.id, "no-date", "no-slot", "p1", "")

        assert exc_info.value.entity == "Date"

    @pytest.mark.asyncio
    async def test_date_is_resolved_by_id_not_date_string(self, services, provider, open_date):
        schedule = await open_date()
        with pytest.raises(NotFoundError) as exc_info:
            await services.bookings.book_slot(
                provider.id, "2024-06-01", schedule.slots[0].id, "p1", ""
            )

        assert exc_info.value.entity == "Date"

    @pytest.mark.asyncio
    async def test_unknown_slot(self, services, provider, open_date, memory_db):
        schedule = await open_date()
        with pytest.raises(NotFoundError) as exc_info:
            await services.bookings.book_slot(provider.id, schedule.id, "no-slot", "p1", "")

        assert exc_info.value.entity == "Slot"
        assert memory_db.appointments == {}

    @pytest.mark.asyncio
    async def test_slot_of_another_date_is_not_found(self, services, provider, open_date):
        june = await open_date("2024-06-01")
        july = await open_date("2024-07-01")

        with pytest.raises(NotFoundError) as exc_info:
            await services.bookings.book_slot(provider.id, july.id, june.slots[0].id, "p1", "")

        assert exc_info.value.entity == "Slot"

    @pytest.mark.asyncio
    async def test_snapshot_survives_provider_rename(self, services, provider, open_date):
        schedule = await open_date()
        booked = await services.bookings.book_slot(
            provider.id, schedule.id, schedule.slots[1].id, "p1", "Pat One"
        )

        await services.providers.update_provider(provider.id, ProviderUpdate(name="Dr. Renamed"))
        fetched = await services.appointments.find_by_id(booked.id)

        assert fetched.doctor_name == "Dr. A"
        assert fetched.date == "2024-06-01"
        assert fetched.slot_time == "12:00:00"
        assert fetched == booked


class TestAtomicClaim:
    @pytest.mark.asyncio
    async def test_failed_appointment_build_leaves_slot_free(self, repositories, provider, memory_db):
        schedule, _ = await repositories.schedules.get_or_create_date(provider.id, "2024-06-01")

        def broken_builder(provider, schedule, slot):
            raise RuntimeError("store rejected the appointment")

        with pytest.raises(RuntimeError):
            await repositories.schedules.claim_slot(
                provider.id, schedule.id, schedule.slots[0].id, broken_builder
            )

        stored = memory_db.dates[provider.id][0]
        assert stored.slots[0].is_booked is False
        assert memory_db.appointments == {}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("callers", [2, 10])
    async def test_concurrent_claims_have_one_winner(
        self, services, provider, open_date, memory_db, callers
    ):
        schedule = await open_date()
        slot = schedule.slots[1]

        results = run_in_threads(
            callers,
            lambda i: services.bookings.book_slot(
                provider.id, schedule.id, slot.id, f"p{i}", f"Patient {i}"
            ),
        )

        winners = [r for r in results if not isinstance(r, Exception)]
        losers = [r for r in results if isinstance(r, Exception)]
        assert len(winners) == 1
        assert len(losers) == callers - 1
        assert all(isinstance(r, AlreadyBookedError) for r in losers)

        for_slot = [a for a in memory_db.appointments.values() if a.slot_id == slot.id]
        assert len(for_slot) == 1
        assert for_slot[0].patient_id == winners[0].patient_id


class TestScenario:
    @pytest.mark.asyncio
    async def test_two_patients_one_slot(self, services, provider, open_date):
        schedule = await open_date("2024-06-01")
        noon = next(s for s in schedule.slots if s.time == "12:00:00")

        booked = await services.bookings.book_slot(provider.id, schedule.id, noon.id, "p1", "P One")
        assert booked.slot_time == "12:00:00"
        assert booked.feedback.given is False

        with pytest.raises(AlreadyBookedError):
            await services.bookings.book_slot(provider.id, schedule.id, noon.id, "p2", "P Two")

        listed = await services.appointments.list_by_provider(provider.id)
        assert [a.patient_id for a in listed] == ["p1"]
