"""
Repository interfaces for the scheduling core.

Services depend only on these protocols; the concrete store is picked at
startup (Firestore in deployment, in-memory for local runs and tests).
Operations that guard an invariant (``get_or_create_date``, ``claim_slot``,
``PatientRepository.create``) must be implemented as a single conditional
write against the store, never as a separate read followed by a write.
"""

from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple, runtime_checkable

from slotbook.models import (
    AppointmentInDB,
    DateSchedule,
    PatientInDB,
    ProviderInDB,
    Slot,
)

# (provider, schedule, slot) -> appointment to persist alongside the claim
AppointmentBuilder = Callable[[ProviderInDB, DateSchedule, Slot], AppointmentInDB]


@runtime_checkable
class ProviderRepository(Protocol):
    async def create(self, provider: ProviderInDB) -> ProviderInDB: ...

    async def find_by_id(self, provider_id: str) -> Optional[ProviderInDB]: ...

    async def find_all(self) -> List[ProviderInDB]: ...

    async def update(self, provider_id: str, changes: Dict[str, Any]) -> Optional[ProviderInDB]:
        """Apply field changes; None if the provider does not exist"""
        ...


@runtime_checkable
class ScheduleRepository(Protocol):
    async def list_dates(self, provider_id: str) -> List[DateSchedule]:
        """Schedules of a provider in creation order"""
        ...

    async def get_or_create_date(self, provider_id: str, date: str) -> Tuple[DateSchedule, bool]:
        """
        Return the provider's schedule for ``date``, inserting one built from
        the daily template if none exists yet.

        Returns:
            (schedule, created)

        Raises:
            NotFoundError: Provider does not exist
        """
        ...

    async def claim_slot(
        self,
        provider_id: str,
        date_id: str,
        slot_id: str,
        build_appointment: AppointmentBuilder,
    ) -> AppointmentInDB:
        """
        Atomically flip a free slot to booked and persist the appointment
        produced by ``build_appointment``.

        Raises:
            NotFoundError: Provider, Date or Slot (resolved in that order)
            AlreadyBookedError: the slot was already booked
        """
        ...


@runtime_checkable
class AppointmentRepository(Protocol):
    async def find_by_id(self, appointment_id: str) -> Optional[AppointmentInDB]: ...

    async def find_by_doctor(self, doctor_id: str) -> List[AppointmentInDB]: ...

    async def find_by_patient(self, patient_id: str) -> List[AppointmentInDB]: ...

    async def update(self, appointment_id: str, changes: Dict[str, Any]) -> Optional[AppointmentInDB]:
        """Overwrite top-level fields; None if the appointment does not exist"""
        ...


@runtime_checkable
class PatientRepository(Protocol):
    async def create(self, patient: PatientInDB) -> PatientInDB:
        """
        Insert only if no patient with the same id exists.

        Raises:
            ConflictOnCreateError: identity already registered
        """
        ...

    async def find_by_id(self, patient_id: str) -> Optional[PatientInDB]: ...

    async def find_all(self) -> List[PatientInDB]: ...

    async def update(self, patient_id: str, changes: Dict[str, Any]) -> Optional[PatientInDB]: ...
