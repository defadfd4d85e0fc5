"""
In-process store used for local development and the test suite.

All repositories built on the same ``MemoryDatabase`` share one re-entrant
lock; every guarded operation runs its read-check-write under that lock, so
concurrent callers (threads or tasks) observe the same exclusivity the
Firestore transactions provide. Records are copied on the way in and out so
callers never hold live references into the store.
"""

import threading
from typing import Any, Dict, List, Optional, Tuple

from slotbook.errors import AlreadyBookedError, ConflictOnCreateError, NotFoundError
from slotbook.models import AppointmentInDB, DateSchedule, PatientInDB, ProviderInDB
from slotbook.models._common import utcnow

from .base import AppointmentBuilder


class MemoryDatabase:
    """Shared state for the in-memory repositories"""

    def __init__(self):
        self.lock = threading.RLock()
        self.providers: Dict[str, ProviderInDB] = {}
        # provider_id -> schedules in creation order
        self.dates: Dict[str, List[DateSchedule]] = {}
        self.appointments: Dict[str, AppointmentInDB] = {}
        self.patients: Dict[str, PatientInDB] = {}


class MemoryProviderRepository:
    def __init__(self, db: MemoryDatabase):
        self.db = db

    async def create(self, provider: ProviderInDB) -> ProviderInDB:
        with self.db.lock:
            if provider.id in self.db.providers:
                raise ConflictOnCreateError("Provider", provider.id)
            self.db.providers[provider.id] = provider.model_copy(deep=True)
            self.db.dates.setdefault(provider.id, [])
        return provider.model_copy(deep=True)

    async def find_by_id(self, provider_id: str) -> Optional[ProviderInDB]:
        with self.db.lock:
            provider = self.db.providers.get(provider_id)
            return provider.model_copy(deep=True) if provider else None

    async def find_all(self) -> List[ProviderInDB]:
        with self.db.lock:
            return [p.model_copy(deep=True) for p in self.db.providers.values()]

    async def update(self, provider_id: str, changes: Dict[str, Any]) -> Optional[ProviderInDB]:
        with self.db.lock:
            provider = self.db.providers.get(provider_id)
            if provider is None:
                return None
            # Validate the merged record so a bad change never reaches the store
            updated = ProviderInDB.model_validate(
                {**provider.model_dump(), **changes, "updated_at": utcnow()}
            )
            self.db.providers[provider_id] = updated
            return updated.model_copy(deep=True)


class MemoryScheduleRepository:
    def __init__(self, db: MemoryDatabase):
        self.db = db

    async def list_dates(self, provider_id: str) -> List[DateSchedule]:
        with self.db.lock:
            return [d.model_copy(deep=True) for d in self.db.dates.get(provider_id, [])]

    async def get_or_create_date(self, provider_id: str, date: str) -> Tuple[DateSchedule, bool]:
        with self.db.lock:
            if provider_id not in self.db.providers:
                raise NotFoundError("Provider", provider_id)
            schedules = self.db.dates.setdefault(provider_id, [])
            for schedule in schedules:
                if schedule.date == date:
                    return schedule.model_copy(deep=True), False
            schedule = DateSchedule.for_date(date)
            schedules.append(schedule)
            return schedule.model_copy(deep=True), True

    async def claim_slot(
        self,
        provider_id: str,
        date_id: str,
        slot_id: str,
        build_appointment: AppointmentBuilder,
    ) -> AppointmentInDB:
        with self.db.lock:
            provider = self.db.providers.get(provider_id)
            if provider is None:
                raise NotFoundError("Provider", provider_id)

            schedule = next(
                (d for d in self.db.dates.get(provider_id, []) if d.id == date_id), None
            )
            if schedule is None:
                raise NotFoundError("Date", date_id)

            slot = schedule.find_slot(slot_id)
            if slot is None:
                raise NotFoundError("Slot", slot_id)
            if slot.is_booked:
                raise AlreadyBookedError(slot_id, slot.time)

            # Build before mutating so a failing builder leaves the slot free
            appointment = build_appointment(
                provider.model_copy(deep=True),
                schedule.model_copy(deep=True),
                slot.model_copy(deep=True),
            )
            slot.is_booked = True
            self.db.appointments[appointment.id] = appointment.model_copy(deep=True)
            return appointment


class MemoryAppointmentRepository:
    def __init__(self, db: MemoryDatabase):
        self.db = db

    async def find_by_id(self, appointment_id: str) -> Optional[AppointmentInDB]:
        with self.db.lock:
            appointment = self.db.appointments.get(appointment_id)
            return appointment.model_copy(deep=True) if appointment else None

    async def find_by_doctor(self, doctor_id: str) -> List[AppointmentInDB]:
        with self.db.lock:
            return [
                a.model_copy(deep=True)
                for a in self.db.appointments.values()
                if a.doctor_id == doctor_id
            ]

    async def find_by_patient(self, patient_id: str) -> List[AppointmentInDB]:
        with self.db.lock:
            return [
                a.model_copy(deep=True)
                for a in self.db.appointments.values()
                if a.patient_id == patient_id
            ]

    async def update(self, appointment_id: str, changes: Dict[str, Any]) -> Optional[AppointmentInDB]:
        with self.db.lock:
            appointment = self.db.appointments.get(appointment_id)
            if appointment is None:
                return None
            # Round-trip through validation so nested models (feedback) stay typed
            data = appointment.model_dump()
            data.update(changes)
            updated = AppointmentInDB.model_validate(data)
            self.db.appointments[appointment_id] = updated
            return updated.model_copy(deep=True)


class MemoryPatientRepository:
    def __init__(self, db: MemoryDatabase):
        self.db = db

    async def create(self, patient: PatientInDB) -> PatientInDB:
        with self.db.lock:
            if patient.id in self.db.patients:
                raise ConflictOnCreateError("Patient", patient.id)
            self.db.patients[patient.id] = patient.model_copy(deep=True)
        return patient.model_copy(deep=True)

    async def find_by_id(self, patient_id: str) -> Optional[PatientInDB]:
        with self.db.lock:
            patient = self.db.patients.get(patient_id)
            return patient.model_copy(deep=True) if patient else None

    async def find_all(self) -> List[PatientInDB]:
        with self.db.lock:
            return [p.model_copy(deep=True) for p in self.db.patients.values()]

    async def update(self, patient_id: str, changes: Dict[str, Any]) -> Optional[PatientInDB]:
        with self.db.lock:
            patient = self.db.patients.get(patient_id)
            if patient is None:
                return None
            updated = PatientInDB.model_validate({**patient.model_dump(), **changes})
            self.db.patients[patient_id] = updated
            return updated.model_copy(deep=True)
