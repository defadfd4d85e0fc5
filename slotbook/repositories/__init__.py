"""
Persistence layer: repository protocols and their store implementations
"""

from dataclasses import dataclass

from slotbook.config import Settings

from .base import (
    AppointmentBuilder,
    AppointmentRepository,
    PatientRepository,
    ProviderRepository,
    ScheduleRepository,
)
from .memory import (
    MemoryAppointmentRepository,
    MemoryDatabase,
    MemoryPatientRepository,
    MemoryProviderRepository,
    MemoryScheduleRepository,
)


@dataclass
class Repositories:
    providers: ProviderRepository
    schedules: ScheduleRepository
    appointments: AppointmentRepository
    patients: PatientRepository


def memory_repositories(db: MemoryDatabase = None) -> Repositories:
    db = db or MemoryDatabase()
    return Repositories(
        providers=MemoryProviderRepository(db),
        schedules=MemoryScheduleRepository(db),
        appointments=MemoryAppointmentRepository(db),
        patients=MemoryPatientRepository(db),
    )


def firestore_repositories(settings: Settings) -> Repositories:
    from slotbook.services.firebase_service import FirebaseService

    from .firestore import (
        FirestoreAppointmentRepository,
        FirestorePatientRepository,
        FirestoreProviderRepository,
        FirestoreScheduleRepository,
    )

    db = FirebaseService(settings).db
    return Repositories(
        providers=FirestoreProviderRepository(db),
        schedules=FirestoreScheduleRepository(db),
        appointments=FirestoreAppointmentRepository(db),
        patients=FirestorePatientRepository(db),
    )


def build_repositories(settings: Settings) -> Repositories:
    """Pick the store named by STORAGE_BACKEND"""
    if settings.STORAGE_BACKEND == "firestore":
        return firestore_repositories(settings)
    return memory_repositories()


__all__ = [
    "AppointmentBuilder",
    "AppointmentRepository",
    "PatientRepository",
    "ProviderRepository",
    "ScheduleRepository",
    "MemoryDatabase",
    "Repositories",
    "build_repositories",
    "firestore_repositories",
    "memory_repositories",
]
