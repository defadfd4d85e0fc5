"""
Service layer: the scheduling core plus the provider/patient directory
"""

from dataclasses import dataclass

from slotbook.repositories import Repositories

from .appointment_service import AppointmentService
from .booking_service import BookingService
from .clock import Clock, fixed_clock, local_clock
from .patient_service import PatientService
from .provider_service import ProviderService
from .schedule_service import ScheduleService


@dataclass
class Services:
    providers: ProviderService
    patients: PatientService
    schedules: ScheduleService
    bookings: BookingService
    appointments: AppointmentService


def build_services(repositories: Repositories, clock: Clock) -> Services:
    return Services(
        providers=ProviderService(repositories.providers),
        patients=PatientService(repositories.patients),
        schedules=ScheduleService(repositories.schedules),
        bookings=BookingService(repositories.schedules),
        appointments=AppointmentService(repositories.appointments, clock),
    )


__all__ = [
    "AppointmentService",
    "BookingService",
    "Clock",
    "PatientService",
    "ProviderService",
    "ScheduleService",
    "Services",
    "build_services",
    "fixed_clock",
    "local_clock",
]
