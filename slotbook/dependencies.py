"""
FastAPI dependency injection functions
These hand route handlers the services built at startup (see app.lifespan)
"""
from typing import Annotated

from fastapi import Depends, Request

from slotbook.services import (
    AppointmentService,
    BookingService,
    PatientService,
    ProviderService,
    ScheduleService,
    Services,
)


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_provider_service(request: Request) -> ProviderService:
    return get_services(request).providers


def get_patient_service(request: Request) -> PatientService:
    return get_services(request).patients


def get_schedule_service(request: Request) -> ScheduleService:
    return get_services(request).schedules


def get_booking_service(request: Request) -> BookingService:
    return get_services(request).bookings


def get_appointment_service(request: Request) -> AppointmentService:
    return get_services(request).appointments


# Type aliases for cleaner route signatures
Providers = Annotated[ProviderService, Depends(get_provider_service)]
Patients = Annotated[PatientService, Depends(get_patient_service)]
Schedules = Annotated[ScheduleService, Depends(get_schedule_service)]
Bookings = Annotated[BookingService, Depends(get_booking_service)]
Appointments = Annotated[AppointmentService, Depends(get_appointment_service)]
