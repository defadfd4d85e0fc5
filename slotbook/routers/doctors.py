from typing import List

from fastapi import APIRouter

from slotbook.dependencies import Appointments, Bookings, Providers, Schedules
from slotbook.models import (
    AppointmentPublic,
    BookingRequest,
    DateSchedule,
    GetSlotsRequest,
    ProviderAppointmentsQuery,
    ProviderCreate,
    ProviderPublic,
    ProviderUpdate,
)


router = APIRouter(prefix="/doctors", tags=["doctors"])


@router.get("/", response_model=List[ProviderPublic])
async def list_doctors(providers: Providers):
    """Get all doctors"""
    return await providers.list_providers()


@router.post("/add", response_model=ProviderPublic, status_code=201)
async def add_doctor(doctor: ProviderCreate, providers: Providers):
    """Register a new doctor"""
    return await providers.add_provider(doctor)


@router.put("/{doctor_id}", response_model=ProviderPublic)
async def update_doctor(doctor_id: str, changes: ProviderUpdate, providers: Providers):
    """Update a doctor's profile"""
    return await providers.update_provider(doctor_id, changes)


@router.post("/get-slots", response_model=DateSchedule)
async def get_slots(body: GetSlotsRequest, schedules: Schedules):
    """Get the doctor's slots for a date, opening the date on first request"""
    return await schedules.get_or_create_date_schedule(body.doctor_id, body.date)


@router.post("/book-slot", response_model=AppointmentPublic)
async def book_slot(body: BookingRequest, bookings: Bookings, appointments: Appointments):
    """Claim a free slot for a patient"""
    appointment = await bookings.book_slot(
        provider_id=body.doctor_id,
        date_id=body.date_id,
        slot_id=body.slot_id,
        patient_id=body.patient_id,
        patient_name=body.patient_name,
    )
    return AppointmentPublic.at(appointment, appointments.now())


@router.post("/appointments", response_model=List[AppointmentPublic])
async def get_appointments(body: ProviderAppointmentsQuery, appointments: Appointments):
    """All appointments of a doctor, most recent first"""
    now = appointments.now()
    return [
        AppointmentPublic.at(a, now)
        for a in await appointments.list_by_provider(body.doctor_id)
    ]


@router.get("/appointment/{appointment_id}", response_model=AppointmentPublic)
async def get_appointment(appointment_id: str, appointments: Appointments):
    appointment = await appointments.find_by_id(appointment_id)
    return AppointmentPublic.at(appointment, appointments.now())


@router.post("/todays-appointments", response_model=List[AppointmentPublic])
async def get_todays_appointments(body: ProviderAppointmentsQuery, appointments: Appointments):
    now = appointments.now()
    return [
        AppointmentPublic.at(a, now)
        for a in await appointments.list_today_by_provider(body.doctor_id)
    ]


@router.post("/previous-appointments", response_model=List[AppointmentPublic])
async def get_previous_appointments(body: ProviderAppointmentsQuery, appointments: Appointments):
    now = appointments.now()
    return [
        AppointmentPublic.at(a, now)
        for a in await appointments.list_past_by_provider(body.doctor_id)
    ]


@router.get("/{doctor_id}/dashboard")
async def get_dashboard_data(doctor_id: str, providers: Providers, appointments: Appointments):
    """Get doctor dashboard data"""
    doctor = await providers.get_provider(doctor_id)
    data = await appointments.provider_dashboard(doctor_id)
    now = appointments.now()
    return {
        "doctor": ProviderPublic.model_validate(doctor.model_dump()),
        "appointments": {
            key: [AppointmentPublic.at(a, now) for a in data[key]]
            for key in ("today", "upcoming", "past")
        },
        "stats": data["stats"],
    }
