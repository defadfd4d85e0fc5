from typing import List

from fastapi import APIRouter

from slotbook.dependencies import Appointments, Patients
from slotbook.models import (
    AppointmentPublic,
    PatientCreate,
    PatientInDB,
    PatientLoginRequest,
    PatientLoginResponse,
    PatientQuery,
    PhoneUpdateRequest,
)


router = APIRouter(prefix="/patients", tags=["patients"])


@router.get("/", response_model=List[PatientInDB])
async def list_patients(patients: Patients):
    return await patients.list_patients()


@router.post("/add", response_model=PatientInDB, status_code=201)
async def add_patient(patient: PatientCreate, patients: Patients):
    """Register a patient under its external identity"""
    return await patients.add_patient(patient)


@router.put("/update-phone", response_model=PatientInDB)
async def update_phone(body: PhoneUpdateRequest, patients: Patients):
    return await patients.update_phone(body.patient_id, body.phone_number)


@router.post("/login", response_model=PatientLoginResponse)
async def login_patient(claims: PatientLoginRequest, patients: Patients):
    """
    Called after the identity provider has verified the patient; registers
    the patient on first login and tells the client whether a phone number
    still has to be collected.
    """
    patient, phone_number_exists = await patients.login_patient(claims)
    return PatientLoginResponse(patient=patient, phone_number_exists=phone_number_exists)


@router.get("/details/{patient_id}", response_model=PatientInDB)
async def get_patient_details(patient_id: str, patients: Patients):
    return await patients.get_patient(patient_id)


@router.post("/previous-appointments", response_model=List[AppointmentPublic])
async def get_previous_appointments(body: PatientQuery, appointments: Appointments):
    now = appointments.now()
    return [
        AppointmentPublic.at(a, now)
        for a in await appointments.list_past_by_patient(body.patient_id)
    ]


@router.post("/upcoming-appointments", response_model=List[AppointmentPublic])
async def get_upcoming_appointments(body: PatientQuery, appointments: Appointments):
    now = appointments.now()
    return [
        AppointmentPublic.at(a, now)
        for a in await appointments.list_upcoming_by_patient(body.patient_id)
    ]
