from fastapi import APIRouter

from slotbook.dependencies import Appointments
from slotbook.models import AppointmentPublic, FeedbackRequest, MeetLinkRequest


router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.put("/add-meet-link", response_model=AppointmentPublic)
async def add_meet_link(body: MeetLinkRequest, appointments: Appointments):
    """Set (or replace) the meeting link of an appointment"""
    appointment = await appointments.set_meeting_link(body.appointment_id, body.meet_link)
    return AppointmentPublic.at(appointment, appointments.now())


@router.put("/feedback", response_model=AppointmentPublic)
async def submit_feedback(body: FeedbackRequest, appointments: Appointments):
    """File feedback; a second submission replaces the first"""
    appointment = await appointments.submit_feedback(
        body.appointment_id, body.stars, body.title, body.review
    )
    return AppointmentPublic.at(appointment, appointments.now())
