from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from ._common import new_id, utcnow


MIN_STARS = 0
MAX_STARS = 5


class AppointmentStatus(str, Enum):
    """Derived appointment state, never stored"""
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    REVIEWED = "reviewed"


def parse_instant(date: str, slot_time: str) -> Optional[datetime]:
    """
    Combine a calendar date and a time of day into one naive local instant.

    Returns None when either part is not parseable, so callers can keep a
    deterministic order for malformed records instead of failing.
    """
    try:
        return datetime.fromisoformat(f"{date}T{slot_time}")
    except (TypeError, ValueError):
        return None


class Feedback(BaseModel):
    """Patient review embedded in its appointment"""
    given: bool = False
    stars: int = Field(0, ge=MIN_STARS, le=MAX_STARS)
    title: str = ""
    review: str = ""


class AppointmentInDB(BaseModel):
    """
    Appointment model as stored in database.

    date, slot_time, doctor_name, doctor_email and patient_name are
    snapshots taken when the slot was claimed; later provider or patient
    edits do not touch them.
    """
    id: str = Field(default_factory=new_id)
    doctor_id: str
    date_id: str
    slot_id: str
    patient_id: str
    date: str
    slot_time: str
    doctor_name: str
    doctor_email: str = ""
    patient_name: str = ""
    meet_link: str = ""
    feedback: Feedback = Field(default_factory=Feedback)
    created_at: datetime = Field(default_factory=utcnow)

    class Config:
        from_attributes = True

    @property
    def starts_at(self) -> Optional[datetime]:
        return parse_instant(self.date, self.slot_time)

    def status_at(self, now: datetime) -> AppointmentStatus:
        if self.feedback.given:
            return AppointmentStatus.REVIEWED
        starts_at = self.starts_at
        if starts_at is not None and starts_at <= now:
            return AppointmentStatus.COMPLETED
        return AppointmentStatus.SCHEDULED


class AppointmentPublic(AppointmentInDB):
    """Appointment model for public API responses"""
    status: AppointmentStatus

    @classmethod
    def at(cls, appointment: AppointmentInDB, now: datetime) -> "AppointmentPublic":
        return cls(**appointment.model_dump(), status=appointment.status_at(now))


class BookingRequest(BaseModel):
    """Request to claim a slot"""
    doctor_id: str
    date_id: str
    slot_id: str
    patient_id: str
    patient_name: str = Field("", max_length=100)


class ProviderAppointmentsQuery(BaseModel):
    doctor_id: str


class MeetLinkRequest(BaseModel):
    """Request to set the meeting link of an appointment"""
    appointment_id: str
    meet_link: str = Field(..., max_length=500)


class FeedbackRequest(BaseModel):
    """Feedback submission; stars bounds are re-checked by the ledger"""
    appointment_id: str
    stars: int
    title: str = Field("", max_length=200)
    review: str = Field("", max_length=2000)


class DashboardStats(BaseModel):
    today_count: int
    upcoming_count: int
    past_count: int
    total_appointments: int
