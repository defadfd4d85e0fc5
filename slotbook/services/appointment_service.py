import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from slotbook.errors import NotFoundError, ValidationError
from slotbook.models import AppointmentInDB, DashboardStats, Feedback
from slotbook.models.appointment import MAX_STARS, MIN_STARS
from slotbook.repositories import AppointmentRepository

from .clock import Clock

logger = logging.getLogger(__name__)


def _chronological(appointments: List[AppointmentInDB], newest_first: bool = False) -> List[AppointmentInDB]:
    """
    Order by the combined date + slot time instant.

    Records whose date/time does not parse go last, ordered by id, so the
    result is deterministic for any input.
    """
    timed = [a for a in appointments if a.starts_at is not None]
    untimed = [a for a in appointments if a.starts_at is None]
    timed.sort(key=lambda a: (a.starts_at, a.id), reverse=newest_first)
    untimed.sort(key=lambda a: a.id)
    return timed + untimed


class AppointmentService:
    """Ledger of claimed appointments: lookups, time windows, feedback"""

    def __init__(self, appointments: AppointmentRepository, clock: Clock):
        self.appointments = appointments
        self.clock = clock

    async def find_by_id(self, appointment_id: str) -> AppointmentInDB:
        appointment = await self.appointments.find_by_id(appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment", appointment_id)
        return appointment

    # ==================== PROVIDER VIEWS ====================

    async def list_by_provider(self, provider_id: str) -> List[AppointmentInDB]:
        """All appointments of a provider, most recent first"""
        appointments = await self.appointments.find_by_doctor(provider_id)
        return _chronological(appointments, newest_first=True)

    async def list_today_by_provider(self, provider_id: str) -> List[AppointmentInDB]:
        """Appointments on the current calendar date, earliest first"""
        today = self.clock().date().isoformat()
        appointments = await self.appointments.find_by_doctor(provider_id)
        return _chronological([a for a in appointments if a.date == today])

    async def list_past_by_provider(self, provider_id: str) -> List[AppointmentInDB]:
        """Appointments strictly before now, most recent first"""
        now = self.clock()
        appointments = await self.appointments.find_by_doctor(provider_id)
        past = [a for a in appointments if a.starts_at is not None and a.starts_at < now]
        return _chronological(past, newest_first=True)

    async def list_upcoming_by_provider(self, provider_id: str) -> List[AppointmentInDB]:
        """Appointments at or after now, earliest first"""
        now = self.clock()
        appointments = await self.appointments.find_by_doctor(provider_id)
        upcoming = [a for a in appointments if a.starts_at is not None and a.starts_at >= now]
        return _chronological(upcoming)

    async def provider_dashboard(self, provider_id: str) -> Dict[str, Any]:
        """Everything the provider dashboard shows, from one read"""
        now = self.clock()
        today = now.date().isoformat()
        appointments = await self.appointments.find_by_doctor(provider_id)

        todays = _chronological([a for a in appointments if a.date == today])
        upcoming = _chronological(
            [a for a in appointments if a.starts_at is not None and a.starts_at >= now]
        )
        past = _chronological(
            [a for a in appointments if a.starts_at is not None and a.starts_at < now],
            newest_first=True,
        )
        return {
            "today": todays,
            "upcoming": upcoming[:10],  # Next 10 appointments
            "past": past[:10],
            "stats": DashboardStats(
                today_count=len(todays),
                upcoming_count=len(upcoming),
                past_count=len(past),
                total_appointments=len(appointments),
            ),
        }

    # ==================== PATIENT VIEWS ====================

    async def list_by_patient(self, patient_id: str) -> List[AppointmentInDB]:
        appointments = await self.appointments.find_by_patient(patient_id)
        return _chronological(appointments, newest_first=True)

    async def list_past_by_patient(self, patient_id: str) -> List[AppointmentInDB]:
        """Appointments at or before now, most recent first"""
        now = self.clock()
        appointments = await self.appointments.find_by_patient(patient_id)
        past = [a for a in appointments if a.starts_at is not None and a.starts_at <= now]
        return _chronological(past, newest_first=True)

    async def list_upcoming_by_patient(self, patient_id: str) -> List[AppointmentInDB]:
        """Appointments at or after now, earliest first"""
        now = self.clock()
        appointments = await self.appointments.find_by_patient(patient_id)
        upcoming = [a for a in appointments if a.starts_at is not None and a.starts_at >= now]
        return _chronological(upcoming)

    # ==================== MUTATIONS ====================

    async def set_meeting_link(self, appointment_id: str, link: str) -> AppointmentInDB:
        appointment = await self.appointments.update(appointment_id, {"meet_link": link})
        if appointment is None:
            raise NotFoundError("Appointment", appointment_id)
        logger.info("Meeting link set for appointment %s", appointment_id)
        return appointment

    async def submit_feedback(
        self,
        appointment_id: str,
        stars: int,
        title: Optional[str] = "",
        review: Optional[str] = "",
    ) -> AppointmentInDB:
        """
        File the patient's feedback, replacing any earlier submission.

        Raises:
            ValidationError: stars outside 0-5
            NotFoundError: Appointment does not exist
        """
        valid = isinstance(stars, int) and not isinstance(stars, bool)
        if not valid or not MIN_STARS <= stars <= MAX_STARS:
            raise ValidationError(
                "stars",
                f"stars must be an integer between {MIN_STARS} and {MAX_STARS}, got {stars!r}",
            )

        feedback = Feedback(given=True, stars=stars, title=title or "", review=review or "")
        appointment = await self.appointments.update(appointment_id, {"feedback": feedback})
        if appointment is None:
            raise NotFoundError("Appointment", appointment_id)
        logger.info("Feedback (%d stars) filed for appointment %s", stars, appointment_id)
        return appointment

    def now(self) -> datetime:
        return self.clock()
