import logging

from slotbook.errors import AlreadyBookedError
from slotbook.models import AppointmentInDB, DateSchedule, Feedback, ProviderInDB, Slot
from slotbook.repositories import ScheduleRepository

logger = logging.getLogger(__name__)


class BookingService:
    """Turns a (provider, date, slot) selection into an exclusive claim"""

    def __init__(self, schedules: ScheduleRepository):
        self.schedules = schedules

    async def book_slot(
        self,
        provider_id: str,
        date_id: str,
        slot_id: str,
        patient_id: str,
        patient_name: str,
    ) -> AppointmentInDB:
        """
        Claim a free slot for a patient

        The slot flip and the appointment insert happen in one store
        transaction: either both are durable or neither is.

        Returns:
            The new appointment, with provider and slot details snapshotted

        Raises:
            NotFoundError: Provider, Date or Slot missing (checked in that order)
            AlreadyBookedError: another patient holds the slot
            UpstreamFailureError: the store failed; nothing was written
        """

        def build_appointment(provider: ProviderInDB, schedule: DateSchedule, slot: Slot) -> AppointmentInDB:
            return AppointmentInDB(
                doctor_id=provider_id,
                date_id=date_id,
                slot_id=slot_id,
                patient_id=patient_id,
                date=schedule.date,
                slot_time=slot.time,
                doctor_name=provider.name,
                doctor_email=provider.email,
                patient_name=patient_name,
                meet_link="",
                feedback=Feedback(),
            )

        try:
            appointment = await self.schedules.claim_slot(
                provider_id, date_id, slot_id, build_appointment
            )
        except AlreadyBookedError:
            logger.warning(
                "Rejected claim on slot %s (provider %s, date %s) by patient %s: already booked",
                slot_id, provider_id, date_id, patient_id,
            )
            raise

        logger.info(
            "Booked appointment %s: provider %s, %s %s, patient %s",
            appointment.id, provider_id, appointment.date, appointment.slot_time, patient_id,
        )
        return appointment
