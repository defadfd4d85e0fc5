import logging
from typing import List

from slotbook.models import DateSchedule
from slotbook.repositories import ScheduleRepository

logger = logging.getLogger(__name__)


class ScheduleService:
    """Materializes a provider's per-date slot sets on first access"""

    def __init__(self, schedules: ScheduleRepository):
        self.schedules = schedules

    async def get_or_create_date_schedule(self, provider_id: str, date: str) -> DateSchedule:
        """
        Get the provider's schedule for a date, creating it from the daily
        template the first time the date is requested.

        Raises:
            NotFoundError: Provider does not exist
        """
        schedule, created = await self.schedules.get_or_create_date(provider_id, date)
        if created:
            logger.info("Created schedule %s for provider %s on %s", schedule.id, provider_id, date)
        return schedule

    async def list_date_schedules(self, provider_id: str) -> List[DateSchedule]:
        return await self.schedules.list_dates(provider_id)
