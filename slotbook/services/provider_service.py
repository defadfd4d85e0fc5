import logging
from typing import List

from slotbook.errors import NotFoundError
from slotbook.models import ProviderCreate, ProviderInDB, ProviderUpdate
from slotbook.repositories import ProviderRepository

logger = logging.getLogger(__name__)


class ProviderService:
    """Provider directory: registration and profile edits"""

    def __init__(self, providers: ProviderRepository):
        self.providers = providers

    async def add_provider(self, data: ProviderCreate) -> ProviderInDB:
        provider = await self.providers.create(ProviderInDB(**data.model_dump()))
        logger.info("Registered provider %s (%s)", provider.id, provider.name)
        return provider

    async def get_provider(self, provider_id: str) -> ProviderInDB:
        provider = await self.providers.find_by_id(provider_id)
        if provider is None:
            raise NotFoundError("Provider", provider_id)
        return provider

    async def list_providers(self) -> List[ProviderInDB]:
        return await self.providers.find_all()

    async def update_provider(self, provider_id: str, data: ProviderUpdate) -> ProviderInDB:
        """
        Edit profile fields. Appointments already booked keep the name and
        email they were created with.
        """
        changes = data.model_dump(exclude_unset=True)
        provider = await self.providers.update(provider_id, changes)
        if provider is None:
            raise NotFoundError("Provider", provider_id)
        logger.info("Updated provider %s: %s", provider_id, sorted(changes))
        return provider
