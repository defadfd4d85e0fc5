import pytest
from pydantic import ValidationError as PydanticValidationError

from slotbook.errors import ConflictOnCreateError, NotFoundError
from slotbook.models import PatientCreate, PatientLoginRequest, ProviderCreate, ProviderUpdate

from tests.helpers import run_in_threads


class TestProviderService:
    @pytest.mark.asyncio
    async def test_add_and_get(self, services, provider):
        fetched = await services.providers.get_provider(provider.id)

        assert fetched.name == "Dr. A"
        assert fetched.specialization == "Psychiatry"
        assert fetched.fees_per_session == 80

    @pytest.mark.asyncio
    async def test_list(self, services, provider):
        await services.providers.add_provider(ProviderCreate(name="Dr. B", email="dr.b@example.com"))

        names = sorted(p.name for p in await services.providers.list_providers())
        assert names == ["Dr. A", "Dr. B"]

    @pytest.mark.asyncio
    async def test_partial_update(self, services, provider):
        updated = await services.providers.update_provider(
            provider.id, ProviderUpdate(fees_per_session=95)
        )

        assert updated.fees_per_session == 95
        assert updated.name == "Dr. A"
        assert updated.updated_at is not None

    @pytest.mark.parametrize("field", ["name", "fees_per_session"])
    def test_update_rejects_null_required_field(self, field):
        with pytest.raises(PydanticValidationError):
            ProviderUpdate(**{field: None})

    @pytest.mark.asyncio
    async def test_update_can_clear_optional_field(self, services, provider):
        updated = await services.providers.update_provider(
            provider.id, ProviderUpdate(specialization=None)
        )

        assert updated.specialization is None
        assert updated.name == "Dr. A"

    @pytest.mark.asyncio
    async def test_store_rejects_invalid_change(self, repositories, provider, book_at):
        with pytest.raises(PydanticValidationError):
            await repositories.providers.update(provider.id, {"name": None})

        assert (await repositories.providers.find_by_id(provider.id)).name == "Dr. A"
        booked = await book_at(provider.id, "2024-06-01", "09:00:00")
        assert booked.doctor_name == "Dr. A"

    @pytest.mark.asyncio
    async def test_update_unknown(self, services):
        with pytest.raises(NotFoundError) as exc_info:
            await services.providers.update_provider("nobody", ProviderUpdate(name="X"))
        assert exc_info.value.entity == "Provider"


class TestPatientService:
    @pytest.mark.asyncio
    async def test_add_duplicate_identity(self, services):
        await services.patients.add_patient(PatientCreate(id="g-123", name="Pat"))

        with pytest.raises(ConflictOnCreateError) as exc_info:
            await services.patients.add_patient(PatientCreate(id="g-123", name="Someone else"))

        assert exc_info.value.entity == "Patient"
        assert (await services.patients.get_patient("g-123")).name == "Pat"

    @pytest.mark.asyncio
    async def test_concurrent_registration_creates_one(self, services, memory_db):
        results = run_in_threads(
            5, lambda i: services.patients.add_patient(PatientCreate(id="g-1", name=f"Pat {i}"))
        )

        assert len([r for r in results if isinstance(r, ConflictOnCreateError)]) == 4
        assert list(memory_db.patients) == ["g-1"]

    @pytest.mark.asyncio
    async def test_login_registers_on_first_sight(self, services):
        claims = PatientLoginRequest(id="g-9", email="pat@example.com", name="Pat", picture="pic.png")

        patient, has_phone = await services.patients.login_patient(claims)
        assert patient.id == "g-9"
        assert patient.email == "pat@example.com"
        assert has_phone is False

        await services.patients.update_phone("g-9", "+15550100")
        patient, has_phone = await services.patients.login_patient(claims)
        assert has_phone is True
        assert patient.phone_number == "+15550100"

    @pytest.mark.asyncio
    async def test_update_phone_unknown(self, services):
        with pytest.raises(NotFoundError) as exc_info:
            await services.patients.update_phone("nobody", "+15550100")
        assert exc_info.value.entity == "Patient"

    @pytest.mark.asyncio
    async def test_store_rejects_invalid_phone(self, services, repositories):
        await services.patients.add_patient(PatientCreate(id="g-5", phone_number="+15550100"))

        with pytest.raises(PydanticValidationError):
            await repositories.patients.update("g-5", {"phone_number": "9" * 31})

        assert (await services.patients.get_patient("g-5")).phone_number == "+15550100"

    @pytest.mark.asyncio
    async def test_get_unknown(self, services):
        with pytest.raises(NotFoundError):
            await services.patients.get_patient("nobody")
