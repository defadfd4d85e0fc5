import logging
from typing import List, Tuple

from slotbook.errors import ConflictOnCreateError, NotFoundError
from slotbook.models import PatientCreate, PatientInDB, PatientLoginRequest
from slotbook.repositories import PatientRepository

logger = logging.getLogger(__name__)


class PatientService:
    """Patient directory keyed by the external identity"""

    def __init__(self, patients: PatientRepository):
        self.patients = patients

    async def add_patient(self, data: PatientCreate) -> PatientInDB:
        """
        Raises:
            ConflictOnCreateError: identity already registered
        """
        patient = await self.patients.create(PatientInDB(**data.model_dump()))
        logger.info("Registered patient %s", patient.id)
        return patient

    async def login_patient(self, claims: PatientLoginRequest) -> Tuple[PatientInDB, bool]:
        """
        Fetch the patient for a verified identity, registering it on first
        sight.

        Returns:
            (patient, phone_number_exists)
        """
        patient = await self.patients.find_by_id(claims.id)
        if patient is None:
            try:
                patient = await self.add_patient(PatientCreate(**claims.model_dump()))
            except ConflictOnCreateError:
                # Registered by a concurrent login between our read and insert
                patient = await self.get_patient(claims.id)
        return patient, patient.phone_number is not None

    async def get_patient(self, patient_id: str) -> PatientInDB:
        patient = await self.patients.find_by_id(patient_id)
        if patient is None:
            raise NotFoundError("Patient", patient_id)
        return patient

    async def list_patients(self) -> List[PatientInDB]:
        return await self.patients.find_all()

    async def update_phone(self, patient_id: str, phone_number: str) -> PatientInDB:
        patient = await self.patients.update(patient_id, {"phone_number": phone_number})
        if patient is None:
            raise NotFoundError("Patient", patient_id)
        logger.info("Updated phone number of patient %s", patient_id)
        return patient
