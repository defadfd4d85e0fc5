"""
Firestore-backed repositories.

Layout:
    doctors/{doctor_id}                 provider profile
    doctors/{doctor_id}/dates/{date_id} DateSchedule with its slots array;
                                        date_id is derived from the date string
    appointments/{appointment_id}
    patients/{patient_id}               id is the external identity key

Schedule creation and slot claims run inside Firestore transactions: the
guard (no schedule for the date / slot still free) is read inside the
transaction and Firestore retries the whole function when a concurrent
writer touches the same documents, so the guard is always re-evaluated
against committed state. Schedule creation additionally relies on create()
failing for an existing document id.
"""

import functools
import hashlib
import logging
from typing import Any, Dict, List, Optional, Tuple

from firebase_admin import firestore
from google.api_core import exceptions as google_exceptions
from google.cloud.firestore_v1 import FieldFilter

from slotbook.errors import (
    AlreadyBookedError,
    ConflictOnCreateError,
    NotFoundError,
    UpstreamFailureError,
)
from slotbook.models import AppointmentInDB, DateSchedule, PatientInDB, ProviderInDB

from .base import AppointmentBuilder

logger = logging.getLogger(__name__)

DOCTORS = "doctors"
DATES = "dates"
APPOINTMENTS = "appointments"
PATIENTS = "patients"


def upstream(operation: str):
    """Translate Firestore/transport errors into UpstreamFailureError"""

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except google_exceptions.GoogleAPIError as e:
                logger.error("Firestore %s failed", operation, exc_info=True)
                raise UpstreamFailureError(operation, e) from e

        return wrapper

    return decorator


def date_document_id(date: str) -> str:
    """
    Document id of a provider's schedule for ``date``.

    One id per date string, so a second create for the same date fails with
    AlreadyExists instead of adding a duplicate schedule. Hashing keeps
    arbitrary date strings (e.g. containing "/") valid as document ids.
    """
    return hashlib.sha256(date.encode("utf-8")).hexdigest()[:32]


def _with_id(snapshot) -> Dict[str, Any]:
    data = snapshot.to_dict() or {}
    data["id"] = snapshot.id
    return data


class FirestoreProviderRepository:
    def __init__(self, db):
        self.db = db

    @upstream("create provider")
    async def create(self, provider: ProviderInDB) -> ProviderInDB:
        data = provider.model_dump(exclude={"id"})
        try:
            self.db.collection(DOCTORS).document(provider.id).create(data)
        except google_exceptions.AlreadyExists:
            raise ConflictOnCreateError("Provider", provider.id)
        return provider

    @upstream("get provider")
    async def find_by_id(self, provider_id: str) -> Optional[ProviderInDB]:
        doc = self.db.collection(DOCTORS).document(provider_id).get()
        if doc.exists:
            return ProviderInDB.model_validate(_with_id(doc))
        return None

    @upstream("list providers")
    async def find_all(self) -> List[ProviderInDB]:
        docs = self.db.collection(DOCTORS).stream()
        return [ProviderInDB.model_validate(_with_id(doc)) for doc in docs]

    @upstream("update provider")
    async def update(self, provider_id: str, changes: Dict[str, Any]) -> Optional[ProviderInDB]:
        doc_ref = self.db.collection(DOCTORS).document(provider_id)
        try:
            doc_ref.update({**changes, "updated_at": firestore.SERVER_TIMESTAMP})
        except google_exceptions.NotFound:
            return None
        return ProviderInDB.model_validate(_with_id(doc_ref.get()))


class FirestoreScheduleRepository:
    def __init__(self, db):
        self.db = db

    def _dates(self, provider_id: str):
        return self.db.collection(DOCTORS).document(provider_id).collection(DATES)

    @upstream("list dates")
    async def list_dates(self, provider_id: str) -> List[DateSchedule]:
        docs = self._dates(provider_id).order_by("created_at").stream()
        return [DateSchedule.model_validate(_with_id(doc)) for doc in docs]

    @upstream("get or create date")
    async def get_or_create_date(self, provider_id: str, date: str) -> Tuple[DateSchedule, bool]:
        provider_ref = self.db.collection(DOCTORS).document(provider_id)
        schedule_id = date_document_id(date)
        date_ref = self._dates(provider_id).document(schedule_id)

        @firestore.transactional
        def get_or_create(transaction):
            if not provider_ref.get(transaction=transaction).exists:
                raise NotFoundError("Provider", provider_id)

            doc = date_ref.get(transaction=transaction)
            if doc.exists:
                return DateSchedule.model_validate(_with_id(doc)), False

            schedule = DateSchedule.for_date(date, schedule_id)
            transaction.create(date_ref, schedule.model_dump(exclude={"id"}))
            return schedule, True

        try:
            return get_or_create(self.db.transaction())
        except google_exceptions.AlreadyExists:
            # Lost the race to a concurrent creator; theirs is the schedule
            return DateSchedule.model_validate(_with_id(date_ref.get())), False

    @upstream("claim slot")
    async def claim_slot(
        self,
        provider_id: str,
        date_id: str,
        slot_id: str,
        build_appointment: AppointmentBuilder,
    ) -> AppointmentInDB:
        provider_ref = self.db.collection(DOCTORS).document(provider_id)
        date_ref = self._dates(provider_id).document(date_id)
        appointments_ref = self.db.collection(APPOINTMENTS)

        @firestore.transactional
        def claim(transaction):
            provider_doc = provider_ref.get(transaction=transaction)
            if not provider_doc.exists:
                raise NotFoundError("Provider", provider_id)

            date_doc = date_ref.get(transaction=transaction)
            if not date_doc.exists:
                raise NotFoundError("Date", date_id)

            schedule = DateSchedule.model_validate(_with_id(date_doc))
            slot = schedule.find_slot(slot_id)
            if slot is None:
                raise NotFoundError("Slot", slot_id)
            if slot.is_booked:
                raise AlreadyBookedError(slot_id, slot.time)

            appointment = build_appointment(
                ProviderInDB.model_validate(_with_id(provider_doc)),
                schedule,
                slot.model_copy(),
            )
            slot.is_booked = True

            transaction.update(
                date_ref, {"slots": [s.model_dump() for s in schedule.slots]}
            )
            transaction.create(
                appointments_ref.document(appointment.id),
                appointment.model_dump(exclude={"id"}),
            )
            return appointment

        return claim(self.db.transaction())


class FirestoreAppointmentRepository:
    def __init__(self, db):
        self.db = db

    def _find_where(self, field: str, value: str) -> List[AppointmentInDB]:
        docs = self.db.collection(APPOINTMENTS).where(
            filter=FieldFilter(field, "==", value)
        ).stream()
        return [AppointmentInDB.model_validate(_with_id(doc)) for doc in docs]

    @upstream("get appointment")
    async def find_by_id(self, appointment_id: str) -> Optional[AppointmentInDB]:
        doc = self.db.collection(APPOINTMENTS).document(appointment_id).get()
        if doc.exists:
            return AppointmentInDB.model_validate(_with_id(doc))
        return None

    @upstream("list doctor appointments")
    async def find_by_doctor(self, doctor_id: str) -> List[AppointmentInDB]:
        return self._find_where("doctor_id", doctor_id)

    @upstream("list patient appointments")
    async def find_by_patient(self, patient_id: str) -> List[AppointmentInDB]:
        return self._find_where("patient_id", patient_id)

    @upstream("update appointment")
    async def update(self, appointment_id: str, changes: Dict[str, Any]) -> Optional[AppointmentInDB]:
        doc_ref = self.db.collection(APPOINTMENTS).document(appointment_id)
        payload = {
            key: value.model_dump() if hasattr(value, "model_dump") else value
            for key, value in changes.items()
        }
        try:
            doc_ref.update(payload)
        except google_exceptions.NotFound:
            return None
        return AppointmentInDB.model_validate(_with_id(doc_ref.get()))


class FirestorePatientRepository:
    def __init__(self, db):
        self.db = db

    @upstream("create patient")
    async def create(self, patient: PatientInDB) -> PatientInDB:
        data = patient.model_dump(exclude={"id"})
        try:
            # create() fails server-side if the document exists
            self.db.collection(PATIENTS).document(patient.id).create(data)
        except google_exceptions.AlreadyExists:
            raise ConflictOnCreateError("Patient", patient.id)
        return patient

    @upstream("get patient")
    async def find_by_id(self, patient_id: str) -> Optional[PatientInDB]:
        doc = self.db.collection(PATIENTS).document(patient_id).get()
        if doc.exists:
            return PatientInDB.model_validate(_with_id(doc))
        return None

    @upstream("list patients")
    async def find_all(self) -> List[PatientInDB]:
        docs = self.db.collection(PATIENTS).stream()
        return [PatientInDB.model_validate(_with_id(doc)) for doc in docs]

    @upstream("update patient")
    async def update(self, patient_id: str, changes: Dict[str, Any]) -> Optional[PatientInDB]:
        doc_ref = self.db.collection(PATIENTS).document(patient_id)
        try:
            doc_ref.update(changes)
        except google_exceptions.NotFound:
            return None
        return PatientInDB.model_validate(_with_id(doc_ref.get()))
