from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime

from ._common import new_id, utcnow


# Fixed daily template; every DateSchedule gets exactly these slots
DAILY_SLOT_TIMES = ("09:00:00", "12:00:00", "15:00:00")


class Slot(BaseModel):
    """A bookable time of day inside a DateSchedule"""
    id: str = Field(default_factory=new_id)
    time: str
    is_booked: bool = False


class DateSchedule(BaseModel):
    """The slots a provider offers on one calendar date"""
    id: str = Field(default_factory=new_id)
    date: str
    slots: List[Slot]
    created_at: datetime = Field(default_factory=utcnow)

    @classmethod
    def for_date(cls, date: str, schedule_id: Optional[str] = None) -> "DateSchedule":
        """Build a fresh schedule from the daily template, all slots free"""
        schedule = cls(date=date, slots=[Slot(time=t) for t in DAILY_SLOT_TIMES])
        if schedule_id is not None:
            schedule.id = schedule_id
        return schedule

    def find_slot(self, slot_id: str) -> Optional[Slot]:
        for slot in self.slots:
            if slot.id == slot_id:
                return slot
        return None


class ProviderBase(BaseModel):
    """Base provider model"""
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone_number: Optional[str] = Field(None, max_length=30)
    specialization: Optional[str] = Field(None, max_length=100)
    fees_per_session: float = Field(0, ge=0)


class ProviderCreate(ProviderBase):
    """Model for creating a provider"""
    pass


class ProviderUpdate(BaseModel):
    """Model for updating a provider"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone_number: Optional[str] = Field(None, max_length=30)
    specialization: Optional[str] = Field(None, max_length=100)
    fees_per_session: Optional[float] = Field(None, ge=0)

    @field_validator("name", "fees_per_session")
    @classmethod
    def required_fields_not_null(cls, v):
        # Omit the field to keep it; null would blank a required profile field
        if v is None:
            raise ValueError("cannot be null")
        return v


class ProviderInDB(ProviderBase):
    """Provider as stored; schedules live in their own collection"""
    id: str = Field(default_factory=new_id)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProviderPublic(ProviderBase):
    """Provider model for public API responses"""
    id: str

    class Config:
        from_attributes = True


class GetSlotsRequest(BaseModel):
    """Request for a provider's slots on a date"""
    doctor_id: str
    date: str = Field(..., min_length=1)
