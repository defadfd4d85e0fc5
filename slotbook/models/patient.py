from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

from ._common import utcnow


class PatientBase(BaseModel):
    """Base patient model"""
    email: Optional[EmailStr] = None
    name: Optional[str] = Field(None, max_length=100)
    picture: Optional[str] = None
    phone_number: Optional[str] = Field(None, max_length=30)


class PatientCreate(PatientBase):
    """Patient registration; id is the external identity key"""
    id: str = Field(..., min_length=1)


class PatientInDB(PatientCreate):
    """Patient model as stored in database"""
    created_at: datetime = Field(default_factory=utcnow)

    class Config:
        from_attributes = True


class PatientLoginRequest(BaseModel):
    """Identity claims handed over by the external identity provider"""
    id: str = Field(..., min_length=1)
    email: Optional[EmailStr] = None
    name: Optional[str] = None
    picture: Optional[str] = None


class PatientLoginResponse(BaseModel):
    phone_number_exists: bool
    patient: PatientInDB


class PhoneUpdateRequest(BaseModel):
    patient_id: str
    phone_number: str = Field(..., min_length=1, max_length=30)


class PatientQuery(BaseModel):
    patient_id: str
