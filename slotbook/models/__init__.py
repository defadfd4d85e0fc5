"""
Data models for the application
All Pydantic models for storage and request/response validation
"""

from .provider import (
    DAILY_SLOT_TIMES,
    Slot,
    DateSchedule,
    ProviderBase,
    ProviderCreate,
    ProviderUpdate,
    ProviderInDB,
    ProviderPublic,
    GetSlotsRequest,
)

from .appointment import (
    AppointmentStatus,
    Feedback,
    AppointmentInDB,
    AppointmentPublic,
    BookingRequest,
    ProviderAppointmentsQuery,
    MeetLinkRequest,
    FeedbackRequest,
    DashboardStats,
    parse_instant,
)

from .patient import (
    PatientBase,
    PatientCreate,
    PatientInDB,
    PatientLoginRequest,
    PatientLoginResponse,
    PhoneUpdateRequest,
    PatientQuery,
)


__all__ = [
    # Provider models
    "DAILY_SLOT_TIMES",
    "Slot",
    "DateSchedule",
    "ProviderBase",
    "ProviderCreate",
    "ProviderUpdate",
    "ProviderInDB",
    "ProviderPublic",
    "GetSlotsRequest",

    # Appointment models
    "AppointmentStatus",
    "Feedback",
    "AppointmentInDB",
    "AppointmentPublic",
    "BookingRequest",
    "ProviderAppointmentsQuery",
    "MeetLinkRequest",
    "FeedbackRequest",
    "DashboardStats",
    "parse_instant",

    # Patient models
    "PatientBase",
    "PatientCreate",
    "PatientInDB",
    "PatientLoginRequest",
    "PatientLoginResponse",
    "PhoneUpdateRequest",
    "PatientQuery",
]
