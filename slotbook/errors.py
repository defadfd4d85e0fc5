"""
Error kinds raised by the scheduling core.

Services raise these; the API layer translates them into HTTP responses
(see ``slotbook.app``). Every error is request-scoped and carries a
machine-readable code plus a human-readable message.
"""

from typing import Any, Dict, Optional


class SlotbookError(Exception):
    """Base class for all scheduling errors"""

    code = "SLOTBOOK_ERROR"
    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(SlotbookError):
    """A Provider, Date, Slot, Appointment or Patient could not be resolved"""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, entity: str, entity_id: Any, message: Optional[str] = None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            message or f"{entity} not found: {entity_id}",
            {"entity": entity, "entity_id": str(entity_id)},
        )


class AlreadyBookedError(SlotbookError):
    """The slot was claimed by someone else first"""

    code = "ALREADY_BOOKED"
    status_code = 409

    def __init__(self, slot_id: str, slot_time: Optional[str] = None):
        self.slot_id = slot_id
        msg = f"Slot {slot_time or slot_id} is already booked"
        super().__init__(msg, {"slot_id": slot_id})


class ValidationError(SlotbookError):
    """A field value is outside what the core accepts"""

    code = "VALIDATION_ERROR"
    status_code = 422

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message, {"field": field})


class ConflictOnCreateError(SlotbookError):
    """An entity with the same unique identity already exists"""

    code = "CONFLICT_ON_CREATE"
    status_code = 409

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            f"{entity} already exists: {entity_id}",
            {"entity": entity, "entity_id": str(entity_id)},
        )


class UpstreamFailureError(SlotbookError):
    """The persistence layer (or another collaborator) failed"""

    code = "UPSTREAM_FAILURE"
    status_code = 502

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        msg = f"{operation} failed"
        if cause is not None:
            msg = f"{msg}: {cause}"
        super().__init__(msg, {"operation": operation})
