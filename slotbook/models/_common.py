from datetime import datetime, timezone
from uuid import uuid4


def new_id() -> str:
    """Generated document identity used for schedules, slots and appointments"""
    return uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
