from datetime import datetime
from typing import Callable

import pytz

# Returns the current naive local time of the reference clock
Clock = Callable[[], datetime]


def local_clock(timezone: str) -> Clock:
    """Clock reading wall time in ``timezone``, truncated to whole seconds"""
    tz = pytz.timezone(timezone)

    def now() -> datetime:
        return datetime.now(tz).replace(tzinfo=None, microsecond=0)

    return now


def fixed_clock(instant: datetime) -> Clock:
    """Clock pinned to ``instant``; used by tests and replays"""
    return lambda: instant
