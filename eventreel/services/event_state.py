"""Event lifecycle derived from the deadline and the compiled upload.

There is no stored status column; callers compute the state when they need it.
"""

from datetime import datetime
from enum import Enum


class EventState(str, Enum):
    OPEN = "open"
    DEADLINE_PASSED = "deadline_passed"
    FINISHED = "finished"


def derive_event_state(deadline: datetime, has_compiled_upload: bool, now: datetime) -> EventState:
    """A compiled upload finishes the event regardless of the deadline."""
    if has_compiled_upload:
        return EventState.FINISHED
    if is_deadline_passed(deadline, now):
        return EventState.DEADLINE_PASSED
    return EventState.OPEN


def is_deadline_passed(deadline: datetime, now: datetime) -> bool:
    """A deadline equal to now is still open."""
    return deadline < now
