"""DTOs for office availability."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DaySlots:
    """Bookable start times for one office day, and the ones already taken."""

    office_id: str
    date: date
    available_slots: list[str]
    booked_slots: list[str]
