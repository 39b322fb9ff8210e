"""Office opening hours and bookable time slots.

A weekly schedule gives the opening hours of each weekday. Single dates may
be overridden or closed, and closed date ranges cover holidays. Slots are
cut from the opening hours at a fixed length; a slot is identified by its
``HH:MM`` start time, and booked start times are removed.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from portal.domain.exceptions import ValidationException

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
DEFAULT_SLOT_MINUTES = 30
MIN_SLOT_MINUTES = 5
MAX_SLOT_MINUTES = 480


def to_minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def format_minutes(total: int) -> str:
    return f"{total // 60:02d}:{total % 60:02d}"


@dataclass(frozen=True)
class DaySchedule:
    start: str
    end: str
    open: bool = True


@dataclass(frozen=True)
class ClosedRange:
    start: date
    end: date
    reason: str | None = None

    def covers(self, day: date) -> bool:
        return self.start <= day <= self.end


def default_weekly_schedule() -> dict[str, DaySchedule]:
    """Monday to Friday, 09:00-17:00."""
    return {
        day: DaySchedule("09:00", "17:00", open=day not in ("saturday", "sunday"))
        for day in WEEKDAYS
    }


@dataclass(frozen=True)
class AvailabilityConfig:
    weekly: dict[str, DaySchedule] = field(default_factory=default_weekly_schedule)
    slot_minutes: int = DEFAULT_SLOT_MINUTES
    closed_ranges: tuple[ClosedRange, ...] = ()
    closed_dates: frozenset[date] = frozenset()
    overrides: dict[date, DaySchedule] = field(default_factory=dict)

    def schedule_for(self, day: date) -> DaySchedule | None:
        """Opening hours for a date, or None when the office is closed that day."""
        if day in self.closed_dates or any(r.covers(day) for r in self.closed_ranges):
            return None
        schedule = self.overrides.get(day) or self.weekly.get(WEEKDAYS[day.weekday()])
        if schedule is None or not schedule.open:
            return None
        return schedule

    def slots_for(self, day: date, booked: Iterable[str] = ()) -> list[str]:
        schedule = self.schedule_for(day)
        if schedule is None:
            return []
        taken = set(booked)
        return [s for s in generate_slots(schedule, self.slot_minutes) if s not in taken]


def generate_slots(schedule: DaySchedule, slot_minutes: int) -> list[str]:
    """Start times of every whole slot that fits in the opening hours."""
    start, end = to_minutes(schedule.start), to_minutes(schedule.end)
    return [format_minutes(m) for m in range(start, end - slot_minutes + 1, slot_minutes)]


def check_config(config: AvailabilityConfig) -> None:
    """Raise ValidationException if the configuration cannot produce sensible slots."""
    if not MIN_SLOT_MINUTES <= config.slot_minutes <= MAX_SLOT_MINUTES:
        raise ValidationException(
            f"Slot length must be between {MIN_SLOT_MINUTES} and {MAX_SLOT_MINUTES} minutes",
            field="slot_minutes",
        )
    unknown = set(config.weekly) - set(WEEKDAYS)
    if unknown:
        raise ValidationException(
            f"Unknown weekday(s): {', '.join(sorted(unknown))}", field="weekly"
        )
    for label, schedule in [*config.weekly.items(), *config.overrides.items()]:
        if schedule.open and to_minutes(schedule.start) >= to_minutes(schedule.end):
            raise ValidationException(
                f"Opening hours for {label} must start before they end", field="schedule"
            )
    for closed in config.closed_ranges:
        if closed.start > closed.end:
            raise ValidationException(
                "Closed range must start on or before its end date", field="closed_ranges"
            )
