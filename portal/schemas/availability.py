"""Office availability API schemas."""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, Field

from portal.application.dtos.availability import DaySlots
from portal.domain.entities.availability import (
    MAX_SLOT_MINUTES,
    MIN_SLOT_MINUTES,
    AvailabilityConfig,
    ClosedRange,
    DaySchedule,
)

_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class DayScheduleBody(BaseModel):
    start: str = Field(..., pattern=_TIME_PATTERN, description="HH:MM")
    end: str = Field(..., pattern=_TIME_PATTERN, description="HH:MM")
    open: bool = True

    def to_schedule(self) -> DaySchedule:
        return DaySchedule(start=self.start, end=self.end, open=self.open)

    @classmethod
    def from_schedule(cls, schedule: DaySchedule) -> DayScheduleBody:
        return cls(start=schedule.start, end=schedule.end, open=schedule.open)


class ClosedRangeBody(BaseModel):
    start: date
    end: date
    reason: str | None = Field(default=None, max_length=255)


class AvailabilityUpdateBody(BaseModel):
    """Partial update. ``weekly`` merges by weekday; other fields replace what is stored."""

    weekly: dict[str, DayScheduleBody] | None = Field(
        default=None, description="Keyed by lowercase weekday name"
    )
    slot_minutes: int | None = Field(default=None, ge=MIN_SLOT_MINUTES, le=MAX_SLOT_MINUTES)
    closed_ranges: list[ClosedRangeBody] | None = None
    closed_dates: list[date] | None = None
    overrides: dict[date, DayScheduleBody] | None = None

    def to_changes(self) -> dict[str, Any]:
        changes: dict[str, Any] = {}
        if self.weekly is not None:
            changes["weekly"] = {day.lower(): s.to_schedule() for day, s in self.weekly.items()}
        if self.slot_minutes is not None:
            changes["slot_minutes"] = self.slot_minutes
        if self.closed_ranges is not None:
            changes["closed_ranges"] = tuple(
                ClosedRange(start=r.start, end=r.end, reason=r.reason) for r in self.closed_ranges
            )
        if self.closed_dates is not None:
            changes["closed_dates"] = frozenset(self.closed_dates)
        if self.overrides is not None:
            changes["overrides"] = {d: s.to_schedule() for d, s in self.overrides.items()}
        return changes


class AvailabilityResponse(BaseModel):
    office_id: str
    weekly: dict[str, DayScheduleBody]
    slot_minutes: int
    closed_ranges: list[ClosedRangeBody]
    closed_dates: list[date]
    overrides: dict[date, DayScheduleBody]

    @classmethod
    def from_config(cls, office_id: str, config: AvailabilityConfig) -> AvailabilityResponse:
        return cls(
            office_id=office_id,
            weekly={day: DayScheduleBody.from_schedule(s) for day, s in config.weekly.items()},
            slot_minutes=config.slot_minutes,
            closed_ranges=[
                ClosedRangeBody(start=r.start, end=r.end, reason=r.reason)
                for r in config.closed_ranges
            ],
            closed_dates=sorted(config.closed_dates),
            overrides={
                d: DayScheduleBody.from_schedule(s) for d, s in sorted(config.overrides.items())
            },
        )


class SlotsResponse(BaseModel):
    office_id: str
    date: date
    available_slots: list[str]
    booked_slots: list[str]
    total_slots: int

    @classmethod
    def from_result(cls, slots: DaySlots) -> SlotsResponse:
        return cls(
            office_id=slots.office_id,
            date=slots.date,
            available_slots=slots.available_slots,
            booked_slots=slots.booked_slots,
            total_slots=len(slots.available_slots),
        )
