"""Office availability repository.

The configuration is stored as JSON: dates as ISO strings, schedules as
``{"start", "end", "open"}`` objects.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.domain.entities.availability import AvailabilityConfig, ClosedRange, DaySchedule
from portal.infrastructure.persistence.models.availability import OfficeAvailability
from portal.infrastructure.persistence.repositories.base import BaseRepository


def _schedule_to_json(schedule: DaySchedule) -> dict[str, Any]:
    return {"start": schedule.start, "end": schedule.end, "open": schedule.open}


def _schedule_from_json(data: dict[str, Any]) -> DaySchedule:
    return DaySchedule(start=data["start"], end=data["end"], open=data.get("open", True))


def _config_to_columns(config: AvailabilityConfig) -> dict[str, Any]:
    return {
        "weekly_schedule": {day: _schedule_to_json(s) for day, s in config.weekly.items()},
        "slot_minutes": config.slot_minutes,
        "closed_ranges": [
            {"start": r.start.isoformat(), "end": r.end.isoformat(), "reason": r.reason}
            for r in config.closed_ranges
        ],
        "closed_dates": sorted(d.isoformat() for d in config.closed_dates),
        "date_overrides": {
            d.isoformat(): _schedule_to_json(s) for d, s in sorted(config.overrides.items())
        },
    }


def _availability_to_config(row: OfficeAvailability) -> AvailabilityConfig:
    return AvailabilityConfig(
        weekly={day: _schedule_from_json(s) for day, s in row.weekly_schedule.items()},
        slot_minutes=row.slot_minutes,
        closed_ranges=tuple(
            ClosedRange(
                start=date.fromisoformat(r["start"]),
                end=date.fromisoformat(r["end"]),
                reason=r.get("reason"),
            )
            for r in row.closed_ranges
        ),
        closed_dates=frozenset(date.fromisoformat(d) for d in row.closed_dates),
        overrides={
            date.fromisoformat(d): _schedule_from_json(s) for d, s in row.date_overrides.items()
        },
    )


class OfficeAvailabilityRepository(BaseRepository[OfficeAvailability]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, OfficeAvailability)

    async def _get_row(self, office_id: str) -> OfficeAvailability | None:
        result = await self.db.execute(
            select(OfficeAvailability).where(OfficeAvailability.office_id == office_id)
        )
        return result.scalar_one_or_none()

    async def get_for_office(self, office_id: str) -> AvailabilityConfig | None:
        row = await self._get_row(office_id)
        return _availability_to_config(row) if row else None

    async def save(self, office_id: str, config: AvailabilityConfig) -> AvailabilityConfig:
        columns = _config_to_columns(config)
        row = await self._get_row(office_id)
        if row is None:
            row = await self._add(OfficeAvailability(office_id=office_id, **columns))
        else:
            row = await self._update_fields(row.id, columns)
        return _availability_to_config(row)
