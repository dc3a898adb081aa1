"""
Clock in / clock out lifecycle for one employee.

An employee has at most one open entry. Clock-in and clock-out are each a
single conditional write in ``TimeEntryStore``; this service only computes
timestamps and durations around them.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from sitepunch.core.config import settings
from sitepunch.core.errors import NotClockedIn, ValidationError
from sitepunch.core.timeutils import Clock, elapsed_minutes, utcnow
from sitepunch.db.time_entry_store import TimeEntryStore, to_entry_out
from sitepunch.schemas.auth_schema import Identity
from sitepunch.schemas.time_entry_schema import (
    ClockOutOut,
    CurrentDuration,
    Location,
    StatusOut,
    TimeEntryOut,
)


logger = logging.getLogger(__name__)

MAX_LIST_LIMIT = 100


class ClockService:
    def __init__(self, store: TimeEntryStore, clock: Clock = utcnow) -> None:
        self.store = store
        self.clock = clock

    async def clock_in(self, identity: Identity, location: Optional[Location] = None) -> TimeEntryOut:
        doc = await self.store.open_entry(identity, self.clock(), location)
        logger.info("Employee %s clocked in, entry %s", identity.employee_id, doc["_id"])
        return to_entry_out(doc)

    async def clock_out(self, identity: Identity, location: Optional[Location] = None) -> ClockOutOut:
        entry = await self.store.find_open(identity)
        if entry is None:
            raise NotClockedIn()
        clock_out = self.clock()
        if clock_out <= entry["clock_in"]:
            # clock_out must stay strictly after clock_in
            clock_out = entry["clock_in"] + timedelta(milliseconds=1)
        duration = elapsed_minutes(entry["clock_in"], clock_out)
        doc = await self.store.close_entry(identity, entry["_id"], clock_out, duration, location)
        logger.info(
            "Employee %s clocked out, entry %s, %s minutes",
            identity.employee_id, doc["_id"], duration,
        )
        return ClockOutOut(clock_out=doc["clock_out"], duration_minutes=doc["duration"])

    async def current_status(self, identity: Identity) -> StatusOut:
        entry = await self.store.find_open(identity)
        if entry is None:
            return StatusOut(is_clocked_in=False)
        minutes = max(0, elapsed_minutes(entry["clock_in"], self.clock()))
        return StatusOut(
            is_clocked_in=True,
            current_entry=to_entry_out(entry),
            current_duration=CurrentDuration(minutes=minutes),
        )

    async def list_entries(
        self,
        identity: Identity,
        limit: int = settings.ENTRIES_DEFAULT_LIMIT,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[TimeEntryOut]:
        if limit < 1 or limit > MAX_LIST_LIMIT:
            raise ValidationError(f"limit must be between 1 and {MAX_LIST_LIMIT}")
        if start is not None and end is not None and end < start:
            raise ValidationError("'to' must not be before 'from'")
        docs = await self.store.list_for_employee(identity, limit, start, end)
        return [to_entry_out(d) for d in docs]
