from datetime import datetime
from typing import Annotated, Optional
from pydantic import BaseModel, Field, PlainSerializer

from sitepunch.core.timeutils import to_utc_iso


# Stored naive UTC, sent with an explicit offset so clients do not read local time
UtcDatetime = Annotated[datetime, PlainSerializer(to_utc_iso, return_type=str, when_used="json")]


class Location(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    accuracy: Optional[float] = Field(default=None, ge=0)


class ClockPayload(BaseModel):
    # Absent when the device could not produce a GPS fix
    location: Optional[Location] = None


class TimeEntryOut(BaseModel):
    id: str
    employee_id: str
    company_id: str
    clock_in: UtcDatetime
    clock_in_location: Optional[Location] = None
    clock_out: Optional[UtcDatetime] = None
    clock_out_location: Optional[Location] = None
    duration: Optional[int] = None
    admin_notes: Optional[str] = None


class ClockInOut(BaseModel):
    entry_id: str
    clock_in: UtcDatetime


class ClockOutOut(BaseModel):
    clock_out: UtcDatetime
    duration_minutes: int


class CurrentDuration(BaseModel):
    minutes: int


class StatusOut(BaseModel):
    is_clocked_in: bool
    current_entry: Optional[TimeEntryOut] = None
    current_duration: Optional[CurrentDuration] = None


class SummaryOut(BaseModel):
    total_hours: float
    total_minutes: int
    overtime_threshold: float
    approaching_overtime: bool
    period_start: UtcDatetime
    period_end: UtcDatetime
    pay_period_type: Optional[str] = None


class AdminTimeEntryOut(TimeEntryOut):
    employee_name: str
    total_hours: Optional[float] = None


class AdminNotesIn(BaseModel):
    admin_notes: Optional[str] = Field(default=None, max_length=2000)
