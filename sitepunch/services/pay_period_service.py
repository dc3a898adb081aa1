import logging
from datetime import datetime, timedelta
from typing import Optional

from sitepunch.core.config import settings
from sitepunch.core.errors import ValidationError
from sitepunch.core.timeutils import Clock, elapsed_minutes, round_half_up, utcnow
from sitepunch.db.company_store import CompanyStore
from sitepunch.db.time_entry_store import TimeEntryStore
from sitepunch.schemas.auth_schema import Identity
from sitepunch.schemas.time_entry_schema import SummaryOut


logger = logging.getLogger(__name__)


def total_worked_minutes(entries: list[dict], now: datetime) -> int:
    """Closed entries count their stored duration, open ones the live elapsed time."""
    total = 0
    for entry in entries:
        if entry.get("duration") is not None:
            total += int(entry["duration"])
        elif entry.get("clock_out") is None:
            total += max(0, elapsed_minutes(entry["clock_in"], now))
    return total


def is_approaching_overtime(total_minutes: int, threshold_hours: float, margin_hours: float) -> bool:
    # Unrounded hours: 2099 minutes is still below a 35h warning line
    return total_minutes / 60 >= threshold_hours - margin_hours


class PayPeriodService:
    def __init__(self, store: TimeEntryStore, companies: CompanyStore, clock: Clock = utcnow) -> None:
        self.store = store
        self.companies = companies
        self.clock = clock

    async def summary(
        self,
        identity: Identity,
        window_days: int = settings.PAY_PERIOD_DAYS,
        overtime_threshold_hours: Optional[float] = None,
    ) -> SummaryOut:
        """Worked time over the trailing ``window_days`` ending now.

        The window is not aligned to calendar pay periods; ``pay_period_type``
        from the company settings is reported but does not move it.
        """
        if window_days < 1:
            raise ValidationError("window_days must be at least 1")
        company_settings = await self.companies.time_settings(identity.company_id)
        if overtime_threshold_hours is None:
            configured = company_settings.get("overtime_threshold")
            overtime_threshold_hours = float(
                configured if configured is not None else settings.OVERTIME_THRESHOLD_HOURS
            )

        now = self.clock()
        start = now - timedelta(days=window_days)
        entries = [e for e in await self.store.entries_since(identity, start) if e["clock_in"] <= now]
        total_minutes = total_worked_minutes(entries, now)
        logger.debug(
            "Summary for employee %s: %s entries, %s minutes since %s",
            identity.employee_id, len(entries), total_minutes, start,
        )
        return SummaryOut(
            total_hours=round_half_up(total_minutes / 60, 1),
            total_minutes=total_minutes,
            overtime_threshold=overtime_threshold_hours,
            approaching_overtime=is_approaching_overtime(
                total_minutes, overtime_threshold_hours, settings.OVERTIME_WARNING_MARGIN_HOURS
            ),
            period_start=start,
            period_end=now,
            pay_period_type=company_settings.get("pay_period_type"),
        )
