from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from sitepunch.api.deps import get_clock_service, get_pay_period_service
from sitepunch.core.config import settings
from sitepunch.core.security import get_identity
from sitepunch.core.timeutils import as_naive_utc
from sitepunch.schemas.auth_schema import Identity
from sitepunch.schemas.time_entry_schema import ClockInOut, ClockPayload
from sitepunch.services.clock_service import MAX_LIST_LIMIT, ClockService
from sitepunch.services.pay_period_service import PayPeriodService


router = APIRouter(prefix="/time", tags=["time"])


@router.post("/clock-in")
async def clock_in(
    payload: Optional[ClockPayload] = None,
    identity: Identity = Depends(get_identity),
    service: ClockService = Depends(get_clock_service),
):
    entry = await service.clock_in(identity, payload.location if payload else None)
    return {"success": True, "data": ClockInOut(entry_id=entry.id, clock_in=entry.clock_in)}


@router.post("/clock-out")
async def clock_out(
    payload: Optional[ClockPayload] = None,
    identity: Identity = Depends(get_identity),
    service: ClockService = Depends(get_clock_service),
):
    result = await service.clock_out(identity, payload.location if payload else None)
    return {"success": True, "data": result}


@router.get("/status")
async def current_status(
    identity: Identity = Depends(get_identity),
    service: ClockService = Depends(get_clock_service),
):
    return {"success": True, "data": await service.current_status(identity)}


@router.get("/entries")
async def my_time_entries(
    from_: Optional[datetime] = Query(None, alias="from"),
    to: Optional[datetime] = Query(None),
    limit: int = Query(settings.ENTRIES_DEFAULT_LIMIT, ge=1, le=MAX_LIST_LIMIT),
    identity: Identity = Depends(get_identity),
    service: ClockService = Depends(get_clock_service),
):
    entries = await service.list_entries(
        identity, limit=limit, start=as_naive_utc(from_), end=as_naive_utc(to)
    )
    return {"success": True, "data": {"entries": entries}}


@router.get("/summary")
async def pay_period_summary(
    identity: Identity = Depends(get_identity),
    service: PayPeriodService = Depends(get_pay_period_service),
):
    return {"success": True, "data": await service.summary(identity)}
