from datetime import date, datetime, time, timedelta
from typing import Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, Path, Query
from motor.motor_asyncio import AsyncIOMotorDatabase

from sitepunch.api.deps import get_clock
from sitepunch.core.errors import NotFound, ValidationError
from sitepunch.core.rbac import require_admin
from sitepunch.core.timeutils import Clock, round_half_up
from sitepunch.db.company_store import EmployeeStore
from sitepunch.db.mongo import get_mongo_db
from sitepunch.db.time_entry_store import TimeEntryStore, to_entry_out
from sitepunch.schemas.auth_schema import Identity
from sitepunch.schemas.time_entry_schema import AdminNotesIn, AdminTimeEntryOut


router = APIRouter(prefix="/admin", tags=["admin"])

ADMIN_LIST_LIMIT = 100


def _object_id(value: str, field: str) -> ObjectId:
    if not ObjectId.is_valid(value):
        raise ValidationError(f"Invalid {field}")
    return ObjectId(value)


def _entry_hours(doc: dict) -> Optional[float]:
    if doc.get("clock_in") and doc.get("clock_out"):
        return round_half_up((doc["clock_out"] - doc["clock_in"]).total_seconds() / 3600, 2)
    return None


@router.get("/time-entries")
async def company_time_entries(
    day: Optional[date] = Query(None, alias="date"),
    employee_id: Optional[str] = Query(None),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    admin: Identity = Depends(require_admin),
):
    """Company entries, newest first, with employee names joined in."""
    start = end = None
    if day is not None:
        start = datetime.combine(day, time.min)
        end = start + timedelta(days=1) - timedelta(microseconds=1)
    emp_oid = _object_id(employee_id, "employee_id") if employee_id else None
    docs = await TimeEntryStore(db).list_for_company(
        admin.company_id, ADMIN_LIST_LIMIT, start=start, end=end, employee_id=emp_oid
    )
    names = await EmployeeStore(db).names_by_id(admin.company_id, (d["employee_id"] for d in docs))
    entries = [
        AdminTimeEntryOut(
            **to_entry_out(d).model_dump(),
            employee_name=names.get(d["employee_id"]) or "Unknown",
            total_hours=_entry_hours(d),
        )
        for d in docs
    ]
    return {"success": True, "data": {"entries": entries}}


@router.patch("/time-entries/{entry_id}/notes")
async def update_admin_notes(
    payload: AdminNotesIn,
    entry_id: str = Path(...),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    clock: Clock = Depends(get_clock),
    admin: Identity = Depends(require_admin),
):
    doc = await TimeEntryStore(db).set_admin_notes(
        admin.company_id, _object_id(entry_id, "entry_id"), payload.admin_notes, clock()
    )
    if doc is None:
        raise NotFound("Time entry not found")
    return {"success": True, "data": {"entry": to_entry_out(doc)}}
