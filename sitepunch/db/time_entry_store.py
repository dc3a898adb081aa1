"""
Access layer for the ``time_entries`` collection.

Every employee-facing query is scoped by ``company_id`` and ``employee_id``
taken from the verified identity, admin queries by ``company_id``. The open
entry of an employee is the one document with ``is_active: True``; opening and
closing it are single conditional writes, so two racing clock-ins cannot both
create an open entry and two racing clock-outs cannot both close it.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from sitepunch.core.errors import AlreadyClockedIn, NotClockedIn
from sitepunch.db.mongo import store_errors
from sitepunch.schemas.auth_schema import Identity
from sitepunch.schemas.time_entry_schema import Location, TimeEntryOut


logger = logging.getLogger(__name__)

COLLECTION = "time_entries"


def owner_filter(identity: Identity) -> dict:
    return {
        "company_id": ObjectId(identity.company_id),
        "employee_id": ObjectId(identity.employee_id),
    }


def _clock_in_range(start: Optional[datetime], end: Optional[datetime]) -> dict:
    rng: dict = {}
    if start is not None:
        rng["$gte"] = start
    if end is not None:
        rng["$lte"] = end
    return rng


def to_entry_out(doc: dict) -> TimeEntryOut:
    return TimeEntryOut(
        id=str(doc["_id"]),
        employee_id=str(doc["employee_id"]),
        company_id=str(doc["company_id"]),
        clock_in=doc["clock_in"],
        clock_in_location=doc.get("clock_in_location"),
        clock_out=doc.get("clock_out"),
        clock_out_location=doc.get("clock_out_location"),
        duration=doc.get("duration"),
        admin_notes=doc.get("admin_notes"),
    )


class TimeEntryStore:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.collection = db[COLLECTION]

    async def open_entry(self, identity: Identity, clock_in: datetime, location: Optional[Location] = None) -> dict:
        """Insert an open entry unless the employee already has one.

        The upsert only inserts when nothing matches the open-entry filter;
        the partial unique index catches the case where two upserts race.
        """
        scope = owner_filter(identity)
        doc = {
            **scope,
            "clock_in": clock_in,
            "clock_in_location": location.model_dump() if location else None,
            "clock_out": None,
            "clock_out_location": None,
            "duration": None,
            "is_active": True,
            "admin_notes": None,
            "created_at": clock_in,
            "updated_at": clock_in,
        }
        with store_errors("open entry"):
            try:
                result = await self.collection.update_one(
                    {**scope, "is_active": True},
                    {"$setOnInsert": doc},
                    upsert=True,
                )
            except DuplicateKeyError as exc:
                logger.info("Concurrent clock-in rejected for employee %s", identity.employee_id)
                raise AlreadyClockedIn() from exc
        if result.upserted_id is None:
            raise AlreadyClockedIn()
        doc["_id"] = result.upserted_id
        return doc

    async def find_open(self, identity: Identity) -> Optional[dict]:
        with store_errors("find open entry"):
            return await self.collection.find_one({**owner_filter(identity), "is_active": True})

    async def close_entry(
        self,
        identity: Identity,
        entry_id: ObjectId,
        clock_out: datetime,
        duration: int,
        location: Optional[Location] = None,
    ) -> dict:
        """Close one open entry by id; a second close of the same entry matches nothing."""
        with store_errors("close entry"):
            doc = await self.collection.find_one_and_update(
                {"_id": entry_id, **owner_filter(identity), "is_active": True},
                {"$set": {
                    "clock_out": clock_out,
                    "clock_out_location": location.model_dump() if location else None,
                    "duration": duration,
                    "is_active": False,
                    "updated_at": clock_out,
                }},
                return_document=ReturnDocument.AFTER,
            )
        if doc is None:
            raise NotClockedIn()
        return doc

    async def list_for_employee(
        self,
        identity: Identity,
        limit: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[dict]:
        q: dict = owner_filter(identity)
        rng = _clock_in_range(start, end)
        if rng:
            q["clock_in"] = rng
        with store_errors("list entries"):
            cursor = self.collection.find(q).sort("clock_in", -1).limit(limit)
            return [doc async for doc in cursor]

    async def entries_since(self, identity: Identity, since: datetime) -> list[dict]:
        q = {**owner_filter(identity), "clock_in": {"$gte": since}}
        with store_errors("entries since"):
            return [doc async for doc in self.collection.find(q)]

    async def list_for_company(
        self,
        company_id: str,
        limit: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        employee_id: Optional[ObjectId] = None,
    ) -> list[dict]:
        q: dict = {"company_id": ObjectId(company_id)}
        if employee_id is not None:
            q["employee_id"] = employee_id
        rng = _clock_in_range(start, end)
        if rng:
            q["clock_in"] = rng
        with store_errors("list company entries"):
            cursor = self.collection.find(q).sort("clock_in", -1).limit(limit)
            return [doc async for doc in cursor]

    async def set_admin_notes(self, company_id: str, entry_id: ObjectId, notes: Optional[str], now: datetime) -> Optional[dict]:
        # Only admin_notes is writable here; clock_in and ownership stay as created
        with store_errors("set admin notes"):
            return await self.collection.find_one_and_update(
                {"_id": entry_id, "company_id": ObjectId(company_id)},
                {"$set": {"admin_notes": notes, "updated_at": now}},
                return_document=ReturnDocument.AFTER,
            )
