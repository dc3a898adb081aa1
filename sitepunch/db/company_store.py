from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from sitepunch.db.mongo import store_errors


class CompanyStore:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.collection = db["companies"]

    async def find_by_code(self, code: str) -> Optional[dict]:
        with store_errors("find company"):
            return await self.collection.find_one({"code": code.strip().lower()})

    async def time_settings(self, company_id: str) -> dict:
        """Overtime and pay period settings; empty when the company has none."""
        with store_errors("company settings"):
            company = await self.collection.find_one(
                {"_id": ObjectId(company_id)},
                {"settings": 1},
            )
        return dict((company or {}).get("settings") or {})


class EmployeeStore:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.collection = db["employees"]

    async def find_for_login(self, company_id: ObjectId, employee_number: str, pin_hash: str) -> Optional[dict]:
        with store_errors("find employee"):
            return await self.collection.find_one({
                "company_id": company_id,
                "employee_number": employee_number,
                "pin_hash": pin_hash,
                "active": True,
            })

    async def touch_last_login(self, employee_id: ObjectId, now: datetime) -> None:
        with store_errors("update last login"):
            await self.collection.update_one({"_id": employee_id}, {"$set": {"last_login": now}})

    async def names_by_id(self, company_id: str, employee_ids: Iterable[ObjectId]) -> dict[ObjectId, str]:
        ids = list(set(employee_ids))
        if not ids:
            return {}
        names: dict[ObjectId, str] = {}
        with store_errors("employee names"):
            cursor = self.collection.find(
                {"_id": {"$in": ids}, "company_id": ObjectId(company_id)},
                {"first_name": 1, "last_name": 1},
            )
            async for emp in cursor:
                names[emp["_id"]] = f"{emp.get('first_name', '')} {emp.get('last_name', '')}".strip()
        return names
