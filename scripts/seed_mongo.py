from __future__ import annotations

import asyncio
from datetime import timedelta

from bson import ObjectId

from sitepunch.core.config import settings
from sitepunch.core.security import hash_pin
from sitepunch.core.timeutils import elapsed_minutes, utcnow
from sitepunch.db.mongo import create_mongo_client
from sitepunch.db.mongo_indexes import ensure_indexes


async def seed_company(db):
    now = utcnow()
    company_id = ObjectId("6562a0f0a0a0a0a0a0a0a0a0")  # stable id for idempotence
    company = {
        "_id": company_id,
        "name": "SitePunch Demo Builders",
        "code": "demo",
        "created_at": now,
        "updated_at": now,
        "settings": {
            "timezone": "America/Chicago",
            "overtime_threshold": 40,
            "pay_period_type": "biweekly",
        },
    }
    await db["companies"].update_one(
        {"_id": company_id}, {"$setOnInsert": company}, upsert=True
    )
    return company_id


async def seed_employees(db, company_id: ObjectId):
    now = utcnow()
    employees = [
        {
            "_id": ObjectId("6562a0f0a0a0a0a0a0a0a0b1"),
            "company_id": company_id,
            "employee_number": "1001",
            "pin_hash": hash_pin("1234"),
            "first_name": "Alice",
            "last_name": "Smith",
            "email": "alice@example.com",
            "phone": None,
            "role": "employee",
            "department": "Framing",
            "active": True,
            "last_login": None,
            "created_at": now,
        },
        {
            "_id": ObjectId("6562a0f0a0a0a0a0a0a0a0b2"),
            "company_id": company_id,
            "employee_number": "1002",
            "pin_hash": hash_pin("5678"),
            "first_name": "Bob",
            "last_name": "Brown",
            "email": "bob@example.com",
            "phone": None,
            "role": "employee",
            "department": "Electrical",
            "active": True,
            "last_login": None,
            "created_at": now,
        },
        {
            "_id": ObjectId("6562a0f0a0a0a0a0a0a0a0b3"),
            "company_id": company_id,
            "employee_number": "9000",
            "pin_hash": hash_pin("0000"),
            "first_name": "Mandy",
            "last_name": "Manager",
            "email": "manager@example.com",
            "phone": None,
            "role": "admin",
            "department": "Office",
            "active": True,
            "last_login": None,
            "created_at": now,
        },
    ]
    for e in employees:
        await db["employees"].update_one({"_id": e["_id"]}, {"$setOnInsert": e}, upsert=True)
    return employees


async def seed_time_entries(db, company_id: ObjectId, employees):
    now = utcnow()
    # a few closed shifts for the first employee over the last week
    emp_id = employees[0]["_id"]
    for days_ago in range(1, 6):
        clock_in = (now - timedelta(days=days_ago)).replace(hour=13, minute=0, second=0, microsecond=0)
        clock_out = clock_in + timedelta(hours=8, minutes=days_ago * 7)
        entry_id = ObjectId.from_datetime(clock_in)
        await db["time_entries"].update_one(
            {"_id": entry_id},
            {"$setOnInsert": {
                "_id": entry_id,
                "company_id": company_id,
                "employee_id": emp_id,
                "clock_in": clock_in,
                "clock_in_location": None,
                "clock_out": clock_out,
                "clock_out_location": None,
                "duration": elapsed_minutes(clock_in, clock_out),
                "is_active": False,
                "admin_notes": None,
                "created_at": clock_in,
                "updated_at": clock_out,
            }},
            upsert=True,
        )


async def main():
    client = create_mongo_client()
    db = client[settings.MONGODB_DB_NAME]
    try:
        # Ensure indexes before inserting
        await ensure_indexes(db)
        company_id = await seed_company(db)
        employees = await seed_employees(db, company_id)
        await seed_time_entries(db, company_id, employees)
        print("MongoDB seed completed.")
    finally:
        client.close()


if __name__ == "__main__":
    asyncio.run(main())
