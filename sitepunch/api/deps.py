from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from sitepunch.core.timeutils import Clock, utcnow
from sitepunch.db.company_store import CompanyStore
from sitepunch.db.mongo import get_mongo_db
from sitepunch.db.time_entry_store import TimeEntryStore
from sitepunch.services.clock_service import ClockService
from sitepunch.services.pay_period_service import PayPeriodService


def get_clock() -> Clock:
    return utcnow


def get_clock_service(
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    clock: Clock = Depends(get_clock),
) -> ClockService:
    return ClockService(TimeEntryStore(db), clock)


def get_pay_period_service(
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    clock: Clock = Depends(get_clock),
) -> PayPeriodService:
    return PayPeriodService(TimeEntryStore(db), CompanyStore(db), clock)
