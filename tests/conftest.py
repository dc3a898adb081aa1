from datetime import datetime, timedelta
from typing import Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from main import app
from sitepunch.api.deps import get_clock
from sitepunch.core.security import create_identity_token
from sitepunch.db.company_store import CompanyStore
from sitepunch.db.mongo import get_mongo_db
from sitepunch.db.time_entry_store import TimeEntryStore
from sitepunch.schemas.auth_schema import Identity


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def db():
    return AsyncMongoMockClient()["sitepunch_test"]


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 2, 10, 0, 0))


@pytest.fixture
def company_id():
    return str(ObjectId())


@pytest.fixture
def identity(company_id):
    return Identity(employee_id=str(ObjectId()), company_id=company_id, role="employee")


@pytest.fixture
def store(db):
    return TimeEntryStore(db)


@pytest.fixture
def companies(db):
    return CompanyStore(db)


@pytest.fixture
def client(db, clock):
    app.dependency_overrides[get_mongo_db] = lambda: db
    app.dependency_overrides[get_clock] = lambda: clock
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_header(identity: Identity) -> dict:
    token = create_identity_token(identity.employee_id, identity.company_id, identity.role)
    return {"Authorization": f"Bearer {token}"}


def entry_doc(identity: Identity, clock_in: datetime, duration: Optional[int] = None) -> dict:
    """Raw time entry as stored; closed when ``duration`` is given."""
    clock_out = clock_in + timedelta(minutes=duration) if duration is not None else None
    return {
        "company_id": ObjectId(identity.company_id),
        "employee_id": ObjectId(identity.employee_id),
        "clock_in": clock_in,
        "clock_in_location": None,
        "clock_out": clock_out,
        "clock_out_location": None,
        "duration": duration,
        "is_active": clock_out is None,
        "admin_notes": None,
        "created_at": clock_in,
        "updated_at": clock_out or clock_in,
    }
