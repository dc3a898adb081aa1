from datetime import timedelta

import httpx
import pytest
from bson import ObjectId

from main import app
from sitepunch.api.deps import get_clock
from sitepunch.core.security import hash_pin
from sitepunch.db.mongo import get_mongo_db
from sitepunch.schemas.auth_schema import Identity

from conftest import auth_header, entry_doc


@pytest.fixture
async def api(db, clock):
    app.dependency_overrides[get_mongo_db] = lambda: db
    app.dependency_overrides[get_clock] = lambda: clock
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def company(db, company_id):
    await db["companies"].insert_one({
        "_id": ObjectId(company_id),
        "name": "Acme Roofing",
        "code": "acme",
        "settings": {"overtime_threshold": 40, "pay_period_type": "biweekly"},
    })
    return company_id


@pytest.fixture
async def worker(db, company):
    emp_id = ObjectId()
    await db["employees"].insert_one({
        "_id": emp_id,
        "company_id": ObjectId(company),
        "employee_number": "1001",
        "pin_hash": hash_pin("4321"),
        "first_name": "Alice",
        "last_name": "Smith",
        "role": "employee",
        "active": True,
    })
    return Identity(employee_id=str(emp_id), company_id=company, role="employee")


@pytest.fixture
def admin(company):
    return Identity(employee_id=str(ObjectId()), company_id=company, role="admin")


async def test_login_issues_a_working_token(api, db, worker):
    response = await api.post(
        "/api/v1/auth/login",
        json={"company_code": "ACME", "employee_number": "1001", "pin": "4321"},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["employee"]["id"] == worker.employee_id
    assert data["employee"]["first_name"] == "Alice"

    status = await api.get("/api/v1/time/status", headers={"Authorization": f"Bearer {data['token']}"})
    assert status.status_code == 200
    assert status.json()["data"]["is_clocked_in"] is False
    emp = await db["employees"].find_one({"_id": ObjectId(worker.employee_id)})
    assert emp["last_login"] is not None


@pytest.mark.parametrize(
    "body, error",
    [
        ({"company_code": "acme", "employee_number": "1001", "pin": "0000"}, "Invalid employee ID or PIN"),
        ({"company_code": "nope", "employee_number": "1001", "pin": "4321"}, "Invalid company code"),
    ],
)
async def test_login_rejects_bad_credentials(api, worker, body, error):
    response = await api.post("/api/v1/auth/login", json=body)
    assert response.status_code == 401
    assert response.json()["error"] == error


async def test_login_requires_all_fields(api, worker):
    response = await api.post("/api/v1/auth/login", json={"company_code": "acme", "pin": "4321"})
    assert response.status_code == 422
    assert response.json()["code"] == "ValidationError"


async def test_admin_listing_forbidden_for_employees(api, worker):
    response = await api.get("/api/v1/admin/time-entries", headers=auth_header(worker))
    assert response.status_code == 403
    assert response.json()["code"] == "Forbidden"


async def test_admin_listing_joins_names_and_hours(api, db, admin, worker, clock):
    stranger = Identity(employee_id=str(ObjectId()), company_id=admin.company_id)
    outsider = Identity(employee_id=str(ObjectId()), company_id=str(ObjectId()))
    await db["time_entries"].insert_many([
        entry_doc(worker, clock.now - timedelta(days=1), duration=90),
        entry_doc(worker, clock.now - timedelta(hours=1)),
        entry_doc(stranger, clock.now - timedelta(hours=2), duration=30),
        entry_doc(outsider, clock.now - timedelta(hours=3), duration=30),
    ])

    response = await api.get("/api/v1/admin/time-entries", headers=auth_header(admin))

    assert response.status_code == 200
    entries = response.json()["data"]["entries"]
    assert len(entries) == 3
    assert [e["employee_name"] for e in entries] == ["Alice Smith", "Unknown", "Alice Smith"]
    assert entries[0]["total_hours"] is None
    assert entries[2]["total_hours"] == 1.5
    assert all(e["company_id"] == admin.company_id for e in entries)


async def test_admin_listing_filters(api, db, admin, worker, clock):
    other = Identity(employee_id=str(ObjectId()), company_id=admin.company_id)
    await db["time_entries"].insert_many([
        entry_doc(worker, clock.now - timedelta(days=1), duration=60),
        entry_doc(worker, clock.now - timedelta(days=2), duration=60),
        entry_doc(other, clock.now - timedelta(days=1), duration=60),
    ])
    day = (clock.now - timedelta(days=1)).date().isoformat()

    by_day = await api.get("/api/v1/admin/time-entries", params={"date": day}, headers=auth_header(admin))
    by_employee = await api.get(
        "/api/v1/admin/time-entries", params={"employee_id": worker.employee_id}, headers=auth_header(admin)
    )

    assert len(by_day.json()["data"]["entries"]) == 2
    assert {e["employee_id"] for e in by_employee.json()["data"]["entries"]} == {worker.employee_id}
    assert len(by_employee.json()["data"]["entries"]) == 2


async def test_admin_listing_rejects_bad_employee_id(api, admin):
    response = await api.get(
        "/api/v1/admin/time-entries", params={"employee_id": "not-an-id"}, headers=auth_header(admin)
    )
    assert response.status_code == 422


async def test_admin_notes_only_touch_notes(api, db, admin, worker, clock):
    result = await db["time_entries"].insert_one(entry_doc(worker, clock.now - timedelta(hours=9), duration=480))
    entry_id = str(result.inserted_id)

    response = await api.patch(
        f"/api/v1/admin/time-entries/{entry_id}/notes",
        json={"admin_notes": "Forgot to clock out for lunch"},
        headers=auth_header(admin),
    )

    assert response.status_code == 200
    entry = response.json()["data"]["entry"]
    assert entry["admin_notes"] == "Forgot to clock out for lunch"
    assert entry["duration"] == 480
    stored = await db["time_entries"].find_one({"_id": result.inserted_id})
    assert stored["clock_in"] == clock.now - timedelta(hours=9)
    assert str(stored["employee_id"]) == worker.employee_id


async def test_admin_notes_are_company_scoped(api, db, admin, clock):
    outsider = Identity(employee_id=str(ObjectId()), company_id=str(ObjectId()))
    result = await db["time_entries"].insert_one(entry_doc(outsider, clock.now, duration=10))

    response = await api.patch(
        f"/api/v1/admin/time-entries/{result.inserted_id}/notes",
        json={"admin_notes": "x"},
        headers=auth_header(admin),
    )

    assert response.status_code == 404
    assert response.json()["code"] == "NotFound"
