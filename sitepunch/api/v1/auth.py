import logging

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from sitepunch.core.errors import Unauthorized
from sitepunch.core.security import create_identity_token, hash_pin
from sitepunch.core.timeutils import utcnow
from sitepunch.db.company_store import CompanyStore, EmployeeStore
from sitepunch.db.mongo import get_mongo_db
from sitepunch.schemas.auth_schema import AuthResponse, EmployeeOut, LoginIn


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
async def login(payload: LoginIn, db: AsyncIOMotorDatabase = Depends(get_mongo_db)):
    company = await CompanyStore(db).find_by_code(payload.company_code)
    if not company:
        raise Unauthorized("Invalid company code")
    employees = EmployeeStore(db)
    employee = await employees.find_for_login(company["_id"], payload.employee_number.strip(), hash_pin(payload.pin))
    if not employee:
        logger.info("Failed login for employee %s at company %s", payload.employee_number, company["_id"])
        raise Unauthorized("Invalid employee ID or PIN")

    role = employee.get("role", "employee")
    token = create_identity_token(str(employee["_id"]), str(company["_id"]), role)
    await employees.touch_last_login(employee["_id"], utcnow())
    employee_out = EmployeeOut(
        id=str(employee["_id"]),
        first_name=employee.get("first_name", ""),
        last_name=employee.get("last_name", ""),
        employee_number=employee.get("employee_number", ""),
        email=employee.get("email"),
        phone=employee.get("phone"),
        role=role,
        department=employee.get("department"),
    )
    return {"success": True, "data": AuthResponse(token=token, employee=employee_out)}
