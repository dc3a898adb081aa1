from typing import Optional
from pydantic import BaseModel, Field


class LoginIn(BaseModel):
    company_code: str = Field(min_length=1)
    employee_number: str = Field(min_length=1)
    pin: str = Field(min_length=1)


class EmployeeOut(BaseModel):
    id: str
    first_name: str
    last_name: str
    employee_number: str
    email: Optional[str] = None
    phone: Optional[str] = None
    role: str
    department: Optional[str] = None


class AuthResponse(BaseModel):
    token: str
    employee: EmployeeOut


class Identity(BaseModel):
    """Verified caller, decoded from the bearer token."""

    employee_id: str
    company_id: str
    role: str = "employee"
