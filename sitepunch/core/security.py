import hashlib
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from bson import ObjectId
from fastapi import Header

from sitepunch.core.config import settings
from sitepunch.core.errors import Unauthorized
from sitepunch.schemas.auth_schema import Identity


ALGORITHM = "HS256"


def hash_pin(pin: str) -> str:
    return hashlib.sha256(pin.encode("utf-8")).hexdigest()


def create_jwt(payload: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = payload.copy()
    if expires_delta is None:
        expires_delta = timedelta(days=settings.JWT_EXPIRES_DAYS)
    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def create_identity_token(employee_id: str, company_id: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    return create_jwt({"sub": employee_id, "company_id": company_id, "role": role}, expires_delta)


def decode_jwt(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.PyJWTError as exc:
        raise Unauthorized() from exc


def identity_from_token(token: str) -> Identity:
    payload = decode_jwt(token)
    employee_id = payload.get("sub")
    company_id = payload.get("company_id")
    if not ObjectId.is_valid(str(employee_id or "")) or not ObjectId.is_valid(str(company_id or "")):
        raise Unauthorized()
    return Identity(
        employee_id=str(employee_id),
        company_id=str(company_id),
        role=str(payload.get("role") or "employee"),
    )


async def get_identity(authorization: Optional[str] = Header(None)) -> Identity:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise Unauthorized()
    token = authorization.split(" ", 1)[1].strip()
    return identity_from_token(token)
