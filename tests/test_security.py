import jwt
import pytest
from bson import ObjectId

from sitepunch.core.config import settings
from sitepunch.core.errors import Unauthorized
from sitepunch.core.security import ALGORITHM, create_identity_token, hash_pin, identity_from_token


def test_identity_round_trips_through_the_token():
    employee_id, company_id = str(ObjectId()), str(ObjectId())
    token = create_identity_token(employee_id, company_id, "manager")

    identity = identity_from_token(token)

    assert identity.employee_id == employee_id
    assert identity.company_id == company_id
    assert identity.role == "manager"


def test_role_defaults_to_employee():
    token = jwt.encode(
        {"sub": str(ObjectId()), "company_id": str(ObjectId())}, settings.SECRET_KEY, algorithm=ALGORITHM
    )
    assert identity_from_token(token).role == "employee"


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_tokens_are_unauthorized(token):
    with pytest.raises(Unauthorized):
        identity_from_token(token)


def test_non_object_id_claims_are_unauthorized():
    token = jwt.encode({"sub": "42", "company_id": str(ObjectId())}, settings.SECRET_KEY, algorithm=ALGORITHM)
    with pytest.raises(Unauthorized):
        identity_from_token(token)


def test_hash_pin_is_stable():
    assert hash_pin("1234") == hash_pin("1234")
    assert hash_pin("1234") != hash_pin("1235")
