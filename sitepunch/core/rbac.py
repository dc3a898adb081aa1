from fastapi import Depends

from sitepunch.core.errors import Forbidden
from sitepunch.core.security import get_identity
from sitepunch.schemas.auth_schema import Identity
from sitepunch.schemas.common import Role


ADMIN_ROLES = {Role.admin.value, Role.manager.value}


def is_admin_like(role: str) -> bool:
    return role in ADMIN_ROLES


async def require_admin(identity: Identity = Depends(get_identity)) -> Identity:
    if not is_admin_like(identity.role):
        raise Forbidden()
    return identity
