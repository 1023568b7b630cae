"""
Who is calling: either a stored ``User`` or the environment-configured system admin.

The system admin has no users row. Its id is the ``admin-env`` sentinel,
which is what ends up in loosely-typed owner columns (``events.organizer_id``,
``comments.user_id``, ``likes.user_id``).
"""
from dataclasses import dataclass
from typing import Optional, Union

from eventdekho.core.security import SYSTEM_ADMIN_ID
from eventdekho.db.models.enums import RoleEnum
from eventdekho.db.models.user import User


@dataclass(frozen=True)
class SystemAdmin:
    email: str
    id: str = SYSTEM_ADMIN_ID
    name: str = "System Admin"
    role: RoleEnum = RoleEnum.admin
    verified: bool = True
    avatar: Optional[str] = None
    is_virtual: bool = True
    is_admin: bool = True


Principal = Union[User, SystemAdmin]


def principal_id(principal: Principal) -> str:
    return str(principal.id)
