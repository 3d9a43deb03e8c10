import enum
import uuid
from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.common.errors import PermissionDeniedError
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"


VIEW_PERMISSIONS = [
    "view_dashboard",
    "view_members",
    "view_payments",
    "view_attendance",
    "view_equipment",
    "view_notifications",
    "view_communication",
]

MANAGER_PERMISSIONS = VIEW_PERMISSIONS + [
    "edit_members",
    "manage_payments",
    "manage_attendance",
    "manage_equipment",
    "manage_notifications",
    "manage_communication",
    "export_data",
]

ADMIN_PERMISSIONS = MANAGER_PERMISSIONS + [
    "delete_members",
    "manage_users",
    "manage_backup",
]

ROLE_PERMISSIONS = {
    UserRole.ADMIN: ADMIN_PERMISSIONS,
    UserRole.MANAGER: MANAGER_PERMISSIONS,
    UserRole.USER: VIEW_PERMISSIONS,
}


def default_permissions(role: UserRole) -> list[str]:
    return list(ROLE_PERMISSIONS.get(role, VIEW_PERMISSIONS))


class ClubUser(BaseModel):
    """
    A club operator account.

    The role and permission list are labels that gate actions, not a
    security boundary: there are no passwords.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    role: UserRole = UserRole.USER
    permissions: list[str] = Field(default_factory=list)
    active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    last_login: Optional[datetime] = None

    def has_permission(self, permission: str) -> bool:
        return self.active and permission in self.permissions

    def require(self, permission: str) -> None:
        if not self.has_permission(permission):
            raise PermissionDeniedError(permission, self.username)


SYSTEM_USERNAME = "system"
