"""Club operator accounts and their permission labels."""

import uuid
from typing import Optional

from libs.auth.models import ClubUser, UserRole, default_permissions
from libs.common.clock import Clock
from libs.common.errors import ConflictError, NotFoundError
from libs.common.logging import get_logger
from libs.db.repository import CollectionRepository, validate_input
from libs.db.store import KeyValueStore

logger = get_logger(__name__)

USERS_KEY = "users"


class UserDirectory:
    def __init__(self, store: KeyValueStore, clock: Clock):
        self.clock = clock
        self.repository = CollectionRepository(store, USERS_KEY, ClubUser)
        self.users: list[ClubUser] = self.repository.load()

    def _save(self) -> None:
        self.repository.save(self.users)

    def _index_of(self, user_id: uuid.UUID) -> int:
        for index, user in enumerate(self.users):
            if user.id == user_id:
                return index
        raise NotFoundError("User", user_id)

    def _check_unique_username(
        self, username: str, exclude_id: Optional[uuid.UUID] = None
    ) -> None:
        for user in self.users:
            if user.id != exclude_id and user.username.lower() == username.lower():
                raise ConflictError(f"Username {username} is already taken")

    def ensure_default_admin(self, username: str, email: str) -> Optional[ClubUser]:
        """Seed an admin account when there are no users at all."""
        if self.users:
            return None
        admin = ClubUser(
            username=username,
            email=email,
            role=UserRole.ADMIN,
            permissions=default_permissions(UserRole.ADMIN),
            created_at=self.clock.now(),
        )
        self.users.append(admin)
        self._save()
        logger.info("Created default admin user %s", admin.username)
        return admin

    def find_by_username(self, username: str) -> Optional[ClubUser]:
        for user in self.users:
            if user.username == username:
                return user.model_copy(deep=True)
        return None

    def get_user(self, actor: ClubUser, user_id: uuid.UUID) -> ClubUser:
        actor.require("manage_users")
        return self.users[self._index_of(user_id)].model_copy(deep=True)

    def get_all_users(self, actor: ClubUser) -> list[ClubUser]:
        actor.require("manage_users")
        return [user.model_copy(deep=True) for user in self.users]

    def login(self, username: str) -> ClubUser:
        """Record a login. There is no password: the role is a label only."""
        for user in self.users:
            if user.username == username and user.active:
                user.last_login = self.clock.now()
                self._save()
                logger.info("User %s logged in", username)
                return user.model_copy(deep=True)
        raise NotFoundError("Active user", username)

    def create_user(
        self,
        actor: ClubUser,
        username: Optional[str] = None,
        email: Optional[str] = None,
        role: UserRole = UserRole.USER,
        permissions: Optional[list[str]] = None,
    ) -> ClubUser:
        actor.require("manage_users")
        user = validate_input(
            ClubUser,
            {
                "username": username,
                "email": email,
                "role": role,
                "created_at": self.clock.now(),
            },
            prefix="Invalid user",
        )
        user.permissions = (
            list(permissions) if permissions is not None else default_permissions(user.role)
        )
        self._check_unique_username(user.username)

        self.users.append(user)
        self._save()
        logger.info("User %s created %s (%s)", actor.username, user.username, user.role.value)
        return user.model_copy(deep=True)

    def update_user(self, actor: ClubUser, user_id: uuid.UUID, **changes) -> ClubUser:
        actor.require("manage_users")
        index = self._index_of(user_id)
        current = self.users[index]
        changes = {
            k: v
            for k, v in changes.items()
            if v is not None and k in ("username", "email", "role", "permissions", "active")
        }

        if current.id == actor.id:
            new_role = changes.get("role", current.role)
            if current.role == UserRole.ADMIN and new_role != UserRole.ADMIN:
                raise ConflictError("You cannot remove your own admin role")
            if changes.get("active") is False:
                raise ConflictError("You cannot deactivate your own account")

        merged = {**current.model_dump(), **changes}
        if "role" in changes and "permissions" not in changes:
            merged["permissions"] = default_permissions(UserRole(changes["role"]))
        user = validate_input(ClubUser, merged, prefix="Invalid user")
        self._check_unique_username(user.username, exclude_id=user.id)

        self.users[index] = user
        self._save()
        logger.info("User %s updated %s", actor.username, user.username)
        return user.model_copy(deep=True)

    def delete_user(self, actor: ClubUser, user_id: uuid.UUID) -> ClubUser:
        actor.require("manage_users")
        if user_id == actor.id:
            raise ConflictError("You cannot delete your own user")
        index = self._index_of(user_id)
        user = self.users.pop(index)
        self._save()
        logger.info("User %s deleted %s", actor.username, user.username)
        return user
