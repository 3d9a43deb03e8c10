"""Domain error taxonomy shared by every club manager.

Each error carries a user-visible message. None of them is fatal: the caller
reports the message and the user retries with corrected input.
"""

from __future__ import annotations

from typing import Iterable


class ClubError(Exception):
    """Base class for recoverable, user-visible club errors."""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def errors(self) -> list[str]:
        return [self.message]


class ValidationError(ClubError):
    """One or more required fields are missing or out of range."""

    kind = "validation_error"

    def __init__(self, errors: Iterable[str], prefix: str = "Invalid input"):
        self._errors = list(errors)
        super().__init__(f"{prefix}: " + "; ".join(self._errors))

    @property
    def errors(self) -> list[str]:
        return list(self._errors)


class PersistedDataError(ValidationError):
    """A stored or imported document failed validated deserialization."""

    kind = "persisted_data_error"

    def __init__(self, key: str, errors: Iterable[str]):
        self.key = key
        super().__init__(errors, prefix=f"Malformed data for '{key}'")


class NotFoundError(ClubError):
    kind = "not_found"

    def __init__(self, entity: str, identifier):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found: {identifier}")


class ConflictError(ClubError):
    """The operation is valid in shape but conflicts with current state."""

    kind = "conflict"


class PermissionDeniedError(ClubError):
    kind = "permission_denied"

    def __init__(self, permission: str, username: str | None = None):
        self.permission = permission
        who = f"User '{username}'" if username else "Anonymous user"
        super().__init__(f"{who} lacks permission '{permission}'")
