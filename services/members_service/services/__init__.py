"""Members service business logic."""

from services.members_service.services.directory import (
    MEMBERS_KEY,
    MemberDirectory,
    duplicate_emails,
)

__all__ = ["MEMBERS_KEY", "MemberDirectory", "duplicate_emails"]
