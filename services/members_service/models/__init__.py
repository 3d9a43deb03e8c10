"""Members Service models package."""

from services.members_service.models.core import Member
from services.members_service.models.enums import PlayerPosition

__all__ = ["Member", "PlayerPosition"]
