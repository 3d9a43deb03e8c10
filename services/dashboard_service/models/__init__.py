"""Dashboard Service models package."""

from services.dashboard_service.models.core import (
    AttendancePoint,
    PositionCount,
    RevenuePoint,
)

__all__ = ["AttendancePoint", "PositionCount", "RevenuePoint"]
