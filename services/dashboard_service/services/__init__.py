"""Dashboard service business logic."""

from services.dashboard_service.services.series import (
    Dashboard,
    attendance_by_month,
    members_by_position,
    revenue_by_month,
)

__all__ = [
    "Dashboard",
    "attendance_by_month",
    "members_by_position",
    "revenue_by_month",
]
