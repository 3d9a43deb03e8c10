"""
Maintenance scheduling and loan lateness.

Pure functions of an item or loan and "today".
"""

import datetime as dt

from services.equipment_service.models import (
    Equipment,
    EquipmentCategory,
    EquipmentLoan,
)

DEFAULT_MAINTENANCE_DAYS = 90

# Days between maintenance runs per category
MAINTENANCE_INTERVAL_DAYS = {
    EquipmentCategory.BALL: 30,
    EquipmentCategory.NET: 90,
    EquipmentCategory.UNIFORM: 180,
    EquipmentCategory.OTHER_GEAR: 60,
}


def maintenance_interval(category: EquipmentCategory) -> dt.timedelta:
    return dt.timedelta(
        days=MAINTENANCE_INTERVAL_DAYS.get(category, DEFAULT_MAINTENANCE_DAYS)
    )


def next_maintenance_date(
    last_maintenance: dt.date, category: EquipmentCategory
) -> dt.date:
    return last_maintenance + maintenance_interval(category)


def needs_maintenance(equipment: Equipment, today: dt.date) -> bool:
    return today >= equipment.next_maintenance


def loan_is_overdue(loan: EquipmentLoan, today: dt.date) -> bool:
    """Active and past the expected return date; returning on the day is on time."""
    return loan.is_active and today > loan.expected_return_date


def loan_overdue_days(loan: EquipmentLoan, today: dt.date) -> int:
    if not loan_is_overdue(loan, today):
        return 0
    return (today - loan.expected_return_date).days
