"""Equipment Service models package."""

from services.equipment_service.models.core import (
    Equipment,
    EquipmentLoan,
    EquipmentStats,
)
from services.equipment_service.models.enums import (
    EquipmentCategory,
    EquipmentCondition,
    LoanStatus,
)

__all__ = [
    "Equipment",
    "EquipmentCategory",
    "EquipmentCondition",
    "EquipmentLoan",
    "EquipmentStats",
    "LoanStatus",
]
