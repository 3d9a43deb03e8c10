"""Equipment service business logic."""

from services.equipment_service.services.inventory import (
    EQUIPMENT_KEY,
    LOANS_KEY,
    EquipmentInventory,
)

__all__ = ["EQUIPMENT_KEY", "EquipmentInventory", "LOANS_KEY"]
