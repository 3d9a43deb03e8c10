"""Equipment service routers."""

from services.equipment_service.routers.equipment import router as equipment_router

__all__ = ["equipment_router"]
