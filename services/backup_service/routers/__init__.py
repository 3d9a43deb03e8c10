"""Backup service routers."""

from services.backup_service.routers.backups import router as backups_router
from services.backup_service.routers.transfer import router as data_router
from services.backup_service.routers.users import router as users_router

__all__ = ["backups_router", "data_router", "users_router"]
