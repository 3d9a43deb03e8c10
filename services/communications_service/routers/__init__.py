"""Communications service routers."""

from services.communications_service.routers.messages import (
    router as communications_router,
)

__all__ = ["communications_router"]
