"""FastAPI application entrypoint for the club gateway.

Every club service runs in this one process and shares a single
``ClubContainer``; the periodic sweeps run on the same event loop through an
APScheduler interval job that ticks the club scheduler.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from libs.common.clock import Clock
from libs.common.config import Settings, get_settings
from libs.common.error_handler import add_exception_handlers
from libs.common.logging import get_logger
from libs.common.middleware import add_observability_middleware
from libs.db.store import KeyValueStore
from services.attendance_service.routers import attendance_router
from services.backup_service.routers import backups_router, data_router, users_router
from services.communications_service.routers import communications_router
from services.dashboard_service.routers import dashboard_router
from services.equipment_service.routers import equipment_router
from services.gateway_service.app.container import ClubContainer, build_container
from services.members_service.routers import members_router
from services.payments_service.routers import payments_router
from services.reminders_service.routers import reminders_router

logger = get_logger(__name__)

API_PREFIX = "/api/v1"
TICK_JOB_ID = "club_scheduler_tick"


def build_tick_scheduler(club: ClubContainer) -> AsyncIOScheduler:
    """Interval job that runs every due club task, first tick at startup."""
    scheduler = club.scheduler

    # Coroutine job: runs on the event loop, not in a worker thread
    async def tick() -> None:
        ran = scheduler.tick()
        if ran:
            logger.debug("Scheduler ran: %s", ", ".join(ran))

    timer = AsyncIOScheduler(timezone=club.settings.TIMEZONE)
    timer.add_job(
        tick,
        IntervalTrigger(seconds=club.settings.SCHEDULER_POLL_SECONDS),
        id=TICK_JOB_ID,
        name="Club Scheduler Tick",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        next_run_time=datetime.now(timezone.utc),
    )
    return timer


@asynccontextmanager
async def lifespan(app: FastAPI):
    club = app.state.club
    timer: Optional[AsyncIOScheduler] = None
    if club.settings.SCHEDULER_ENABLED and club.scheduler is not None:
        timer = build_tick_scheduler(club)
        timer.start()
        logger.info(
            "Scheduler started with tasks: %s", ", ".join(sorted(club.scheduler.tasks))
        )
    app.state.timer = timer
    yield
    if timer is not None:
        timer.shutdown(wait=False)
        logger.info("Scheduler stopped")


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance."""
    settings = settings or get_settings()
    app = FastAPI(
        title="ClubDesk API",
        version="0.1.0",
        description="Dues, attendance, equipment and reminders for a volleyball club.",
        lifespan=lifespan,
    )
    app.state.club = build_container(settings=settings, store=store, clock=clock)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability (structured logging + request tracing)
    add_observability_middleware(app)

    # Add global exception handlers for consistent error responses
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple readiness endpoint."""
        return {"status": "ok"}

    for router in (
        members_router,
        payments_router,
        attendance_router,
        equipment_router,
        reminders_router,
        communications_router,
        dashboard_router,
        backups_router,
        data_router,
        users_router,
    ):
        app.include_router(router, prefix=API_PREFIX)

    return app


def get_app() -> FastAPI:
    """Factory for ``uvicorn --factory services.gateway_service.app.main:get_app``."""
    return create_app()
