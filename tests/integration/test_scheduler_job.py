"""Integration tests for the interval job that drives the club scheduler."""

import datetime as dt

import pytest
from services.gateway_service.app.main import (
    TICK_JOB_ID,
    build_tick_scheduler,
    create_app,
)
from tests.factories import MemberFactory


@pytest.mark.asyncio
@pytest.mark.integration
async def test_tick_job_runs_due_tasks(club):
    club.members.add_member(**MemberFactory.payload())

    timer = build_tick_scheduler(club)
    job = timer.get_job(TICK_JOB_ID)

    assert job.trigger.interval == dt.timedelta(
        seconds=club.settings.SCHEDULER_POLL_SECONDS
    )
    assert club.scheduler.tasks["generate_obligations"].runs == 0

    await job.func()
    assert club.scheduler.tasks["generate_obligations"].runs == 1
    assert club.scheduler.tasks["overdue_sweep"].runs == 1

    # Nothing is due again until the clock moves
    await job.func()
    assert club.scheduler.tasks["generate_obligations"].runs == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_lifespan_starts_and_stops_the_timer(settings, store, clock):
    enabled = settings.model_copy(update={"SCHEDULER_ENABLED": True})
    app = create_app(settings=enabled, store=store, clock=clock)

    async with app.router.lifespan_context(app):
        timer = app.state.timer
        assert timer.running
        assert timer.get_job(TICK_JOB_ID) is not None

    assert not timer.running


@pytest.mark.asyncio
@pytest.mark.integration
async def test_lifespan_without_scheduler(app):
    async with app.router.lifespan_context(app):
        assert app.state.timer is None
