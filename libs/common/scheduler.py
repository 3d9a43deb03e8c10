"""In-process periodic task scheduler driven by an injectable clock.

Replaces free-running timers: each task declares an interval, and ``tick()``
runs every task that is due according to ``clock.now()``. Tests advance a
``FrozenClock`` and call ``tick()``; in the app an APScheduler interval job
calls ``tick()`` on the event loop.

Tasks are plain synchronous callables, so a task never yields mid-mutation
and a user request never observes partial state.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from libs.common.clock import Clock
from libs.common.logging import get_logger

logger = get_logger(__name__)


@dataclass
class PeriodicTask:
    name: str
    interval: timedelta
    func: Callable[[], Any]
    run_at_startup: bool = True
    next_run_at: Optional[datetime] = None
    last_run_at: Optional[datetime] = None
    runs: int = 0
    failures: int = 0


class Scheduler:
    """Runs registered tasks when their interval has elapsed."""

    def __init__(self, clock: Clock):
        self.clock = clock
        self.tasks: dict[str, PeriodicTask] = {}

    def add_task(
        self,
        name: str,
        interval: timedelta,
        func: Callable[[], Any],
        *,
        run_at_startup: bool = True,
    ) -> PeriodicTask:
        if interval <= timedelta(0):
            raise ValueError(f"Task {name} needs a positive interval")
        if name in self.tasks:
            raise ValueError(f"Task {name} is already registered")

        now = self.clock.now()
        task = PeriodicTask(
            name=name,
            interval=interval,
            func=func,
            run_at_startup=run_at_startup,
            next_run_at=now if run_at_startup else now + interval,
        )
        self.tasks[name] = task
        return task

    def due_tasks(self) -> list[PeriodicTask]:
        now = self.clock.now()
        return [task for task in self.tasks.values() if task.next_run_at <= now]

    def tick(self) -> list[str]:
        """Run every due task once and return the names that ran.

        A failing task is logged and rescheduled; it never stops the others.
        """
        ran: list[str] = []
        for task in self.due_tasks():
            now = self.clock.now()
            try:
                task.func()
            except Exception:
                task.failures += 1
                logger.exception("Scheduled task %s failed", task.name)
            else:
                task.runs += 1
            task.last_run_at = now
            # Skip missed runs instead of replaying a backlog
            task.next_run_at = now + task.interval
            ran.append(task.name)
        return ran

    def run_now(self, name: str) -> None:
        """Run one task immediately, outside of its schedule."""
        task = self.tasks[name]
        task.func()
        task.runs += 1
        task.last_run_at = self.clock.now()

