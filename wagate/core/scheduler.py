"""Deferred background tasks.

Simple asyncio.create_task() based scheduling: every trigger arms its own
task which sleeps for the delay and then runs the job. Nothing is coalesced,
so a burst of triggers produces a burst of runs.
"""

import asyncio
from typing import Awaitable, Callable

from wagate.core.logging import log

JobFactory = Callable[[], Awaitable[object]]


class TaskScheduler:
    """Fire-and-forget delayed jobs keyed by what triggered them."""

    def __init__(self):
        self._tasks: set[asyncio.Task] = set()

    def schedule(self, key: str, delay: float, job: JobFactory) -> asyncio.Task:
        """Run ``job()`` after ``delay`` seconds in the background."""
        task = asyncio.create_task(self._run(key, delay, job), name=f"deferred:{key}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        log.debug(f"Scheduled {key} in {delay}s")
        return task

    async def _run(self, key: str, delay: float, job: JobFactory) -> None:
        try:
            if delay > 0:
                await asyncio.sleep(delay)
            await job()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            log.error(f"Deferred task {key} failed: {e}")

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def cancel_all(self) -> None:
        """Cancel everything still waiting. Used on shutdown."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
