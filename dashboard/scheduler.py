from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

from dashboard.config import dlog, elog


class ScheduledTask:
    """A named repeating job on the running event loop.

    ``start`` arms the loop once; calling it again while armed does nothing.
    ``stop`` cancels the loop and is safe to call any number of times.
    """

    def __init__(self, name: str, interval: float, job: Callable[[], Awaitable[None]]) -> None:
        self.name = name
        self.interval = interval
        self._job = job
        self._task: Optional[asyncio.Task] = None
        self.runs = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, run_immediately: bool = False) -> bool:
        if self.running:
            return False
        self._task = asyncio.get_running_loop().create_task(self._loop(run_immediately), name=self.name)
        dlog("scheduled_task_started", {"name": self.name, "interval": self.interval})
        return True

    def stop(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            dlog("scheduled_task_stopped", {"name": self.name})

    async def _loop(self, run_immediately: bool) -> None:
        if run_immediately:
            await self._run_once()
        while True:
            await asyncio.sleep(self.interval)
            await self._run_once()

    async def _run_once(self) -> None:
        self.runs += 1
        try:
            await self._job()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            # A failing tick must not end the schedule; the next tick retries.
            elog("scheduled_task_error", {"name": self.name, "error": str(e)})

    def status(self) -> dict:
        return {"name": self.name, "interval": self.interval, "running": self.running, "runs": self.runs}
