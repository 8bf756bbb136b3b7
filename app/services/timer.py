"""Countdown timer driving ticks into a test session."""
import asyncio
import logging
from typing import Callable

from app.core.config import settings
from app.exceptions import InvalidTransitionError
from app.schemas.test_session import SessionPhase
from app.services.test_session import TestSession

logger = logging.getLogger(__name__)


class SessionTimer:
    """
    Fires ``session.tick()`` once per interval while a timed session is in progress.

    Fire times are computed from the start time rather than chained sleeps,
    so late wake-ups do not accumulate drift. Untimed sessions never schedule
    a task. ``on_tick`` runs after every applied tick.
    """

    def __init__(
        self,
        session: TestSession,
        interval: float | None = None,
        on_tick: Callable[[], None] | None = None,
    ):
        self.session = session
        self.interval = settings.timer_interval_seconds if interval is None else interval
        self.on_tick = on_tick
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> bool:
        """Schedule the countdown; returns False when there is nothing to count down"""
        if self.running:
            return True
        if self.session.phase is not SessionPhase.IN_PROGRESS or not self.session.is_timed:
            return False
        self._task = asyncio.get_running_loop().create_task(self._run(), name=f"session-timer-{self.session.id}")
        return True

    def stop(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def wait(self) -> None:
        """Wait until the countdown ends (expiry, submit or stop)"""
        task = self._task
        if task is not None:
            await asyncio.wait({task})

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        next_fire = loop.time()
        while self.session.phase is SessionPhase.IN_PROGRESS and self.session.remaining_seconds > 0:
            next_fire += self.interval
            await asyncio.sleep(max(0.0, next_fire - loop.time()))
            try:
                result = self.session.tick()
            except InvalidTransitionError:
                # submitted or discarded while asleep
                break
            if self.on_tick is not None:
                self.on_tick()
            if result is not None:
                logger.info(f"Session expired: session_id={self.session.id}")
                break
