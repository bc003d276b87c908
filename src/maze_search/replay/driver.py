"""Paced replay of precomputed frames on an owned asyncio task."""

import asyncio
import inspect
import logging
import time
from typing import Awaitable, Callable, Iterable, Optional, Union

from maze_search.comparison.aggregator import ReplayFrame

logger = logging.getLogger(__name__)

MIN_SPEED = 1
MAX_SPEED = 100

FrameCallback = Callable[[ReplayFrame], Union[None, Awaitable[None]]]


def speed_to_interval(speed: Union[int, float]) -> float:
    """Tick interval in seconds for a speed in [1, 100].

    Higher speed gives a shorter interval; the interval never drops below
    one millisecond.
    """
    speed = min(MAX_SPEED, max(MIN_SPEED, speed))
    return max(1, 101 - speed) / 1000.0


class ReplayDriver:
    """Owns at most one replay task.

    Starting a replay first cancels and awaits the in-flight one, so two
    replay loops never write visualization state at the same time.
    """

    def __init__(self):
        self._task: Optional[asyncio.Task] = None
        self.frames_emitted = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self,
                    frames: Iterable[ReplayFrame],
                    on_frame: Optional[FrameCallback] = None,
                    interval: float = 0.05) -> asyncio.Task:
        """Cancel any running replay, then schedule a new one.

        Args:
            frames: Frames to emit, one per tick
            on_frame: Called with each whole frame; may be a coroutine function
            interval: Seconds between ticks

        Returns:
            The task; its result is the wall-clock duration of the replay in seconds
        """
        await self.cancel()
        self.frames_emitted = 0
        self._task = asyncio.create_task(self._run(frames, on_frame, interval))
        return self._task

    async def _run(self, frames: Iterable[ReplayFrame], on_frame: Optional[FrameCallback],
                   interval: float) -> float:
        started = time.perf_counter()
        first = True
        for frame in frames:
            if not first:
                await asyncio.sleep(interval)
            first = False
            if on_frame is not None:
                outcome = on_frame(frame)
                if inspect.isawaitable(outcome):
                    await outcome
            self.frames_emitted += 1
        elapsed = time.perf_counter() - started
        logger.debug(f"Replay finished: {self.frames_emitted} frames in {elapsed:.3f}s")
        return elapsed

    async def cancel(self) -> bool:
        """Stop the running replay and wait for it to unwind.

        Returns:
            True if a replay was cancelled
        """
        task = self._task
        if task is None or task.done():
            return False
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info(f"Replay cancelled after {self.frames_emitted} frames")
        return True

    async def wait(self) -> Optional[float]:
        """Wait for the current replay; None if there is none or it was cancelled."""
        task = self._task
        if task is None:
            return None
        try:
            return await task
        except asyncio.CancelledError:
            if task.cancelled():
                return None
            raise

    async def play(self, frames: Iterable[ReplayFrame], on_frame: Optional[FrameCallback] = None,
                   interval: float = 0.05) -> Optional[float]:
        """Start a replay and wait for it to finish."""
        await self.start(frames, on_frame, interval)
        return await self.wait()
