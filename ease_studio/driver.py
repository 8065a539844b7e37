"""Repeating preview animation driven by an easing evaluator.

The driver keeps wall-clock time for a looping cycle of fixed duration.
Each tick computes the elapsed fraction of the current cycle (progress),
feeds it through the active evaluator and reports the scaled value to
listeners. Everything runs on one asyncio loop; ticks and edits never
overlap.
"""

import asyncio
import contextlib
import logging
import time
from collections.abc import Callable

from ease_studio.config import settings
from ease_studio.evaluator import Evaluator, linear
from ease_studio.types import AnimationState

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
UpdateListener = Callable[[AnimationState], None]


class AnimationDriver:
    """Looping, pausable preview animation.

    pause() and resume() are idempotent. Swapping the evaluator restarts the
    cycle from progress 0.
    """

    def __init__(
        self,
        evaluator: Evaluator = linear,
        duration: float | None = None,
        display_range: float | None = None,
        clock: Clock = time.monotonic,
        autostart: bool = True,
    ) -> None:
        self.duration = duration if duration is not None else settings.preview_duration
        if self.duration <= 0:
            raise ValueError(f"duration must be positive, got {self.duration}")
        self.display_range = (
            display_range if display_range is not None else settings.display_range
        )
        self._clock = clock
        self._evaluator = evaluator
        self._running = autostart
        self._stopped = False
        self._in_tick = False
        self._start_time = clock()
        self._paused_elapsed = 0.0
        self._listeners: list[UpdateListener] = []
        self._task: asyncio.Task[None] | None = None
        self._state = self._state_at(0.0)

    # --- Properties ---

    @property
    def evaluator(self) -> Evaluator:
        return self._evaluator

    @property
    def state(self) -> AnimationState:
        return self._state

    @property
    def running(self) -> bool:
        return self._running

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def in_tick(self) -> bool:
        """True while tick listeners are being notified."""
        return self._in_tick

    # --- Listeners ---

    def add_listener(self, listener: UpdateListener) -> Callable[[], None]:
        """Register a per-tick listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def remove() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return remove

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("Animation listener failed")

    # --- Timing ---

    def _now(self, now: float | None) -> float:
        return self._clock() if now is None else now

    def _elapsed(self, now: float) -> float:
        if not self._running:
            return self._paused_elapsed
        return max(0.0, now - self._start_time)

    def _state_at(self, elapsed: float) -> AnimationState:
        cycle, remainder = divmod(elapsed, self.duration)
        progress = remainder / self.duration
        return AnimationState(
            progress=progress,
            value=self._evaluator(progress) * self.display_range,
            running=self._running,
            cycle=int(cycle),
        )

    def tick(self, now: float | None = None) -> AnimationState:
        """Advance to the current time and notify listeners.

        Paused or stopped drivers return their state unchanged, as do
        reentrant calls made from inside a listener.
        """
        if self._in_tick or self._stopped or not self._running:
            return self._state

        self._in_tick = True
        try:
            self._state = self._state_at(self._elapsed(self._now(now)))
            self._notify()
        finally:
            self._in_tick = False
        return self._state

    # --- Control ---

    def pause(self, now: float | None = None) -> None:
        """Freeze progress. Calling it again has no effect."""
        if not self._running:
            return
        self._paused_elapsed = self._elapsed(self._now(now))
        self._running = False
        self._state = self._state_at(self._paused_elapsed)
        logger.debug(f"Paused at progress {self._state.progress:.3f}")

    def resume(self, now: float | None = None) -> None:
        """Continue from the paused progress. Calling it again has no effect."""
        if self._running or self._stopped:
            return
        self._start_time = self._now(now) - self._paused_elapsed
        self._running = True
        self._state = self._state.model_copy(update={"running": True})
        logger.debug(f"Resumed at progress {self._state.progress:.3f}")

    def restart(self, now: float | None = None) -> None:
        """Jump back to progress 0, keeping the running/paused status."""
        self._start_time = self._now(now)
        self._paused_elapsed = 0.0
        self._state = self._state_at(0.0)

    def set_evaluator(self, evaluator: Evaluator, now: float | None = None) -> None:
        """Swap the easing function and restart the cycle."""
        self._evaluator = evaluator
        self.restart(now)

    # --- Scheduling ---

    async def run(self, fps: int | None = None) -> None:
        """Tick at the given frame rate until stopped."""
        fps = fps or settings.preview_fps
        frame_delay = 1.0 / fps
        logger.info(f"Animation loop started ({fps} fps, {self.duration}s cycle)")
        try:
            while not self._stopped:
                self.tick()
                await asyncio.sleep(frame_delay)
        finally:
            logger.info("Animation loop exited")

    def start(self, fps: int | None = None) -> asyncio.Task[None]:
        """Schedule the loop on the running event loop."""
        if self._stopped:
            raise RuntimeError("Driver has been stopped")
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(fps))
        return self._task

    def stop(self) -> None:
        """Stop ticking, cancel the scheduled loop and drop listeners."""
        if self._stopped:
            return
        self._stopped = True
        self._running = False
        self._state = self._state.model_copy(update={"running": False})
        self._listeners.clear()
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def aclose(self) -> None:
        """Stop and wait for the loop task to finish."""
        self.stop()
        if self._task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
