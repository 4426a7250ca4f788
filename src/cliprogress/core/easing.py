"""Time-estimated progress: an ease-out curve driven by wall-clock time.

Used when a command reports nothing useful. The curve climbs quickly and
flattens toward 90%, leaving the last stretch for the completion snap so
the bar never claims to be done before the command is.
"""

from __future__ import annotations

import asyncio
import math
import time

from cliprogress.core.handle import RatioTarget

EASING_CEILING = 0.9
EASING_STEEPNESS = 2.5


def adjusted_duration_ms(estimated_ms: float, estimate_buffer: float) -> float:
    """Inflate an estimate so slow runs don't flatten out too early."""
    return estimated_ms * (1 + estimate_buffer)


def ease_out_ratio(
    elapsed_ms: float,
    adjusted_ms: float,
    *,
    ceiling: float = EASING_CEILING,
    steepness: float = EASING_STEEPNESS,
) -> float:
    """Return ``ceiling * (1 - e^(-steepness * elapsed / adjusted))``.

    A zero or negative duration has no window to ease over and sits at the
    ceiling.
    """
    if adjusted_ms <= 0:
        return ceiling
    return ceiling * (1 - math.exp(-steepness * (max(0.0, elapsed_ms) / adjusted_ms)))


class EasingDriver:
    """Samples the ease-out curve on its own interval and feeds a handle."""

    def __init__(
        self,
        target: RatioTarget,
        adjusted_ms: float,
        *,
        sample_interval: float,
    ) -> None:
        self.target = target
        self.adjusted_ms = adjusted_ms
        self.sample_interval = sample_interval
        self._start_time: float | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def elapsed_ms(self) -> float:
        if self._start_time is None:
            return 0.0
        return (time.monotonic() - self._start_time) * 1000

    def sample(self) -> float:
        """Compute the ratio for the current elapsed time and store it."""
        ratio = ease_out_ratio(self.elapsed_ms, self.adjusted_ms)
        self.target.set_ratio(ratio)
        return ratio

    def start(self) -> None:
        self._start_time = time.monotonic()
        self._task = asyncio.get_running_loop().create_task(self._sample_loop())

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _sample_loop(self) -> None:
        while True:
            await asyncio.sleep(self.sample_interval)
            self.sample()
