"""Animated progress handle: a mutable ratio plus a recurring render task."""

from __future__ import annotations

import asyncio
from typing import Protocol

from cliprogress.core.renderer import Label, Renderer


class RatioTarget(Protocol):
    """Anything a driver can push a completion ratio into."""

    def set_ratio(self, value: float) -> None: ...

    def get_ratio(self) -> float: ...


class AnimatedHandle:
    """A continuously repainted spinner + bar.

    The first frame is painted on construction; afterwards an asyncio task
    repaints every ``interval`` seconds with whatever ratio was stored last.
    Must be created while an event loop is running.
    """

    def __init__(
        self,
        renderer: Renderer,
        label: Label,
        initial_ratio: float = 0.0,
        *,
        interval: float,
    ) -> None:
        self.renderer = renderer
        self.label = label
        self.interval = interval
        self._ratio = initial_ratio
        self._stopped = False
        loop = asyncio.get_running_loop()
        self.renderer.paint(self.label, self._ratio)
        self._task: asyncio.Task[None] | None = loop.create_task(self._render_loop())

    def set_ratio(self, value: float) -> None:
        """Store a ratio verbatim; clamping happens when painting."""
        self._ratio = value

    def get_ratio(self) -> float:
        return self._ratio

    @property
    def stopped(self) -> bool:
        return self._stopped

    def stop(self) -> None:
        """Cancel the render task. Calling it again does nothing."""
        if self._stopped:
            return
        self._stopped = True
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _render_loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.renderer.paint(self.label, self._ratio)
