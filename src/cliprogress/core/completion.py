"""Completion sequencing: turn a process exit into the final display."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass

from cliprogress.core.handle import AnimatedHandle
from cliprogress.core.renderer import Label, Renderer

DoneLabel = Label | Callable[[], Label | None] | None
FailurePredicate = Callable[[], bool]


@dataclass(frozen=True)
class RunSucceeded:
    """The command exited 0, or a non-zero exit was tolerated."""

    final_ratio: float
    exit_code: int = 0


@dataclass(frozen=True)
class RunFailed:
    exit_code: int
    stderr: str = ""


RunOutcome = RunSucceeded | RunFailed


def resolve_label(done_label: DoneLabel, fallback: Label) -> Label:
    """Resolve a literal or zero-argument-callable label, falling back when empty."""
    resolved = done_label() if callable(done_label) else done_label
    return resolved or fallback


class CompletionSequencer:
    """Stops a handle and plays the success snap or prints the failure."""

    def __init__(
        self,
        renderer: Renderer,
        *,
        frames: int = 8,
        frame_interval: float = 0.03,
    ) -> None:
        self.renderer = renderer
        self.frames = frames
        self.frame_interval = frame_interval

    async def snap(
        self,
        label: Label,
        from_ratio: float,
        final_label: Label | None = None,
    ) -> None:
        """Animate linearly from ``from_ratio`` to 1.0, then print success."""
        for frame in range(1, self.frames + 1):
            await asyncio.sleep(self.frame_interval)
            self.renderer.paint(label, from_ratio + (1 - from_ratio) * (frame / self.frames))
        self.renderer.succeed(final_label or label)

    async def finish(
        self,
        handle: AnimatedHandle,
        exit_code: int,
        *,
        stderr: str = "",
        done_label: DoneLabel = None,
        tolerate_failure: FailurePredicate | None = None,
    ) -> RunOutcome:
        handle.stop()
        ok = exit_code == 0 or (tolerate_failure is not None and tolerate_failure())
        if ok:
            ratio = handle.get_ratio()
            await self.snap(handle.label, ratio, resolve_label(done_label, handle.label))
            return RunSucceeded(final_ratio=ratio, exit_code=exit_code)

        self.renderer.fail(handle.label)
        diagnostics = stderr.strip()
        if diagnostics:
            self.renderer.error_block(diagnostics)
        return RunFailed(exit_code=exit_code, stderr=stderr)
