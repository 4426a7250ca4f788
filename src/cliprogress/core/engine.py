"""Progress engine: animated bars driven by time estimates or command output.

Usage:
    progress = create_progress()

    # Time-estimated bar (fills based on expected duration)
    await progress.run_estimated(
        "Starting containers", "docker compose up -d", estimated_ms=26_000
    )

    # Tracked bar (real progress from command output)
    await progress.run_tracked(
        "Running migrations",
        "alembic upgrade head",
        total=10,
        on_output=lambda text, bar: bar.increment() if "Running upgrade" in text else None,
    )

    # Manual bar (for loops in your own code)
    handle = progress.start("Querying tables")
    for i, item in enumerate(items):
        handle.set_ratio(i / len(items))
        await progress.yield_loop()
        do_work(item)
    handle.stop()
    progress.succeed("Verified all tables")
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Callable
from typing import Any

from rich.console import Console
from rich.text import Text

from cliprogress.config.settings import ProgressSettings
from cliprogress.core.completion import (
    CompletionSequencer,
    DoneLabel,
    FailurePredicate,
    RunFailed,
    RunSucceeded,
)
from cliprogress.core.easing import EasingDriver, adjusted_duration_ms
from cliprogress.core.exceptions import CommandFailed
from cliprogress.core.handle import AnimatedHandle
from cliprogress.core.process_streaming import OutputCallback, ProcessExecutor, ProcessInfo
from cliprogress.core.renderer import Label, Renderer
from cliprogress.core.tracking import OutputObserver, ProgressParser, TrackingDriver
from cliprogress.utils.logging import generate_run_id, get_logger, timed_operation

logger = get_logger(__name__)


class ProgressEngine:
    """One independently configured set of progress bars.

    Everything mutable (the spinner index included) lives on the instance,
    so several engines can coexist; only the terminal itself is shared.
    """

    def __init__(
        self,
        settings: ProgressSettings | None = None,
        *,
        console: Console | None = None,
        error_console: Console | None = None,
        executor: ProcessExecutor | None = None,
    ) -> None:
        self.settings = settings or ProgressSettings()
        self.renderer = Renderer(self.settings, console=console, error_console=error_console)
        self.executor = executor or ProcessExecutor()
        self.sequencer = CompletionSequencer(
            self.renderer,
            frames=self.settings.snap_frames,
            frame_interval=self.settings.snap_interval_ms / 1000,
        )

    # ---- rendering ----------------------------------------------------------

    def render_bar(self, ratio: float) -> Text:
        return self.renderer.render_bar(ratio)

    def paint(self, label: Label, ratio: float) -> None:
        self.renderer.paint(label, ratio)

    # ---- static final states ------------------------------------------------

    def succeed(self, label: Label) -> None:
        self.renderer.succeed(label)

    def fail(self, label: Label) -> None:
        self.renderer.fail(label)

    def info(self, label: Label) -> None:
        self.renderer.info(label)

    def warn(self, label: Label) -> None:
        self.renderer.warn(label)

    # ---- animated bar -------------------------------------------------------

    def start(self, label: Label, initial_ratio: float = 0.0) -> AnimatedHandle:
        """Start a continuously animated spinner + bar.

        Paints immediately, then every ``render_interval_ms`` until the
        returned handle is stopped. Requires a running event loop.
        """
        return AnimatedHandle(
            self.renderer,
            label,
            initial_ratio,
            interval=self.settings.render_interval_ms / 1000,
        )

    async def snap_to_full(
        self,
        label: Label,
        current_ratio: float,
        final_label: Label | None = None,
    ) -> None:
        """Quickly animate from ``current_ratio`` to 100%, then print ✓."""
        await self.sequencer.snap(label, current_ratio, final_label)

    # ---- command runners ----------------------------------------------------

    async def run_estimated(
        self,
        label: Label,
        command: str,
        estimated_ms: float,
        *,
        cwd: str | os.PathLike[str] | None = None,
        done_label: DoneLabel = None,
        tolerate_failure: FailurePredicate | None = None,
    ) -> RunSucceeded:
        """Run a shell command behind a time-estimated progress bar.

        The bar eases toward 90% over ``estimated_ms`` (plus the configured
        buffer) and snaps to 100% when the command finishes.

        Raises:
            CommandFailed: The command exited non-zero and
                ``tolerate_failure`` did not excuse it.
        """
        handle = self.start(label)
        driver = EasingDriver(
            handle,
            adjusted_duration_ms(estimated_ms, self.settings.estimate_buffer),
            sample_interval=self.settings.sample_interval_ms / 1000,
        )
        driver.start()
        return await self._run(
            handle,
            command,
            cwd=cwd,
            on_output=None,
            stop_driver=driver.stop,
            done_label=done_label,
            tolerate_failure=tolerate_failure,
            mode="estimated",
            estimated_ms=estimated_ms,
        )

    async def run_tracked(
        self,
        label: Label,
        command: str,
        *,
        cwd: str | os.PathLike[str] | None = None,
        total: int | None = None,
        on_output: OutputObserver | None = None,
        parse_progress: ProgressParser | None = None,
        done_label: DoneLabel = None,
        tolerate_failure: FailurePredicate | None = None,
    ) -> RunSucceeded:
        """Run a shell command and track real progress from its output.

        Progress can be reported two ways, alone or together:

        1. ``parse_progress(text)`` returns a 0-1 ratio, or ``None`` to skip.
        2. ``on_output(text, bar)`` sees each stdout/stderr chunk and may call
           ``bar.increment()`` (needs ``total``) or ``bar.set_ratio()``.

        Raises:
            CommandFailed: The command exited non-zero and
                ``tolerate_failure`` did not excuse it.
        """
        handle = self.start(label)
        try:
            driver = TrackingDriver(
                handle,
                total=total,
                parse_progress=parse_progress,
                on_output=on_output,
            )
        except ValueError:
            handle.stop()
            raise
        return await self._run(
            handle,
            command,
            cwd=cwd,
            on_output=driver.feed,
            stop_driver=None,
            done_label=done_label,
            tolerate_failure=tolerate_failure,
            mode="tracked",
            total=total,
        )

    async def yield_loop(self) -> None:
        """Yield to the event loop so a due render tick can paint."""
        await asyncio.sleep(0)

    # ---- internals ----------------------------------------------------------

    async def _run(
        self,
        handle: AnimatedHandle,
        command: str,
        *,
        cwd: str | os.PathLike[str] | None,
        on_output: OutputCallback | None,
        stop_driver: Callable[[], None] | None,
        done_label: DoneLabel,
        tolerate_failure: FailurePredicate | None,
        **context: Any,
    ) -> RunSucceeded:
        log = logger.bind(run_id=generate_run_id(), command=command, **context)
        log.debug("run_started")

        info: ProcessInfo
        try:
            with timed_operation("command_finished", logger=log, log_level="debug"):
                info = await self.executor.execute(command, working_dir=cwd, on_output=on_output)
        except BaseException:
            if stop_driver is not None:
                stop_driver()
            handle.stop()
            raise

        if stop_driver is not None:
            stop_driver()
        exit_code = info.return_code if info.return_code is not None else -1
        outcome = await self.sequencer.finish(
            handle,
            exit_code,
            stderr=info.stderr,
            done_label=done_label,
            tolerate_failure=tolerate_failure,
        )

        if isinstance(outcome, RunFailed):
            log.debug("run_failed", exit_code=outcome.exit_code)
            raise CommandFailed(outcome.exit_code, command=command)
        log.debug("run_succeeded", exit_code=outcome.exit_code, final_ratio=outcome.final_ratio)
        return outcome


def create_progress(
    settings: ProgressSettings | None = None,
    *,
    console: Console | None = None,
    error_console: Console | None = None,
    executor: ProcessExecutor | None = None,
    **options: Any,
) -> ProgressEngine:
    """Build a ProgressEngine from settings and/or keyword overrides.

    Keyword options are ``ProgressSettings`` field names, e.g.
    ``create_progress(bar_width=30, render_interval_ms=50)``.
    """
    if options:
        base = settings.model_dump() if settings is not None else {}
        settings = ProgressSettings(**{**base, **options})
    return ProgressEngine(
        settings,
        console=console,
        error_console=error_console,
        executor=executor,
    )
