"""Core progress engine: rendering, drivers, completion, process streaming."""

from cliprogress.core.completion import (
    CompletionSequencer,
    RunFailed,
    RunOutcome,
    RunSucceeded,
    resolve_label,
)
from cliprogress.core.easing import EasingDriver, adjusted_duration_ms, ease_out_ratio
from cliprogress.core.engine import ProgressEngine, create_progress
from cliprogress.core.exceptions import CommandFailed, ProgressError
from cliprogress.core.handle import AnimatedHandle, RatioTarget
from cliprogress.core.process_streaming import (
    ProcessExecutor,
    ProcessInfo,
    ProcessOutputStream,
    ProcessState,
)
from cliprogress.core.renderer import Renderer
from cliprogress.core.tracking import (
    TrackedBar,
    TrackingDriver,
    percent_parser,
    step_observer,
)

__all__ = [
    "AnimatedHandle",
    "CommandFailed",
    "CompletionSequencer",
    "EasingDriver",
    "ProcessExecutor",
    "ProcessInfo",
    "ProcessOutputStream",
    "ProcessState",
    "ProgressEngine",
    "ProgressError",
    "RatioTarget",
    "Renderer",
    "RunFailed",
    "RunOutcome",
    "RunSucceeded",
    "TrackedBar",
    "TrackingDriver",
    "adjusted_duration_ms",
    "create_progress",
    "ease_out_ratio",
    "percent_parser",
    "resolve_label",
    "step_observer",
]
