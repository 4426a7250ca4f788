"""cliprogress: animated terminal progress bars for shell commands.

Bars can be driven by a time estimate, by parsing a command's output, or
manually from your own loop.
"""

from cliprogress.config.settings import ProgressSettings
from cliprogress.core.completion import RunFailed, RunSucceeded
from cliprogress.core.engine import ProgressEngine, create_progress
from cliprogress.core.exceptions import CommandFailed, ProgressError
from cliprogress.core.handle import AnimatedHandle
from cliprogress.core.tracking import TrackedBar, percent_parser, step_observer

__version__ = "0.1.0"

__all__ = [
    "AnimatedHandle",
    "CommandFailed",
    "ProgressEngine",
    "ProgressError",
    "ProgressSettings",
    "RunFailed",
    "RunSucceeded",
    "TrackedBar",
    "__version__",
    "create_progress",
    "percent_parser",
    "step_observer",
]
