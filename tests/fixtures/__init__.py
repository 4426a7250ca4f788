"""Test fixtures package.

Provides fakes for the process boundary and ratio targets.
"""

from .progress_fakes import (
    ERASE,
    FakeExecutor,
    RecordingTarget,
    ScriptedChunk,
    make_console,
)

__all__ = ["ERASE", "FakeExecutor", "RecordingTarget", "ScriptedChunk", "make_console"]
