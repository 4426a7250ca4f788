"""Exceptions raised by progress runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(eq=False)
class ProgressError(Exception):
    """Base exception for all progress-engine errors.

    Carries a human-readable message plus free-form details for callers
    that want to log or serialize the failure.
    """

    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert error to serializable dictionary."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "details": self.details,
        }


class CommandFailed(ProgressError):
    """Raised when a tracked or estimated run's command exits unsuccessfully.

    Captured stderr is printed to the terminal as diagnostic text and is
    intentionally not attached here; capture it through ``on_output`` if
    structured diagnostics are needed.
    """

    def __init__(self, exit_code: int, command: str = "") -> None:
        self.exit_code = exit_code
        self.command = command
        super().__init__(
            message=f"Command failed with exit code {exit_code}",
            details={"exit_code": exit_code, "command": command},
        )

    def __repr__(self) -> str:
        return f"CommandFailed(exit_code={self.exit_code!r}, command={self.command!r})"
