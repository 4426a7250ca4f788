"""Output-tracked progress: ratios parsed from what the command prints.

Each stdout/stderr chunk goes to two optional callbacks, always in the same
order: ``parse_progress(text)`` first, whose non-``None`` result replaces
the ratio, then ``on_output(text, bar)``, which may call
``bar.increment()`` or ``bar.set_ratio()`` itself.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from cliprogress.core.handle import RatioTarget

ProgressParser = Callable[[str], "float | None"]
OutputObserver = Callable[[str, "TrackedBar"], None]

DEFAULT_PERCENT_PATTERN = r"(\d+(?:\.\d+)?)\s*%"


class TrackedBar:
    """Step-counting view over a handle, handed to ``on_output`` callbacks."""

    def __init__(self, target: RatioTarget, total: int | None = None) -> None:
        if total is not None and total <= 0:
            raise ValueError("total must be a positive integer")
        self._target = target
        self.total = total
        self.completed = 0

    def set_ratio(self, value: float) -> None:
        self._target.set_ratio(value)

    def get_ratio(self) -> float:
        return self._target.get_ratio()

    def increment(self) -> None:
        """Count one finished step; moves the bar only when ``total`` is set."""
        self.completed += 1
        if self.total:
            self._target.set_ratio(self.completed / self.total)


class TrackingDriver:
    """Routes command output chunks into a handle's ratio."""

    def __init__(
        self,
        target: RatioTarget,
        *,
        total: int | None = None,
        parse_progress: ProgressParser | None = None,
        on_output: OutputObserver | None = None,
    ) -> None:
        self.target = target
        self.bar = TrackedBar(target, total)
        self.parse_progress = parse_progress
        self.on_output = on_output

    def feed(self, text: str, is_stderr: bool = False) -> None:
        if self.parse_progress is not None:
            ratio = self.parse_progress(text)
            if ratio is not None:
                self.target.set_ratio(ratio)
        if self.on_output is not None:
            self.on_output(text, self.bar)


def percent_parser(pattern: str = DEFAULT_PERCENT_PATTERN) -> ProgressParser:
    """Build a parser reading the last ``NN%``-style match in a chunk.

    The first capture group must hold a number on a 0-100 scale.

    Raises:
        ValueError: If the pattern has no capture group.
    """
    regex = re.compile(pattern)
    if regex.groups < 1:
        raise ValueError(f"percent pattern {pattern!r} needs a capture group around the number")

    def parse(text: str) -> float | None:
        matches = regex.findall(text)
        if not matches:
            return None
        last = matches[-1]
        if isinstance(last, tuple):
            last = last[0]
        return float(last) / 100

    return parse


def step_observer(pattern: str) -> OutputObserver:
    """Build an observer that increments the bar once per regex match."""
    regex = re.compile(pattern)

    def observe(text: str, bar: TrackedBar) -> None:
        for _ in regex.finditer(text):
            bar.increment()

    return observe
