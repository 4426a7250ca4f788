"""Terminal painter for spinner + bar frames and one-shot status lines.

A Renderer turns a completion ratio into a styled line and writes it over
the current terminal line. The spinner frame index lives on the instance,
so every bar painted through one Renderer shares a single spinner cycle.
"""

from __future__ import annotations

import math

from rich.console import Console
from rich.control import Control, ControlType
from rich.text import Text

from cliprogress.config.settings import ProgressSettings

ACCENT_STYLE = "cyan"
MUTED_STYLE = "dim"

SUCCESS_GLYPH = "✓"
FAILURE_GLYPH = "✖"
INFO_GLYPH = "○"
WARNING_GLYPH = "⚠"

Label = str | Text


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return math.floor(value + 0.5)


def clamp_ratio(ratio: float) -> float:
    return max(0.0, min(1.0, ratio))


class Renderer:
    """Paints progress frames and status lines to a rich console."""

    def __init__(
        self,
        settings: ProgressSettings,
        console: Console | None = None,
        error_console: Console | None = None,
    ) -> None:
        self.settings = settings
        self.console = console or Console(highlight=False)
        self.error_console = error_console or Console(stderr=True, highlight=False)
        self.frame_index = 0
        self._pad = " " * settings.indent

    # ---- frames -------------------------------------------------------------

    def bar_segments(self, ratio: float) -> tuple[int, int]:
        """Return (filled, empty) glyph counts for a ratio, clamped to the bar."""
        filled = round_half_up(self.settings.bar_width * clamp_ratio(ratio))
        return filled, self.settings.bar_width - filled

    def render_bar(self, ratio: float) -> Text:
        filled, empty = self.bar_segments(ratio)
        return Text.assemble(
            (self.settings.filled_char * filled, ACCENT_STYLE),
            (self.settings.empty_char * empty, MUTED_STYLE),
        )

    def next_frame(self) -> str:
        """Return the current spinner glyph and advance the shared index."""
        frames = self.settings.spinner_frames
        glyph = frames[self.frame_index % len(frames)]
        self.frame_index += 1
        return glyph

    def render_line(self, label: Label, ratio: float) -> Text:
        percent = f"{round_half_up(ratio * 100)}%"
        return Text.assemble(
            self._pad,
            (self.next_frame(), ACCENT_STYLE),
            " ",
            label,
            "  ",
            self.render_bar(ratio),
            "  ",
            (percent, MUTED_STYLE),
        )

    def paint(self, label: Label, ratio: float) -> None:
        """Overwrite the current terminal line with a fresh frame."""
        line = self.render_line(label, ratio)
        self._erase_line()
        self.console.print(line, end="", soft_wrap=True)

    # ---- one-shot states ----------------------------------------------------

    def succeed(self, label: Label) -> None:
        self._erase_line()
        self._print_state(SUCCESS_GLYPH, "green", label)

    def fail(self, label: Label) -> None:
        self._erase_line()
        self._print_state(FAILURE_GLYPH, "red", label)

    def info(self, label: Label) -> None:
        self._print_state(INFO_GLYPH, MUTED_STYLE, label)

    def warn(self, label: Label) -> None:
        self._print_state(WARNING_GLYPH, "yellow", label)

    def error_block(self, text: str) -> None:
        """Print captured diagnostic text in red on the error console."""
        self.error_console.print(Text(f"\n{text}\n", style="red"), soft_wrap=True)

    # ---- internals ----------------------------------------------------------

    def _print_state(self, glyph: str, style: str, label: Label) -> None:
        self.console.print(
            Text.assemble(self._pad, (glyph, style), " ", label),
            soft_wrap=True,
        )

    def _erase_line(self) -> None:
        self.console.control(
            Control(ControlType.CARRIAGE_RETURN, (ControlType.ERASE_IN_LINE, 2))
        )
