"""Default configuration values and constants for configuration loading."""

from __future__ import annotations

from pathlib import Path
from typing import Any

DEFAULT_SPINNER_FRAMES: list[str] = ["⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏"]

# Default configuration tree used when no files are present.
DEFAULT_CONFIG: dict[str, Any] = {
    "general": {
        "verbosity": "warning",
        "output_format": "text",
        "color_enabled": True,
    },
    "progress": {
        # Bar glyph count and left padding
        "bar_width": 24,
        "indent": 4,
        "filled_char": "━",
        "empty_char": "─",
        "spinner_frames": DEFAULT_SPINNER_FRAMES,
        # Milliseconds between repaints of an animated bar
        "render_interval_ms": 80,
        # Fractional inflation applied to estimated durations
        "estimate_buffer": 0.15,
        # Milliseconds between easing-curve samples in estimated runs
        "sample_interval_ms": 200,
        # Completion snap animation
        "snap_frames": 8,
        "snap_interval_ms": 30,
    },
}

ENV_PREFIX = "CLIPROGRESS"
PROJECT_CONFIG_FILENAME = "cliprogress.yaml"
USER_CONFIG_PATH = Path.home() / ".cliprogress" / "config.yaml"
