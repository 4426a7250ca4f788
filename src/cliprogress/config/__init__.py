"""Configuration models and layered loading."""

from cliprogress.config.defaults import DEFAULT_CONFIG, DEFAULT_SPINNER_FRAMES
from cliprogress.config.settings import (
    ConfigService,
    GeneralSettings,
    ProgressSettings,
    Settings,
)

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_SPINNER_FRAMES",
    "ConfigService",
    "GeneralSettings",
    "ProgressSettings",
    "Settings",
]
