"""Shared helpers."""

from cliprogress.utils.logging import (
    configure_from_settings,
    configure_logging,
    generate_run_id,
    get_logger,
    timed_operation,
)

__all__ = [
    "configure_from_settings",
    "configure_logging",
    "generate_run_id",
    "get_logger",
    "timed_operation",
]
