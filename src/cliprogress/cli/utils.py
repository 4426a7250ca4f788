"""CLI utility functions for configuration overrides and verbosity handling."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from cliprogress.config.settings import ConfigService, Settings, _load_yaml

_LEVELS = ["critical", "error", "warning", "info", "debug"]


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = {**base}
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def compute_verbosity(base_level: str, verbose: int, quiet: int) -> str:
    idx = (
        _LEVELS.index(base_level.lower())
        if base_level.lower() in _LEVELS
        else _LEVELS.index("warning")
    )
    idx = max(0, min(len(_LEVELS) - 1, idx + verbose - quiet))
    return _LEVELS[idx]


def load_settings_with_cli_overrides(
    *,
    config_service: ConfigService | None = None,
    config_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings and apply optional extra config file and CLI overrides."""

    base = (config_service or ConfigService()).load().model_dump()

    if config_path:
        extra = _load_yaml(config_path)
        if extra:
            base = _deep_merge(base, extra)

    if cli_overrides:
        base = _deep_merge(base, cli_overrides)

    return Settings.from_dict(base)


def get_settings(ctx_obj: dict[str, Any] | None) -> Settings:
    """Return settings stored by the root callback, loading defaults otherwise."""
    if ctx_obj and "settings" in ctx_obj:
        return ctx_obj["settings"]
    return ConfigService().load()
