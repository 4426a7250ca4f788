"""Configuration system for cliprogress.

Implements layered configuration with the following priority (high → low):
1) CLI overrides (explicit flags)
2) Environment variables (prefix: CLIPROGRESS_)
3) User config file (~/.cliprogress/config.yaml)
4) Project config file (./cliprogress.yaml)
5) Built-in defaults (fallback)
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cliprogress.config.defaults import (
    DEFAULT_CONFIG,
    DEFAULT_SPINNER_FRAMES,
    ENV_PREFIX,
    PROJECT_CONFIG_FILENAME,
    USER_CONFIG_PATH,
)


class GeneralSettings(BaseModel):
    verbosity: str = Field(default="warning")
    output_format: str = Field(default="text")
    color_enabled: bool = Field(default=True)


class ProgressSettings(BaseModel):
    """Rendering and timing options for one progress engine.

    Frozen: an engine reads these once and never mutates them.
    """

    model_config = ConfigDict(frozen=True)

    bar_width: int = Field(default=24, gt=0)
    indent: int = Field(default=4, ge=0)
    filled_char: str = Field(default="━", min_length=1)
    empty_char: str = Field(default="─", min_length=1)
    spinner_frames: tuple[str, ...] = Field(
        default=tuple(DEFAULT_SPINNER_FRAMES), min_length=1
    )
    render_interval_ms: float = Field(default=80, gt=0)
    estimate_buffer: float = Field(default=0.15, ge=0)
    sample_interval_ms: float = Field(default=200, gt=0)
    snap_frames: int = Field(default=8, gt=0)
    snap_interval_ms: float = Field(default=30, ge=0)


class Settings(BaseModel):
    general: GeneralSettings
    progress: ProgressSettings

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        return cls.model_validate(data)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base, returning a new dict."""

    result = {**base}
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Failed to parse YAML config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Config file {path} must contain a mapping, got {type(data).__name__}"
        )
    return data


def _parse_scalar(value: str) -> Any:
    """Best-effort parsing for CLI/env string values."""

    trimmed = value.strip()
    # JSON covers numbers, booleans, null, lists and quoted strings
    try:
        return json.loads(trimmed)
    except json.JSONDecodeError:
        pass

    lowered = trimmed.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    if lowered in {"none", "null"}:
        return None
    return trimmed


def _set_nested(target: dict[str, Any], path: list[str], value: Any) -> None:
    current = target
    for key in path[:-1]:
        current = current.setdefault(key, {})
    current[path[-1]] = value


def _get_nested(data: dict[str, Any], path: list[str]) -> Any:
    current: Any = data
    for key in path:
        if not isinstance(current, dict) or key not in current:
            raise KeyError(".".join(path))
        current = current[key]
    return current


class ConfigService:
    """Loads, merges, and persists cliprogress configuration."""

    def __init__(
        self,
        env_prefix: str = ENV_PREFIX,
        project_dir: Path | None = None,
        user_config_path: Path | None = None,
    ):
        self.env_prefix = env_prefix
        self.project_config_path = (project_dir or Path.cwd()) / PROJECT_CONFIG_FILENAME
        self.user_config_path = user_config_path or USER_CONFIG_PATH

    def load(self, cli_overrides: dict[str, Any] | None = None) -> Settings:
        data = DEFAULT_CONFIG

        for path in (self.project_config_path, self.user_config_path):
            data = _deep_merge(data, _load_yaml(path))

        data = _deep_merge(data, self._env_overrides())
        if cli_overrides:
            data = _deep_merge(data, cli_overrides)

        try:
            return Settings.from_dict(data)
        except ValidationError as exc:
            raise ValueError(f"Invalid configuration: {exc}") from exc

    def save(self, settings: Settings, scope: Literal["user", "project"] = "user") -> Path:
        target = self.user_config_path if scope == "user" else self.project_config_path
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("w", encoding="utf-8") as handle:
            yaml.safe_dump(settings.model_dump(mode="json"), handle, sort_keys=False)
        return target

    def get_value(self, key_path: str, cli_overrides: dict[str, Any] | None = None) -> Any:
        data = self.load(cli_overrides=cli_overrides).model_dump()
        parts = self._normalize_key_path(key_path)
        return _get_nested(data, parts)

    def _env_overrides(self) -> dict[str, Any]:
        overrides: dict[str, Any] = {}
        prefix = f"{self.env_prefix}_"
        for key, raw_value in os.environ.items():
            if not key.startswith(prefix):
                continue
            path_part = key[len(prefix) :]
            path_segments = self._normalize_env_key(path_part)
            if path_segments:
                _set_nested(overrides, path_segments, _parse_scalar(raw_value))
        return overrides

    def _normalize_env_key(self, key: str) -> list[str]:
        if "__" in key:
            segments = key.split("__")
        else:
            segments = key.split("_", 1)
        return [segment.lower() for segment in segments if segment]

    def _normalize_key_path(self, key_path: str) -> list[str]:
        if not key_path:
            raise ValueError("Key path cannot be empty")
        return [segment.strip() for segment in key_path.split(".") if segment.strip()]
