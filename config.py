"""
config.py

Typed configuration loading and validation for Vigi.

Design goals
- Load at most one UTF-8 JSON config file (a missing file means "all defaults")
- Validate with pydantic (defaults included)
- Support environment variable overrides
- Merge partial settings updates from the settings panel through the same validation
- No other I/O beyond reading the config file (no directory creation)

Config file location
- If VIGI_CONFIG_PATH is set, that file is used (and must exist).
- Otherwise Vigi searches these paths in order and uses the first one that exists:
  1) ./vigi_config.json (current working directory)
  2) <user config dir>/Vigi/vigi_config.json

Example config file (vigi_config.json)
{
  "game": {
    "base_speed_ms": 1000,
    "change_frequency": 0.3,
    "score_windows": {
      "excellent": {"time_ms": 1000, "points": 20},
      "good": {"time_ms": 2000, "points": 10}
    }
  },
  "storage": {
    "high_score_path": ""
  },
  "logging": {
    "level": "INFO"
  }
}
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from platformdirs import user_config_dir
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

import judge

logger = logging.getLogger(__name__)

# Ranges offered by the settings panel. The game core accepts any positive value.
BASE_SPEED_RANGE_MS: Tuple[int, int] = (500, 2000)
CHANGE_FREQUENCY_RANGE: Tuple[float, float] = (0.1, 0.9)


class ScoreWindowConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    time_ms: int = Field(gt=0, description="Reaction budget in milliseconds measured from the event fire time.")
    points: int = Field(ge=0, description="Points awarded for a reaction inside this window.")


class ScoreWindowsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    excellent: ScoreWindowConfig = Field(default_factory=lambda: ScoreWindowConfig(time_ms=1000, points=20))
    good: ScoreWindowConfig = Field(default_factory=lambda: ScoreWindowConfig(time_ms=2000, points=10))


class GameSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    base_speed_ms: int = Field(default=1000, gt=0, description="Milliseconds per step at the EASY tier.")
    change_frequency: float = Field(default=0.3, gt=0.0, description="Per-step chance of a mutation event at EASY.")
    score_windows: ScoreWindowsConfig = Field(default_factory=ScoreWindowsConfig)

    def to_score_windows(self) -> judge.ScoreWindows:
        return judge.ScoreWindows(
            excellent=judge.ScoreWindow(
                time_ms=float(self.score_windows.excellent.time_ms),
                points=int(self.score_windows.excellent.points),
            ),
            good=judge.ScoreWindow(
                time_ms=float(self.score_windows.good.time_ms),
                points=int(self.score_windows.good.points),
            ),
        )


class StorageConfig(BaseModel):
    high_score_path: str = Field(default="", description="Optional explicit path of the high score file.")

    @field_validator("high_score_path")
    @classmethod
    def normalize_path_text(cls, value: str) -> str:
        return (value or "").strip()


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="DEBUG, INFO, WARNING or ERROR")

    @field_validator("level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        normalized = (value or "").strip().upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR"}
        if normalized not in allowed:
            raise ValueError("level must be one of: DEBUG, INFO, WARNING, ERROR")
        return normalized


class AppConfig(BaseModel):
    game: GameSettings = Field(default_factory=GameSettings)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _default_config_candidates() -> List[Path]:
    config_directory = Path(user_config_dir("Vigi", "Vigi"))
    return [
        Path.cwd() / "vigi_config.json",
        config_directory / "vigi_config.json",
    ]


def _resolve_config_path() -> Optional[Path]:
    explicit_path_text = os.environ.get("VIGI_CONFIG_PATH", "").strip()
    if explicit_path_text:
        return Path(explicit_path_text)

    for candidate_path in _default_config_candidates():
        if candidate_path.exists():
            return candidate_path

    return None


def _read_json_file_utf8(config_path: Path) -> Dict[str, Any]:
    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except OSError as exception:
        raise OSError(f"Failed to read config file: {config_path}. Error: {exception}") from exception

    try:
        parsed = json.loads(raw_text)
    except json.JSONDecodeError as exception:
        raise ValueError(f"Config file is not valid JSON: {config_path}. Error: {exception}") from exception

    if not isinstance(parsed, dict):
        raise ValueError(f"Config file root must be a JSON object: {config_path}")

    return parsed


def _apply_environment_overrides(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Environment overrides are optional. The config file is the primary source of truth.

    Override variables:
    - VIGI_BASE_SPEED_MS
    - VIGI_CHANGE_FREQUENCY
    - VIGI_EXCELLENT_WINDOW_MS
    - VIGI_EXCELLENT_POINTS
    - VIGI_GOOD_WINDOW_MS
    - VIGI_GOOD_POINTS
    - VIGI_HIGH_SCORE_PATH
    - VIGI_LOG_LEVEL
    """
    def ensure_nested(config_root: Dict[str, Any], section_name: str) -> Dict[str, Any]:
        section = config_root.get(section_name)
        if isinstance(section, dict):
            section = dict(section)
        else:
            section = {}
        config_root[section_name] = section
        return section

    updated_config = dict(config_dict)

    game_section = ensure_nested(updated_config, "game")
    windows_section = ensure_nested(game_section, "score_windows")
    excellent_section = ensure_nested(windows_section, "excellent")
    good_section = ensure_nested(windows_section, "good")
    storage_section = ensure_nested(updated_config, "storage")
    logging_section = ensure_nested(updated_config, "logging")

    def override_string(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "")
        if value_text.strip():
            target_dict[key_name] = value_text.strip()

    def override_int(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "").strip()
        if not value_text:
            return
        try:
            target_dict[key_name] = int(value_text)
        except ValueError:
            logger.warning("ignoring %s=%r: not an integer", env_name, value_text)

    def override_float(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "").strip()
        if not value_text:
            return
        try:
            target_dict[key_name] = float(value_text)
        except ValueError:
            logger.warning("ignoring %s=%r: not a number", env_name, value_text)

    override_int("VIGI_BASE_SPEED_MS", game_section, "base_speed_ms")
    override_float("VIGI_CHANGE_FREQUENCY", game_section, "change_frequency")
    override_int("VIGI_EXCELLENT_WINDOW_MS", excellent_section, "time_ms")
    override_int("VIGI_EXCELLENT_POINTS", excellent_section, "points")
    override_int("VIGI_GOOD_WINDOW_MS", good_section, "time_ms")
    override_int("VIGI_GOOD_POINTS", good_section, "points")

    override_string("VIGI_HIGH_SCORE_PATH", storage_section, "high_score_path")
    override_string("VIGI_LOG_LEVEL", logging_section, "level")

    # Partially overridden windows fall back to the defaults for the missing half.
    defaults = ScoreWindowsConfig().model_dump()
    for window_name, window_section in (("excellent", excellent_section), ("good", good_section)):
        if window_section:
            for key_name, default_value in defaults[window_name].items():
                window_section.setdefault(key_name, default_value)
        else:
            windows_section.pop(window_name, None)

    return updated_config


def load_config(config_path: Optional[Path] = None) -> Tuple[AppConfig, Optional[Path]]:
    resolved_path = config_path if config_path is not None else _resolve_config_path()
    json_dict: Dict[str, Any] = {}
    if resolved_path is not None:
        json_dict = _read_json_file_utf8(resolved_path)
    json_dict = _apply_environment_overrides(json_dict)

    try:
        config = AppConfig.model_validate(json_dict)
    except ValidationError as exception:
        raise ValueError(f"Config validation failed for {resolved_path or '(defaults)'}:\n{exception}") from exception

    return config, resolved_path


def _deep_merge(base: Dict[str, Any], partial: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key_name, value in partial.items():
        current_value = merged.get(key_name)
        if isinstance(current_value, dict) and isinstance(value, Mapping):
            merged[key_name] = _deep_merge(current_value, value)
        else:
            merged[key_name] = value
    return merged


def merge_game_settings(current: GameSettings, partial: Mapping[str, Any]) -> GameSettings:
    """
    Merge a partial settings mapping into the current settings.

    Nested score windows merge key by key, so {"score_windows": {"good": {"points": 5}}}
    keeps every other value. Invalid values raise ValueError and leave `current` untouched.
    """
    if not isinstance(partial, Mapping):
        raise ValueError("Settings update must be a mapping")

    merged = _deep_merge(current.model_dump(), partial)
    try:
        return GameSettings.model_validate(merged)
    except ValidationError as exception:
        raise ValueError(f"Invalid settings update:\n{exception}") from exception

