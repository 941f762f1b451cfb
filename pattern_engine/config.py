"""
Engine Configuration

Tunable windows and limits for the pattern engine.

Sources, later overrides earlier:
1. Built-in defaults
2. YAML file (explicit path or PATTERN_ENGINE_CONFIG)
3. Environment variables PATTERN_ENGINE_<FIELD>

Invalid values raise ValueError at load time, never during analysis.
"""

import logging
import os
from dataclasses import dataclass, fields, replace, asdict
from pathlib import Path
from typing import Optional, Dict, Any, Union

import yaml

logger = logging.getLogger("engine_config")


# -----------------------------------------------------------------------------
# Constants
# -----------------------------------------------------------------------------
ENV_PREFIX = "PATTERN_ENGINE_"
CONFIG_FILE_ENV = "PATTERN_ENGINE_CONFIG"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# -----------------------------------------------------------------------------
# Engine Config (Immutable)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class EngineConfig:
    """Windows, thresholds and buffer sizes used by the engine."""
    history_window: int = 20  # Observations per category fed to the analyzers
    velocity_window: int = 5
    stability_window: int = 10
    min_confidence: float = 0.6  # Recommendations at or below are dropped
    max_recommendations: int = 5
    learning_history_cap: int = 200  # Trim once the store grows past this
    learning_history_retain: int = 100  # Records kept after a trim
    log_level: str = "INFO"
    strategies_file: Optional[str] = None  # YAML with extra category strategies

    def __post_init__(self):
        """Validate config on creation."""
        for name in ("history_window", "velocity_window", "stability_window",
                     "max_recommendations", "learning_history_cap",
                     "learning_history_retain"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if not 0.0 <= self.min_confidence <= 1.0:
            raise ValueError(f"min_confidence must be 0.0-1.0, got {self.min_confidence}")
        if self.learning_history_retain > self.learning_history_cap:
            raise ValueError(
                "learning_history_retain cannot exceed learning_history_cap "
                f"({self.learning_history_retain} > {self.learning_history_cap})"
            )
        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _coerce(name: str, raw: Any, default: Any) -> Any:
    """Convert a raw YAML/env value to the type of the field default."""
    if name == "strategies_file":
        return str(raw) if raw not in (None, "") else None
    if name == "log_level":
        return str(raw).upper()
    try:
        if isinstance(default, float):
            return float(raw)
        return int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid value for {name}: {raw!r}")


def _read_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML mapping, accepting an optional top-level 'engine' section."""
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    section = data.get("engine", data)
    if not isinstance(section, dict):
        raise ValueError(f"'engine' section in {path} must be a mapping")
    return section


def load_config(path: Optional[Union[str, Path]] = None) -> EngineConfig:
    """
    Load engine configuration from defaults, YAML and environment.

    Args:
        path: YAML file to read (optional, falls back to PATTERN_ENGINE_CONFIG)

    Returns:
        Validated EngineConfig
    """
    config = EngineConfig()
    defaults = {f.name: getattr(config, f.name) for f in fields(EngineConfig)}
    overrides: Dict[str, Any] = {}

    config_path = path or os.getenv(CONFIG_FILE_ENV)
    if config_path:
        config_path = Path(config_path)
        if not config_path.exists():
            raise ValueError(f"Config file not found: {config_path}")
        for key, value in _read_yaml(config_path).items():
            if key not in defaults:
                logger.warning(f"Ignoring unknown config key: {key}")
                continue
            overrides[key] = _coerce(key, value, defaults[key])
        logger.info(f"Loaded engine config from {config_path}")

    for name, default in defaults.items():
        raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
        if raw is not None:
            overrides[name] = _coerce(name, raw, default)

    return replace(config, **overrides)
