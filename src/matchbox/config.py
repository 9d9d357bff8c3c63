"""
Process-wide configuration for Matchbox.

Holds the optional default comparison engine and the evaluation depth
ceiling. The configuration is applied exactly once:

    - explicitly, by the host application calling configure() at startup
    - or implicitly, from MATCHBOX_* environment variables the first time
      the core reads it

After that it is read-only. Evaluation never mutates it, so concurrent
calls always observe the same values.

Environment:
    MATCHBOX_COMPARISON_ENGINE   import path, e.g. "myapp.engines:StrictEngine"
    MATCHBOX_MAX_DEPTH           evaluation depth ceiling (default 256)
"""

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from matchbox.engines.base import load_engine
from matchbox.errors import ConfigurationError
from matchbox.log import get_logger

logger = get_logger("matchbox.config")

DEFAULT_MAX_DEPTH = 256


class MatchboxSettings(BaseSettings):
    """Settings read from the environment or a YAML file."""

    model_config = SettingsConfigDict(
        env_prefix="MATCHBOX_",
        case_sensitive=False,
        extra="ignore",
    )

    comparison_engine: Optional[str] = Field(default=None)
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1)


@dataclass(frozen=True)
class RuntimeConfig:
    """The frozen configuration the core reads during evaluation."""

    comparison_engine: Optional[Any] = None
    max_depth: int = DEFAULT_MAX_DEPTH


_lock = threading.Lock()
_state: Optional[RuntimeConfig] = None


def check_max_depth(value: Any) -> int:
    """Return `value` if it is a usable depth ceiling, raise ConfigurationError otherwise."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigurationError(f"max_depth must be a positive integer, got {value!r}")
    return value


def load_settings(path: Union[str, Path]) -> MatchboxSettings:
    """
    Read settings from a YAML file.

    Example file:
        comparison_engine: myapp.engines:StrictEngine
        max_depth: 128

    Values in the file take precedence over the environment.
    """
    with open(path) as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file {path} must contain a mapping")
    return MatchboxSettings(**data)


def _build(comparison_engine: Any, max_depth: Optional[int], settings: MatchboxSettings) -> RuntimeConfig:
    engine_ref = comparison_engine if comparison_engine is not None else settings.comparison_engine
    engine = load_engine(engine_ref) if engine_ref is not None else None
    return RuntimeConfig(
        comparison_engine=engine,
        max_depth=max_depth if max_depth is not None else settings.max_depth,
    )


def configure(
    comparison_engine: Any = None,
    *,
    max_depth: Optional[int] = None,
    settings: Optional[MatchboxSettings] = None,
) -> RuntimeConfig:
    """
    Apply the process-wide configuration. Call once, at startup.

    Args:
        comparison_engine: Engine instance, class or import path used when a
            call does not pass its own. Overrides settings.comparison_engine.
        max_depth: Evaluation depth ceiling. Overrides settings.max_depth.
        settings: Explicit settings; read from the environment when omitted.

    Raises:
        ConfigurationError: If configuration was already applied or read
    """
    global _state
    if max_depth is not None:
        check_max_depth(max_depth)

    with _lock:
        if _state is not None:
            raise ConfigurationError("Matchbox is already configured")
        _state = _build(comparison_engine, max_depth, settings or MatchboxSettings())

    logger.info(
        "Matchbox configured",
        comparison_engine=type(_state.comparison_engine).__name__ if _state.comparison_engine else None,
        max_depth=_state.max_depth,
    )
    return _state


def get_config() -> RuntimeConfig:
    """Return the process-wide configuration, freezing it from the environment on first read."""
    global _state
    state = _state
    if state is None:
        with _lock:
            if _state is None:
                _state = _build(None, None, MatchboxSettings())
            state = _state
    return state


def get_default_engine() -> Optional[Any]:
    """Return the configured default engine, or None."""
    return get_config().comparison_engine


def get_max_depth() -> int:
    return get_config().max_depth
