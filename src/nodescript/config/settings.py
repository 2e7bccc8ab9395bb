from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from importlib.resources import files as resource_files
from typing import Any, Dict, Optional

import yaml

from ..exceptions import ConfigError
from ..utils.coerce import parse_bool

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineSettings:
    """Runtime limits and switches for a script engine session.

    Attributes:
        max_walk_steps: Node invocations allowed per walk before it is aborted.
        max_sequence_depth: Nesting limit for Sequence sub-walks and inline triggers.
        debug_messages: Send "[Debug] ..." routing traces through the message callback.
        random_seed: Seed for random nodes; None for a nondeterministic generator.
        delay_scale: Multiplier applied to Flow_Delay durations.
        default_delay_seconds: Delay used when a node has no readable Seconds value.
    """

    max_walk_steps: int = 10000
    max_sequence_depth: int = 32
    debug_messages: bool = False
    random_seed: Optional[int] = None
    delay_scale: float = 1.0
    default_delay_seconds: float = 1.0

    def __post_init__(self) -> None:
        if self.max_walk_steps < 1:
            raise ConfigError("max_walk_steps must be at least 1")
        if self.max_sequence_depth < 1:
            raise ConfigError("max_sequence_depth must be at least 1")
        if self.delay_scale < 0:
            raise ConfigError("delay_scale cannot be negative")
        if self.default_delay_seconds < 0:
            raise ConfigError("default_delay_seconds cannot be negative")


def _as_bool(value: Any) -> bool:
    parsed = parse_bool(value)
    if parsed is None:
        raise ValueError(f"not a boolean: {value!r}")
    return parsed


_CASTS = {
    "max_walk_steps": int,
    "max_sequence_depth": int,
    "debug_messages": _as_bool,
    "delay_scale": float,
    "default_delay_seconds": float,
}


def settings_from_mapping(raw: Dict[str, Any]) -> EngineSettings:
    known = {f.name for f in fields(EngineSettings)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"Unknown engine setting(s): {', '.join(unknown)}")
    values: Dict[str, Any] = {}
    for key, value in raw.items():
        if value is None:
            if key != "random_seed":
                continue
            values[key] = None
            continue
        cast = _CASTS.get(key, int)
        try:
            values[key] = cast(value)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid value for {key}: {value!r}") from exc
    return EngineSettings(**values)


def load_settings(path: Optional[str] = None) -> EngineSettings:
    """Load engine settings from YAML.

    If path is None, loads the embedded default resource at
    nodescript/config/engine.yaml.
    """
    if path is None:
        data = resource_files("nodescript.config").joinpath("engine.yaml").read_text(encoding="utf-8")
        logger.debug("Loaded embedded engine settings resource")
    else:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = f.read()
        except OSError as exc:
            raise ConfigError(f"Cannot read engine settings from {path}: {exc}") from exc
        logger.debug("Loaded engine settings from path: %s", path)

    try:
        raw = yaml.safe_load(data) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Engine settings are not valid YAML: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError("Engine settings must be a mapping")
    settings = settings_from_mapping(raw)
    logger.info(
        "Engine settings: max_walk_steps=%d max_sequence_depth=%d debug_messages=%s",
        settings.max_walk_steps,
        settings.max_sequence_depth,
        settings.debug_messages,
    )
    return settings
