"""Build a :class:`World` from a plain JSON snapshot.

Keys may be written in snake_case (``room_id``) or in the editor's
PascalCase (``RoomId``); both map onto the same field. Unknown keys are
ignored. Enum values are given by their value (``"Despejado"``) or name
(``"CLEAR"``).
"""

from __future__ import annotations

import dataclasses
import json
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Type, Union, get_args, get_origin, get_type_hints

from ..exceptions import NodeScriptError
from ..utils.coerce import parse_bool, parse_enum
from .state import World, default_game_time

logger = logging.getLogger(__name__)


class WorldLoadError(NodeScriptError):
    """Raised when a world snapshot cannot be turned into a World."""


def _key(name: str) -> str:
    return name.replace("_", "").casefold()


def _convert(hint: Any, value: Any) -> Any:
    if value is None:
        return None
    origin = get_origin(hint)
    if origin is Union:
        inner = [a for a in get_args(hint) if a is not type(None)]
        return _convert(inner[0], value) if len(inner) == 1 else value
    if origin in (list, tuple):
        (item_hint,) = get_args(hint)[:1] or (Any,)
        return [_convert(item_hint, v) for v in value]
    if origin is dict:
        _, value_hint = get_args(hint) or (Any, Any)
        return {str(k): _convert(value_hint, v) for k, v in value.items()}
    if isinstance(hint, type):
        if dataclasses.is_dataclass(hint):
            return build(hint, value)
        if issubclass(hint, Enum):
            member = parse_enum(hint, value)
            if member is None:
                raise WorldLoadError(f"{value!r} is not a valid {hint.__name__}")
            return member
        if hint is datetime and isinstance(value, str):
            return datetime.fromisoformat(value)
        if hint is bool and not isinstance(value, bool):
            parsed = parse_bool(value)
            if parsed is None:
                raise WorldLoadError(f"{value!r} is not a valid bool")
            return parsed
        if hint in (int, float, str) and not isinstance(value, hint):
            try:
                return hint(value)
            except (TypeError, ValueError) as exc:
                raise WorldLoadError(f"{value!r} is not a valid {hint.__name__}") from exc
    return value


def build(cls: Type[Any], data: Mapping[str, Any]) -> Any:
    """Instantiate dataclass ``cls`` from ``data``, converting nested values."""
    if not isinstance(data, Mapping):
        raise WorldLoadError(f"Expected an object for {cls.__name__}, got {type(data).__name__}")
    hints = get_type_hints(cls)
    by_key = {_key(f.name): f for f in dataclasses.fields(cls) if f.init}
    values: Dict[str, Any] = {}
    for raw_key, raw_value in data.items():
        f = by_key.get(_key(str(raw_key)))
        if f is None:
            logger.debug("Ignoring unknown %s key %r", cls.__name__, raw_key)
            continue
        values[f.name] = _convert(hints[f.name], raw_value)
    try:
        return cls(**values)
    except TypeError as exc:
        raise WorldLoadError(f"Cannot build {cls.__name__}: {exc}") from exc


def world_from_dict(data: Mapping[str, Any]) -> World:
    """Build a World; a snapshot without a clock or weather starts from the game's settings."""
    if not isinstance(data, Mapping):
        raise WorldLoadError("A world snapshot must be a JSON object")
    data = dict(data)
    keys = {_key(k): k for k in data}
    quests_key = keys.get("quests")
    if quests_key is not None and isinstance(data[quests_key], Mapping):
        # quest states are keyed by quest id; the id may be left out of each entry
        data[quests_key] = {
            quest_id: {"quest_id": quest_id, **state} if isinstance(state, Mapping) else state
            for quest_id, state in data[quests_key].items()
        }
    world = build(World, data)
    if "gametime" not in keys:
        world.game_time = default_game_time(world.game.start_hour)
    if "weather" not in keys:
        world.weather = world.game.start_weather
    logger.info(
        "World loaded: %d room(s), %d npc(s), %d object(s), %d quest(s)",
        len(world.rooms),
        len(world.npcs),
        len(world.objects),
        len(world.quest_definitions),
    )
    return world


def load_world(path: Union[str, Path]) -> World:
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise WorldLoadError(f"Cannot read world snapshot {p}: {exc}") from exc
    except json.JSONDecodeError as e:
        raise WorldLoadError(f"World snapshot {p} is not valid JSON (line {e.lineno}): {e.msg}") from e
    return world_from_dict(data)
