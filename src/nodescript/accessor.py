"""Generic get/set bridge between scripts and world entities.

Entities are addressed as ``(entity_type, entity_id)`` where the type is one
of Room, Door, Npc, GameObject, Player or Game (case-insensitive). Player and
Game ignore the id. Property names are matched exactly as authored.

``ACCESSIBLE_PROPERTIES`` is the list offered to authoring tools. It is kept
apart from the get/set tables below and the two are allowed to differ: the
Game title and turn counter can be read but not written.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from .utils.coerce import parse_enum, to_bool, to_float, to_int
from .utils.math import clamp
from .world import player_state
from .world.models import Weather
from .world.state import World

logger = logging.getLogger(__name__)

ACCESSIBLE_PROPERTIES: Dict[str, Tuple[str, ...]] = {
    "Room": ("Name", "Description", "IsInterior", "IsIlluminated", "MusicId"),
    "Door": ("Name", "Description", "IsOpen", "IsLocked", "Visible", "KeyObjectId"),
    "Npc": (
        "Name",
        "Description",
        "RoomId",
        "Visible",
        "IsPatrolling",
        "IsFollowingPlayer",
        "Money",
        "IsCorpse",
        "IsShopkeeper",
        "CurrentHealth",
        "MaxHealth",
    ),
    "GameObject": (
        "Name",
        "Description",
        "RoomId",
        "Visible",
        "CanTake",
        "IsOpen",
        "IsLocked",
        "Price",
        "Weight",
        "Volume",
        "AttackBonus",
        "DefenseBonus",
        "IsLit",
    ),
    "Player": (
        "Name",
        "Strength",
        "Constitution",
        "Intelligence",
        "Dexterity",
        "Charisma",
        "Money",
        "Health",
        "MaxHealth",
        "Hunger",
        "Thirst",
        "Energy",
        "Sleep",
        "Sanity",
        "Mana",
        "MaxMana",
    ),
    "Game": ("Weather", "Title", "GameHour", "GameMinute", "TurnCounter"),
}

_TYPE_NAMES = {name.casefold(): name for name in ACCESSIBLE_PROPERTIES}

Getter = Callable[[Any], Any]
Setter = Callable[[Any, Any], bool]


def accessible_properties(entity_type: str) -> Tuple[str, ...]:
    """Advisory property list for an entity type; empty for unknown types."""
    name = _TYPE_NAMES.get((entity_type or "").casefold())
    return ACCESSIBLE_PROPERTIES[name] if name else ()


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _optional_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _field(attr: str, convert: Callable[[Any], Any]) -> Tuple[Getter, Setter]:
    """Getter/setter pair for a plain attribute, converting on write."""

    def setter(entity: Any, value: Any) -> bool:
        setattr(entity, attr, convert(value))
        return True

    return (lambda entity: getattr(entity, attr)), setter


def _stat(attr: str) -> Tuple[Getter, Setter]:
    def setter(npc: Any, value: Any) -> bool:
        setattr(npc.stats, attr, to_int(value))
        return True

    return (lambda npc: getattr(npc.stats, attr)), setter


def _player_state(name: str) -> Tuple[Getter, Setter]:
    def setter(player: Any, value: Any) -> bool:
        return player_state.set_state(player, name, to_int(value))

    return (lambda player: player_state.get_state(player, name)), setter


_ROOM: Dict[str, Tuple[Getter, Setter]] = {
    "Name": _field("name", _text),
    "Description": _field("description", _text),
    "IsInterior": _field("is_interior", to_bool),
    "IsIlluminated": _field("is_illuminated", to_bool),
    "MusicId": _field("music_id", _optional_text),
}

_DOOR: Dict[str, Tuple[Getter, Setter]] = {
    "Name": _field("name", _text),
    "Description": _field("description", _text),
    "IsOpen": _field("is_open", to_bool),
    "IsLocked": _field("is_locked", to_bool),
    "Visible": _field("visible", to_bool),
    "KeyObjectId": _field("key_object_id", _optional_text),
}

_NPC: Dict[str, Tuple[Getter, Setter]] = {
    "Name": _field("name", _text),
    "Description": _field("description", _text),
    "RoomId": _field("room_id", _text),
    "Visible": _field("visible", to_bool),
    "IsPatrolling": _field("is_patrolling", to_bool),
    "IsFollowingPlayer": _field("is_following_player", to_bool),
    "Money": _field("money", to_int),
    "IsCorpse": _field("is_corpse", to_bool),
    "IsShopkeeper": _field("is_shopkeeper", to_bool),
    "CurrentHealth": _stat("current_health"),
    "MaxHealth": _stat("max_health"),
}

_OBJECT: Dict[str, Tuple[Getter, Setter]] = {
    "Name": _field("name", _text),
    "Description": _field("description", _text),
    "RoomId": _field("room_id", _optional_text),
    "Visible": _field("visible", to_bool),
    "CanTake": _field("can_take", to_bool),
    "IsOpen": _field("is_open", to_bool),
    "IsLocked": _field("is_locked", to_bool),
    "Price": _field("price", to_int),
    "Weight": _field("weight", to_int),
    "Volume": _field("volume", to_float),
    "AttackBonus": _field("attack_bonus", to_int),
    "DefenseBonus": _field("defense_bonus", to_int),
    "IsLit": _field("is_lit", to_bool),
}

# Attributes and money are written as given; vitals keep their ranges.
_PLAYER: Dict[str, Tuple[Getter, Setter]] = {
    "Name": _field("name", _text),
    "Strength": _field("strength", to_int),
    "Constitution": _field("constitution", to_int),
    "Intelligence": _field("intelligence", to_int),
    "Dexterity": _field("dexterity", to_int),
    "Charisma": _field("charisma", to_int),
    "Money": _field("money", to_int),
}
_PLAYER.update({name: _player_state(name) for name in player_state.VITALS})


def _set_weather(world: World, value: Any) -> bool:
    weather = parse_enum(Weather, "Despejado" if value is None else value)
    if weather is None:
        return False
    world.weather = weather
    return True


def _set_hour(world: World, value: Any) -> bool:
    world.set_game_time(hour=clamp(to_int(value), 0, 23))
    return True


def _set_minute(world: World, value: Any) -> bool:
    world.set_game_time(minute=clamp(to_int(value), 0, 59))
    return True


def _read_only(world: World, value: Any) -> bool:
    return False


_GAME: Dict[str, Tuple[Getter, Setter]] = {
    "Weather": ((lambda w: w.weather.value), _set_weather),
    "Title": ((lambda w: w.game.title if w.game else ""), _read_only),
    "GameHour": ((lambda w: w.game_hour), _set_hour),
    "GameMinute": ((lambda w: w.game_minute), _set_minute),
    "TurnCounter": ((lambda w: w.turn_counter), _read_only),
}


class PropertyAccessor:
    """Typed reads and writes of entity properties by name."""

    _TABLES = {
        "room": _ROOM,
        "door": _DOOR,
        "npc": _NPC,
        "gameobject": _OBJECT,
        "player": _PLAYER,
        "game": _GAME,
    }

    def __init__(self, world: World) -> None:
        self.world = world

    def resolve(self, entity_type: str, entity_id: str) -> Any:
        """Return the entity addressed by ``(entity_type, entity_id)`` or None."""
        kind = (entity_type or "").casefold()
        if kind == "room":
            return self.world.room(entity_id)
        if kind == "door":
            return self.world.door(entity_id)
        if kind == "npc":
            return self.world.npc(entity_id)
        if kind == "gameobject":
            return self.world.object(entity_id)
        if kind == "player":
            return self.world.player
        if kind == "game":
            # Game-level values live on the world itself
            return self.world
        return None

    def _entry(self, entity_type: str, prop: str) -> Optional[Tuple[Getter, Setter]]:
        table = self._TABLES.get((entity_type or "").casefold())
        if table is None:
            return None
        return table.get(prop)

    def get(self, entity_type: str, entity_id: str, prop: str) -> Any:
        entity = self.resolve(entity_type, entity_id)
        entry = self._entry(entity_type, prop)
        if entity is None or entry is None:
            return None
        getter, _ = entry
        return getter(entity)

    def set(self, entity_type: str, entity_id: str, prop: str, value: Any) -> bool:
        """Coerce and apply ``value``; returns whether a writable property matched.

        Does not notify property listeners; callers compare old and new values
        and raise the change themselves.
        """
        entity = self.resolve(entity_type, entity_id)
        entry = self._entry(entity_type, prop)
        if entity is None or entry is None:
            logger.debug("No writable property %s on %s %s", prop, entity_type, entity_id)
            return False
        _, setter = entry
        return setter(entity, value)
