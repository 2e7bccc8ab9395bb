from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, TypeVar

from .models import (
    CombatState,
    Door,
    GameInfo,
    GameObject,
    Npc,
    Player,
    QuestDefinition,
    QuestState,
    QuestStatus,
    Room,
    TemporaryModifier,
    Weather,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _fold(value: Optional[str]) -> str:
    return (value or "").casefold()


def _find_by_id(items: Iterable[T], item_id: Optional[str]) -> Optional[T]:
    if not item_id:
        return None
    wanted = _fold(item_id)
    for item in items:
        if _fold(getattr(item, "id")) == wanted:
            return item
    return None


def _existing_key(mapping: Mapping[str, object], name: str) -> str:
    """Return the key already used for ``name`` (ignoring case), or ``name`` itself."""
    if name in mapping:
        return name
    wanted = _fold(name)
    for key in mapping:
        if _fold(key) == wanted:
            return key
    return name


def default_game_time(start_hour: int = 9) -> datetime:
    return datetime(2000, 1, 1, max(0, min(start_hour, 23)), 0, 0)


@dataclass
class World:
    """Mutable game world shared by every walk of a session.

    The host owns this object; script handlers read and write it directly.
    Entity lookups ignore case, matching how authored ids are compared.
    """

    game: GameInfo = field(default_factory=GameInfo)
    player: Player = field(default_factory=Player)
    current_room_id: str = ""
    rooms: List[Room] = field(default_factory=list)
    doors: List[Door] = field(default_factory=list)
    npcs: List[Npc] = field(default_factory=list)
    objects: List[GameObject] = field(default_factory=list)
    quest_definitions: List[QuestDefinition] = field(default_factory=list)
    quests: Dict[str, QuestState] = field(default_factory=dict)
    flags: Dict[str, bool] = field(default_factory=dict)
    counters: Dict[str, int] = field(default_factory=dict)
    inventory: List[str] = field(default_factory=list)
    active_combat: Optional[CombatState] = None
    active_modifiers: List[TemporaryModifier] = field(default_factory=list)
    game_time: datetime = field(default_factory=default_game_time)
    turn_counter: int = 0
    weather: Weather = Weather.CLEAR

    # --- entity lookups -------------------------------------------------

    def room(self, room_id: Optional[str]) -> Optional[Room]:
        return _find_by_id(self.rooms, room_id)

    def door(self, door_id: Optional[str]) -> Optional[Door]:
        return _find_by_id(self.doors, door_id)

    def npc(self, npc_id: Optional[str]) -> Optional[Npc]:
        return _find_by_id(self.npcs, npc_id)

    def object(self, object_id: Optional[str]) -> Optional[GameObject]:
        return _find_by_id(self.objects, object_id)

    def quest_definition(self, quest_id: Optional[str]) -> Optional[QuestDefinition]:
        return _find_by_id(self.quest_definitions, quest_id)

    def current_room(self) -> Optional[Room]:
        return self.room(self.current_room_id)

    # --- flags and counters --------------------------------------------

    def get_flag(self, name: str) -> bool:
        return bool(self.flags.get(_existing_key(self.flags, name), False))

    def set_flag(self, name: str, value: bool) -> None:
        self.flags[_existing_key(self.flags, name)] = bool(value)

    def get_counter(self, name: str) -> int:
        return int(self.counters.get(_existing_key(self.counters, name), 0))

    def set_counter(self, name: str, value: int) -> None:
        self.counters[_existing_key(self.counters, name)] = int(value)

    # --- quests -------------------------------------------------------

    def quest(self, quest_id: str) -> Optional[QuestState]:
        return self.quests.get(_existing_key(self.quests, quest_id))

    def quest_status(self, quest_id: str) -> QuestStatus:
        state = self.quest(quest_id)
        return state.status if state else QuestStatus.NOT_STARTED

    def ensure_quest(self, quest_id: str) -> QuestState:
        key = _existing_key(self.quests, quest_id)
        state = self.quests.get(key)
        if state is None:
            state = QuestState(quest_id=quest_id)
            self.quests[key] = state
        return state

    def requirements_met(self, requirements) -> bool:
        return all(self.quest_status(r.quest_id) == r.required_status for r in requirements)

    def all_main_quests_completed(self) -> bool:
        main = [q for q in self.quest_definitions if q.is_main_quest]
        if not main:
            return False
        return all(self.quest_status(q.id) == QuestStatus.COMPLETED for q in main)

    # --- inventory ----------------------------------------------------

    def has_item(self, object_id: str) -> bool:
        wanted = _fold(object_id)
        return bool(object_id) and any(_fold(i) == wanted for i in self.inventory)

    def count_item(self, object_id: str) -> int:
        wanted = _fold(object_id)
        return sum(1 for i in self.inventory if _fold(i) == wanted)

    def remove_item(self, object_id: str) -> bool:
        wanted = _fold(object_id)
        for i, held in enumerate(self.inventory):
            if _fold(held) == wanted:
                del self.inventory[i]
                return True
        return False

    def inventory_objects(self) -> List[GameObject]:
        return [o for o in (self.object(i) for i in self.inventory) if o is not None]

    # --- time ---------------------------------------------------------

    @property
    def game_hour(self) -> int:
        return self.game_time.hour

    @property
    def game_minute(self) -> int:
        return self.game_time.minute

    def set_game_time(self, hour: Optional[int] = None, minute: Optional[int] = None) -> None:
        current = self.game_time
        self.game_time = current.replace(
            hour=current.hour if hour is None else hour,
            minute=current.minute if minute is None else minute,
        )

    def advance_hours(self, hours: int) -> None:
        self.game_time = self.game_time + timedelta(hours=hours)
        logger.debug("Game time advanced by %d hour(s) to %s", hours, self.game_time)

    @property
    def in_combat(self) -> bool:
        return self.active_combat is not None and self.active_combat.is_active
