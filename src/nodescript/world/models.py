from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional


class Weather(str, Enum):
    CLEAR = "Despejado"
    RAINY = "Lluvioso"
    CLOUDY = "Nublado"
    STORM = "Tormenta"


class QuestStatus(str, Enum):
    NOT_STARTED = "NotStarted"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    FAILED = "Failed"


class ObjectType(str, Enum):
    NONE = "Ninguno"
    WEAPON = "Arma"
    ARMOR = "Armadura"
    HELMET = "Casco"
    SHIELD = "Escudo"
    FOOD = "Comida"
    DRINK = "Bebida"
    KEY = "Llave"


class DamageType(str, Enum):
    PHYSICAL = "Physical"
    MAGICAL = "Magical"
    PIERCING = "Piercing"


class ModifierDurationType(str, Enum):
    TURNS = "Turns"
    SECONDS = "Seconds"
    PERMANENT = "Permanent"


class MovementMode(str, Enum):
    TURNS = "Turns"
    TIME = "Time"


class NeedRate(str, Enum):
    LOW = "Low"
    NORMAL = "Normal"
    HIGH = "High"


class EquipSlot(str, Enum):
    RIGHT_HAND = "RightHand"
    LEFT_HAND = "LeftHand"
    TORSO = "Torso"
    HEAD = "Head"


@dataclass
class QuestRequirement:
    quest_id: str
    required_status: QuestStatus = QuestStatus.COMPLETED


@dataclass
class QuestDefinition:
    id: str
    name: str = "Unnamed quest"
    description: str = ""
    is_main_quest: bool = True
    objectives: List[str] = field(default_factory=list)


@dataclass
class QuestState:
    quest_id: str
    status: QuestStatus = QuestStatus.NOT_STARTED
    current_objective_index: int = 0


@dataclass
class InventoryItem:
    object_id: str
    quantity: int = 1


@dataclass
class ShopItem:
    object_id: str
    # -1 means unlimited stock
    quantity: int = -1


@dataclass
class Room:
    id: str
    name: str = "Unnamed room"
    description: str = ""
    music_id: Optional[str] = None
    is_interior: bool = False
    is_illuminated: bool = True
    object_ids: List[str] = field(default_factory=list)
    npc_ids: List[str] = field(default_factory=list)
    required_quests: List[QuestRequirement] = field(default_factory=list)


@dataclass
class Door:
    id: str
    name: str = "door"
    description: Optional[str] = None
    room_id_a: Optional[str] = None
    room_id_b: Optional[str] = None
    is_open: bool = False
    is_locked: bool = False
    key_object_id: Optional[str] = None
    visible: bool = True
    required_quests: List[QuestRequirement] = field(default_factory=list)


@dataclass
class CombatStats:
    strength: int = 5
    dexterity: int = 5
    intelligence: int = 5
    max_health: int = 10
    current_health: int = 10


@dataclass
class Npc:
    """Non-player character, including shop, patrol and follow state."""

    id: str
    name: str = "Unnamed NPC"
    description: str = ""
    room_id: Optional[str] = None
    visible: bool = True

    is_shopkeeper: bool = False
    shop_inventory: List[ShopItem] = field(default_factory=list)
    buy_price_multiplier: float = 0.5
    sell_price_multiplier: float = 1.0
    # negative money means the NPC never runs out
    money: int = 0

    inventory: List[InventoryItem] = field(default_factory=list)
    equipped_right_hand_id: Optional[str] = None
    equipped_left_hand_id: Optional[str] = None
    equipped_torso_id: Optional[str] = None
    equipped_head_id: Optional[str] = None

    stats: CombatStats = field(default_factory=CombatStats)
    ability_ids: List[str] = field(default_factory=list)
    is_corpse: bool = False

    patrol_route: List[str] = field(default_factory=list)
    patrol_movement_mode: MovementMode = MovementMode.TURNS
    patrol_speed: int = 1
    patrol_time_interval: float = 3.0
    is_patrolling: bool = False
    patrol_route_index: int = 0
    patrol_direction: int = 1
    patrol_turn_counter: int = 0

    is_following_player: bool = False
    follow_movement_mode: MovementMode = MovementMode.TURNS
    follow_speed: int = 1
    follow_time_interval: float = 3.0
    follow_move_counter: int = 0

    @property
    def is_alive(self) -> bool:
        return not self.is_corpse and self.stats.current_health > 0


@dataclass
class GameObject:
    id: str
    name: str = "Unnamed object"
    description: str = ""
    type: ObjectType = ObjectType.NONE
    room_id: Optional[str] = None
    visible: bool = True
    can_take: bool = False

    is_container: bool = False
    contained_object_ids: List[str] = field(default_factory=list)
    is_openable: bool = False
    is_open: bool = True
    is_locked: bool = False
    key_id: Optional[str] = None
    contents_visible: bool = False

    volume: float = 0.0
    weight: int = 0
    price: int = 0
    attack_bonus: int = 0
    defense_bonus: int = 0
    max_durability: int = -1
    current_durability: int = -1
    damage_type: DamageType = DamageType.PHYSICAL

    is_light_source: bool = False
    is_lit: bool = False
    light_turns_remaining: int = -1


@dataclass
class Vitals:
    health: int = 100
    max_health: int = 100
    hunger: int = 0
    thirst: int = 0
    energy: int = 100
    sleep: int = 0
    sanity: int = 100
    mana: int = 100
    max_mana: int = 100


@dataclass
class Player:
    name: str = "Adventurer"
    strength: int = 20
    constitution: int = 20
    intelligence: int = 20
    dexterity: int = 20
    charisma: int = 20
    money: int = 0
    equipped_right_hand_id: Optional[str] = None
    equipped_left_hand_id: Optional[str] = None
    equipped_torso_id: Optional[str] = None
    equipped_head_id: Optional[str] = None
    ability_ids: List[str] = field(default_factory=list)
    vitals: Vitals = field(default_factory=Vitals)


@dataclass
class CombatState:
    enemy_npc_id: str
    is_active: bool = True
    round_number: int = 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class TemporaryModifier:
    """A timed (or permanent) adjustment to one player state value."""

    name: str
    state_type: str
    amount: int
    duration_type: ModifierDurationType = ModifierDurationType.TURNS
    remaining_duration: int = 0
    is_recurring: bool = False
    applied_at: datetime = field(default_factory=utcnow)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.duration_type is ModifierDurationType.PERMANENT:
            return False
        if self.duration_type is ModifierDurationType.TURNS:
            return self.remaining_duration <= 0
        elapsed = ((now or utcnow()) - self.applied_at).total_seconds()
        return elapsed >= self.remaining_duration


@dataclass
class GameInfo:
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    title: str = "Untitled adventure"
    start_hour: int = 9
    start_weather: Weather = Weather.CLEAR
    combat_enabled: bool = False
    basic_needs_enabled: bool = False
    hunger_rate: NeedRate = NeedRate.NORMAL
    thirst_rate: NeedRate = NeedRate.NORMAL
    sleep_rate: NeedRate = NeedRate.NORMAL
