"""Condition nodes.

Every condition routes the walk to exactly ``"True"`` or ``"False"`` and has
no other effect, so conditions are also registered as pure: a condition wired
into a data input (for example the ``Condition`` port of a Flow_Branch)
yields its verdict as a bool.
"""

from __future__ import annotations

import logging

from ..accessor import PropertyAccessor
from ..graph.model import NodeCategory, same_name
from ..runtime.context import NodeResult
from ..runtime.registry import handler
from ..utils.coerce import compare_numbers, compare_values, parse_enum
from ..utils.math import percent
from ..world import player_state
from ..world.models import DamageType, ObjectType, QuestStatus, Weather
from .common import contains_id, equipped_in, is_equipped, player_alive, read_int, read_text

logger = logging.getLogger(__name__)


def condition(tag: str, required=()):
    return handler(tag, NodeCategory.CONDITION, required=required, pure=True)


# --- inventory, location, quests, flags --------------------------------------


@condition("Condition_HasItem", required=("ObjectId",))
def has_item(node, ctx):
    object_id = read_text(ctx, node, "ObjectId")
    result = ctx.world.has_item(object_id)
    ctx.debug(f"[Debug] Condition_HasItem({object_id}): {result} (inventory: {', '.join(ctx.world.inventory)})")
    return NodeResult.branch(result)


@condition("Condition_IsInRoom", required=("RoomId",))
def is_in_room(node, ctx):
    return NodeResult.branch(same_name(ctx.world.current_room_id, read_text(ctx, node, "RoomId")))


@condition("Condition_IsQuestStatus", required=("QuestId",))
def is_quest_status(node, ctx):
    expected = parse_enum(QuestStatus, read_text(ctx, node, "Status", "NotStarted"), QuestStatus.NOT_STARTED)
    return NodeResult.branch(ctx.world.quest_status(read_text(ctx, node, "QuestId")) == expected)


@condition("Condition_IsMainQuest", required=("QuestId",))
def is_main_quest(node, ctx):
    quest = ctx.world.quest_definition(read_text(ctx, node, "QuestId"))
    return NodeResult.branch(quest is not None and quest.is_main_quest)


@condition("Condition_HasFlag", required=("FlagName",))
def has_flag(node, ctx):
    name = read_text(ctx, node, "FlagName")
    return NodeResult.branch(bool(name) and ctx.world.get_flag(name))


@condition("Condition_CompareCounter", required=("CounterName",))
def compare_counter(node, ctx):
    current = ctx.world.get_counter(read_text(ctx, node, "CounterName"))
    op = read_text(ctx, node, "Operator", "==")
    return NodeResult.branch(compare_numbers(current, op, read_int(ctx, node, "Value", 0)))


# --- time and weather ---------------------------------------------------------

TIME_RANGES = {
    "Manana": lambda h: 6 <= h < 12,
    "Tarde": lambda h: 12 <= h < 20,
    "Noche": lambda h: h >= 20,
    "Madrugada": lambda h: 0 <= h < 6,
}


@condition("Condition_IsTimeOfDay", required=("TimeRange",))
def is_time_of_day(node, ctx):
    in_range = TIME_RANGES.get(read_text(ctx, node, "TimeRange"))
    return NodeResult.branch(in_range is not None and in_range(ctx.world.game_hour))


@condition("Condition_IsWeather")
def is_weather(node, ctx):
    weather = parse_enum(Weather, read_text(ctx, node, "Weather", Weather.CLEAR.value))
    return NodeResult.branch(weather is not None and ctx.world.weather == weather)


# --- doors, npcs, objects -----------------------------------------------------


@condition("Condition_IsDoorOpen", required=("DoorId",))
def is_door_open(node, ctx):
    door = ctx.world.door(read_text(ctx, node, "DoorId"))
    return NodeResult.branch(door is not None and door.is_open)


@condition("Condition_IsDoorVisible", required=("DoorId",))
def is_door_visible(node, ctx):
    door = ctx.world.door(read_text(ctx, node, "DoorId"))
    visible = door is not None and door.visible and ctx.world.requirements_met(door.required_quests)
    return NodeResult.branch(visible)


@condition("Condition_IsNpcVisible", required=("NpcId",))
def is_npc_visible(node, ctx):
    npc = ctx.world.npc(read_text(ctx, node, "NpcId"))
    return NodeResult.branch(npc is not None and npc.visible)


@condition("Condition_IsObjectVisible", required=("ObjectId",))
def is_object_visible(node, ctx):
    obj = ctx.world.object(read_text(ctx, node, "ObjectId"))
    return NodeResult.branch(obj is not None and obj.visible)


@condition("Condition_IsObjectTakeable", required=("ObjectId",))
def is_object_takeable(node, ctx):
    obj = ctx.world.object(read_text(ctx, node, "ObjectId"))
    return NodeResult.branch(obj is not None and obj.can_take)


@condition("Condition_IsContainerOpen", required=("ObjectId",))
def is_container_open(node, ctx):
    obj = ctx.world.object(read_text(ctx, node, "ObjectId"))
    return NodeResult.branch(obj is not None and obj.is_container and obj.is_open)


@condition("Condition_IsContainerLocked", required=("ObjectId",))
def is_container_locked(node, ctx):
    obj = ctx.world.object(read_text(ctx, node, "ObjectId"))
    return NodeResult.branch(obj is not None and obj.is_container and obj.is_locked)


@condition("Condition_ObjectInContainer", required=("ObjectId", "ContainerId"))
def object_in_container(node, ctx):
    container = ctx.world.object(read_text(ctx, node, "ContainerId"))
    object_id = read_text(ctx, node, "ObjectId")
    return NodeResult.branch(
        container is not None and container.is_container and contains_id(container.contained_object_ids, object_id)
    )


@condition("Condition_ObjectInRoom", required=("ObjectId", "RoomId"))
def object_in_room(node, ctx):
    room = ctx.world.room(read_text(ctx, node, "RoomId"))
    return NodeResult.branch(room is not None and contains_id(room.object_ids, read_text(ctx, node, "ObjectId")))


@condition("Condition_NpcInRoom", required=("NpcId", "RoomId"))
def npc_in_room(node, ctx):
    npc = ctx.world.npc(read_text(ctx, node, "NpcId"))
    return NodeResult.branch(npc is not None and same_name(npc.room_id, read_text(ctx, node, "RoomId")))


# --- light --------------------------------------------------------------------


def _lit(obj) -> bool:
    return obj is not None and obj.is_light_source and obj.is_lit


@condition("Condition_IsObjectLit", required=("ObjectId",))
def is_object_lit(node, ctx):
    return NodeResult.branch(_lit(ctx.world.object(read_text(ctx, node, "ObjectId"))))


def room_is_lit(world) -> bool:
    """Whether the player's current room has light to see by.

    Interior rooms use their own illumination; outdoors it is dark from 20:00
    to 07:00. Lacking base light, any lit light source carried by the player,
    lying in the room, or inside an open (or see-through) container in the
    room is enough.
    """
    room = world.current_room()
    if room is None:
        return False
    hour = world.game_hour
    if room.is_interior:
        base = room.is_illuminated
    else:
        base = not (hour >= 20 or hour < 7)
    if base:
        return True
    if any(_lit(obj) for obj in world.inventory_objects()):
        return True
    for object_id in room.object_ids:
        obj = world.object(object_id)
        if obj is None:
            continue
        if _lit(obj):
            return True
        if obj.is_container and (obj.is_open or obj.contents_visible):
            if any(_lit(world.object(inner)) for inner in obj.contained_object_ids):
                return True
    return False


@condition("Condition_IsRoomLit")
def is_room_lit(node, ctx):
    return NodeResult.branch(room_is_lit(ctx.world))


# --- npc movement and combat --------------------------------------------------


@condition("Condition_IsPatrolling", required=("NpcId",))
def is_patrolling(node, ctx):
    npc = ctx.world.npc(read_text(ctx, node, "NpcId"))
    return NodeResult.branch(npc is not None and npc.is_patrolling)


@condition("Condition_IsFollowingPlayer", required=("NpcId",))
def is_following_player(node, ctx):
    npc = ctx.world.npc(read_text(ctx, node, "NpcId"))
    return NodeResult.branch(npc is not None and npc.is_following_player)


@condition("Condition_Random")
def random_chance(node, ctx):
    probability = read_int(ctx, node, "Probability", 50)
    return NodeResult.branch(ctx.rng.randrange(100) < probability)


@condition("Condition_IsNpcAlive", required=("NpcId",))
def is_npc_alive(node, ctx):
    npc = ctx.world.npc(read_text(ctx, node, "NpcId"))
    return NodeResult.branch(npc is not None and npc.is_alive)


@condition("Condition_NpcHealthBelow", required=("NpcId",))
def npc_health_below(node, ctx):
    npc = ctx.world.npc(read_text(ctx, node, "NpcId"))
    return NodeResult.branch(npc is not None and npc.stats.current_health < read_int(ctx, node, "Threshold", 50))


@condition("Condition_IsInCombat")
def is_in_combat(node, ctx):
    return NodeResult.branch(ctx.world.in_combat)


def _health_percent(player) -> int:
    return int(percent(player.vitals.health, player.vitals.max_health, empty=100))


@condition("Condition_PlayerHealthBelow")
def player_health_below(node, ctx):
    return NodeResult.branch(_health_percent(ctx.world.player) < read_int(ctx, node, "Threshold", 50))


@condition("Condition_PlayerHealthAbove")
def player_health_above(node, ctx):
    return NodeResult.branch(_health_percent(ctx.world.player) > read_int(ctx, node, "Threshold", 50))


@condition("Condition_PlayerHasWeaponType")
def player_has_weapon_type(node, ctx):
    expected = parse_enum(DamageType, read_text(ctx, node, "DamageType", "Physical"), DamageType.PHYSICAL)
    player = ctx.world.player
    right, left = player.equipped_right_hand_id, player.equipped_left_hand_id
    for object_id in (right, left if left != right else None):
        weapon = ctx.world.object(object_id)
        if weapon is not None and weapon.type is ObjectType.WEAPON and weapon.damage_type is expected:
            return NodeResult.branch(True)
    return NodeResult.branch(False)


@condition("Condition_PlayerHasArmor")
def player_has_armor(node, ctx):
    player = ctx.world.player
    if player.equipped_torso_id or player.equipped_head_id:
        return NodeResult.branch(True)
    for object_id in (player.equipped_right_hand_id, player.equipped_left_hand_id):
        obj = ctx.world.object(object_id)
        if obj is not None and obj.type is ObjectType.ARMOR:
            return NodeResult.branch(True)
    return NodeResult.branch(False)


@condition("Condition_IsCombatRound")
def is_combat_round(node, ctx):
    combat = ctx.world.active_combat
    current = combat.round_number if combat is not None else 0
    return NodeResult.branch(current == read_int(ctx, node, "Round", 1))


# --- trade and money ----------------------------------------------------------


@condition("Condition_IsInTrade")
def is_in_trade(node, ctx):
    # Trade sessions belong to the host's trade engine and are not visible here
    return NodeResult.branch(False)


@condition("Condition_PlayerHasMoney")
def player_has_money(node, ctx):
    return NodeResult.branch(ctx.world.player.money >= read_int(ctx, node, "Amount", 100))


@condition("Condition_NpcHasMoney", required=("NpcId",))
def npc_has_money(node, ctx):
    npc = ctx.world.npc(read_text(ctx, node, "NpcId"))
    amount = read_int(ctx, node, "Amount", 100)
    return NodeResult.branch(npc is not None and (npc.money < 0 or npc.money >= amount))


@condition("Condition_NpcHasInfiniteMoney", required=("NpcId",))
def npc_has_infinite_money(node, ctx):
    npc = ctx.world.npc(read_text(ctx, node, "NpcId"))
    return NodeResult.branch(npc is not None and npc.money < 0)


@condition("Condition_PlayerOwnsItem", required=("ObjectId",))
def player_owns_item(node, ctx):
    owned = ctx.world.count_item(read_text(ctx, node, "ObjectId"))
    return NodeResult.branch(owned >= read_int(ctx, node, "Quantity", 1))


# --- player state and modifiers -----------------------------------------------


def _state(ctx, node) -> int:
    return player_state.get_state(ctx.world.player, read_text(ctx, node, "StateType", "Health"))


@condition("Condition_PlayerStateAbove")
def player_state_above(node, ctx):
    return NodeResult.branch(_state(ctx, node) > read_int(ctx, node, "Threshold", 50))


@condition("Condition_PlayerStateBelow")
def player_state_below(node, ctx):
    return NodeResult.branch(_state(ctx, node) < read_int(ctx, node, "Threshold", 25))


@condition("Condition_PlayerStateEquals")
def player_state_equals(node, ctx):
    return NodeResult.branch(_state(ctx, node) == read_int(ctx, node, "Value", 100))


@condition("Condition_PlayerStateBetween")
def player_state_between(node, ctx):
    value = _state(ctx, node)
    return NodeResult.branch(read_int(ctx, node, "MinValue", 25) <= value <= read_int(ctx, node, "MaxValue", 75))


def has_active_modifier(world, name: str) -> bool:
    return any(not m.is_expired() and same_name(m.name, name) for m in world.active_modifiers)


@condition("Condition_HasModifier", required=("ModifierName",))
def has_modifier(node, ctx):
    return NodeResult.branch(has_active_modifier(ctx.world, read_text(ctx, node, "ModifierName")))


@condition("Condition_HasModifierForState")
def has_modifier_for_state(node, ctx):
    state = player_state.canonical_name(read_text(ctx, node, "StateType", "Health"))
    if not state:
        return NodeResult.branch(False)
    return NodeResult.branch(
        any(not m.is_expired() and m.state_type == state for m in ctx.world.active_modifiers)
    )


@condition("Condition_IsPlayerAlive")
def is_player_alive(node, ctx):
    return NodeResult.branch(player_alive(ctx.world.player))


# --- generic properties -------------------------------------------------------


@condition("Condition_CompareProperty", required=("EntityType", "PropertyName"))
def compare_property(node, ctx):
    current = PropertyAccessor(ctx.world).get(
        read_text(ctx, node, "EntityType"), read_text(ctx, node, "EntityId"), read_text(ctx, node, "PropertyName")
    )
    op = read_text(ctx, node, "Operator", "==")
    return NodeResult.branch(compare_values(current, op, read_text(ctx, node, "CompareValue")))


# --- equipment ----------------------------------------------------------------


@condition("Condition_PlayerHasEquipped", required=("ObjectId",))
def player_has_equipped(node, ctx):
    return NodeResult.branch(
        is_equipped(ctx.world.player, read_text(ctx, node, "ObjectId"), read_text(ctx, node, "Slot", "Any"))
    )


@condition("Condition_NpcHasEquipped", required=("NpcId", "ObjectId"))
def npc_has_equipped(node, ctx):
    npc = ctx.world.npc(read_text(ctx, node, "NpcId"))
    return NodeResult.branch(
        npc is not None and is_equipped(npc, read_text(ctx, node, "ObjectId"), read_text(ctx, node, "Slot", "Any"))
    )


@condition("Condition_IsPlayerSlotEmpty")
def is_player_slot_empty(node, ctx):
    return NodeResult.branch(not equipped_in(ctx.world.player, read_text(ctx, node, "Slot", "RightHand")))


@condition("Condition_IsNpcSlotEmpty", required=("NpcId",))
def is_npc_slot_empty(node, ctx):
    npc = ctx.world.npc(read_text(ctx, node, "NpcId"))
    if npc is None:
        return NodeResult.branch(True)
    return NodeResult.branch(not equipped_in(npc, read_text(ctx, node, "Slot", "RightHand")))


@condition("Condition_NpcHasItem", required=("NpcId", "ObjectId"))
def npc_has_item(node, ctx):
    npc = ctx.world.npc(read_text(ctx, node, "NpcId"))
    object_id = read_text(ctx, node, "ObjectId")
    held = npc is not None and any(
        same_name(i.object_id, object_id) and i.quantity > 0 for i in npc.inventory
    )
    return NodeResult.branch(held)
