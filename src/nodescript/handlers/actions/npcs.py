"""NPC movement, interaction, combat and abilities."""

from __future__ import annotations

import logging

from ...events.bus import HostEvent
from ...runtime.context import NodeResult
from ...utils.coerce import parse_enum
from ...utils.math import clamp
from ...world.models import MovementMode
from ..common import contains_id, place_npc, read_float, read_int, read_text, remove_id
from . import action

logger = logging.getLogger(__name__)

DEATH_PORT = "OnDeath"


def _npc(node, ctx):
    return ctx.world.npc(read_text(ctx, node, "NpcId"))


# --- movement -----------------------------------------------------------------


@action("Action_MoveNpc", required=("NpcId", "RoomId"))
def move_npc(node, ctx):
    npc = _npc(node, ctx)
    room_id = read_text(ctx, node, "RoomId")
    if npc is not None and room_id:
        place_npc(ctx.world, npc, room_id)


@action("Action_StartPatrol", required=("NpcId",))
def start_patrol(node, ctx):
    npc = _npc(node, ctx)
    if npc is not None:
        npc.is_patrolling = True
        npc.patrol_turn_counter = 0


@action("Action_StopPatrol", required=("NpcId",))
def stop_patrol(node, ctx):
    npc = _npc(node, ctx)
    if npc is not None:
        npc.is_patrolling = False


@action("Action_PatrolStep", required=("NpcId",))
def patrol_step(node, ctx):
    """Move one room along the patrol route, turning back at either end."""
    npc = _npc(node, ctx)
    if npc is None or len(npc.patrol_route) <= 1:
        return
    last = len(npc.patrol_route) - 1
    index = npc.patrol_route_index + npc.patrol_direction
    if index < 0 or index > last:
        npc.patrol_direction = -npc.patrol_direction
        index = npc.patrol_route_index + npc.patrol_direction
    index = clamp(index, 0, last)
    place_npc(ctx.world, npc, npc.patrol_route[index])
    npc.patrol_route_index = index


@action("Action_SetPatrolMode", required=("NpcId",))
def set_patrol_mode(node, ctx):
    npc = _npc(node, ctx)
    if npc is None:
        return
    npc.patrol_movement_mode = parse_enum(MovementMode, read_text(ctx, node, "Mode", "Turns"), MovementMode.TURNS)
    npc.patrol_speed = max(1, read_int(ctx, node, "TurnSpeed", 1))
    npc.patrol_time_interval = clamp(read_float(ctx, node, "TimeInterval", 5.0), 0.0, 60.0)
    npc.patrol_turn_counter = 0


@action("Action_SetPatrolRoute", required=("NpcId", "Route"))
def set_patrol_route(node, ctx):
    npc = _npc(node, ctx)
    if npc is None:
        return
    route = [part.strip() for part in read_text(ctx, node, "Route").split(",")]
    npc.patrol_route = [room_id for room_id in route if room_id]
    npc.patrol_route_index = 0
    npc.patrol_direction = 1


@action("Action_FollowPlayer", required=("NpcId",))
def follow_player(node, ctx):
    npc = _npc(node, ctx)
    if npc is None:
        return
    npc.is_following_player = True
    npc.follow_speed = clamp(read_int(ctx, node, "Speed", 1), 1, 3)
    npc.follow_move_counter = 0


@action("Action_StopFollowing", required=("NpcId",))
def stop_following(node, ctx):
    npc = _npc(node, ctx)
    if npc is not None:
        npc.is_following_player = False


@action("Action_SetFollowMode", required=("NpcId",))
def set_follow_mode(node, ctx):
    npc = _npc(node, ctx)
    if npc is None:
        return
    npc.follow_movement_mode = parse_enum(MovementMode, read_text(ctx, node, "Mode", "Turns"), MovementMode.TURNS)
    npc.follow_speed = clamp(read_int(ctx, node, "TurnSpeed", 1), 1, 3)
    npc.follow_time_interval = clamp(read_float(ctx, node, "TimeInterval", 3.0), 0.0, 60.0)
    npc.follow_move_counter = 0


# --- interaction --------------------------------------------------------------


@action("Action_StartConversation", required=("NpcId",))
def start_conversation(node, ctx):
    npc_id = read_text(ctx, node, "NpcId")
    if npc_id:
        ctx.emit(HostEvent.START_CONVERSATION, npc_id=npc_id)


@action("Action_StartCombat", required=("NpcId",))
def start_combat(node, ctx):
    npc = _npc(node, ctx)
    if npc is None or npc.is_corpse:
        return
    ctx.emit(HostEvent.START_COMBAT, npc_id=npc.id)


@action("Action_OpenTrade", required=("NpcId",))
def open_trade(node, ctx):
    npc = _npc(node, ctx)
    if npc is not None and npc.is_shopkeeper:
        ctx.emit(HostEvent.START_TRADE, npc_id=npc.id)


@action("Action_CloseTrade")
def close_trade(node, ctx):
    # the host owns the trade session and closes it itself
    return None


# --- combat -------------------------------------------------------------------


def _kill(npc) -> None:
    npc.stats.current_health = 0
    npc.is_corpse = True
    npc.is_patrolling = False
    npc.is_following_player = False


@action("Action_DamageNpc", required=("NpcId",))
def damage_npc(node, ctx):
    npc = _npc(node, ctx)
    if npc is None:
        return None
    stats = npc.stats
    stats.current_health = max(0, stats.current_health - read_int(ctx, node, "Amount", 10))
    if stats.current_health == 0:
        _kill(npc)
        logger.debug("NPC %s died", npc.id)
        return NodeResult.port(DEATH_PORT)
    return None


@action("Action_HealNpc", required=("NpcId",))
def heal_npc(node, ctx):
    npc = _npc(node, ctx)
    if npc is not None:
        stats = npc.stats
        stats.current_health = min(stats.max_health, stats.current_health + read_int(ctx, node, "Amount", 10))


@action("Action_SetNpcMaxHealth", required=("NpcId",))
def set_npc_max_health(node, ctx):
    npc = _npc(node, ctx)
    if npc is None:
        return
    stats = npc.stats
    stats.max_health = max(1, read_int(ctx, node, "MaxHealth", 100))
    stats.current_health = min(stats.current_health, stats.max_health)


@action("Action_ReviveNpc", required=("NpcId",))
def revive_npc(node, ctx):
    npc = _npc(node, ctx)
    if npc is None:
        return
    percent = read_int(ctx, node, "HealthPercent", 100)
    npc.is_corpse = False
    npc.stats.current_health = max(1, int(npc.stats.max_health * percent / 100))


@action("Action_KillNpc", required=("NpcId",))
def kill_npc(node, ctx):
    npc = _npc(node, ctx)
    if npc is not None:
        _kill(npc)


@action("Action_SetNpcAttack", required=("NpcId",))
def set_npc_attack(node, ctx):
    npc = _npc(node, ctx)
    if npc is not None:
        npc.stats.strength = read_int(ctx, node, "Attack", 10)


@action("Action_SetNpcDefense", required=("NpcId",))
def set_npc_defense(node, ctx):
    npc = _npc(node, ctx)
    if npc is not None:
        npc.stats.dexterity = read_int(ctx, node, "Defense", 5)


def _end_combat(ctx) -> None:
    if ctx.world.in_combat:
        ctx.world.active_combat.is_active = False


@action("Action_EndCombatVictory")
def end_combat_victory(node, ctx):
    _end_combat(ctx)


@action("Action_EndCombatDefeat")
def end_combat_defeat(node, ctx):
    _end_combat(ctx)


@action("Action_ForceFlee")
def force_flee(node, ctx):
    _end_combat(ctx)


# --- abilities ----------------------------------------------------------------


@action("Action_AddAbilityToNpc", required=("NpcId", "AbilityId"))
def add_ability_to_npc(node, ctx):
    npc = _npc(node, ctx)
    ability_id = read_text(ctx, node, "AbilityId")
    if npc is not None and ability_id and not contains_id(npc.ability_ids, ability_id):
        npc.ability_ids.append(ability_id)


@action("Action_RemoveAbilityFromNpc", required=("NpcId", "AbilityId"))
def remove_ability_from_npc(node, ctx):
    npc = _npc(node, ctx)
    if npc is not None:
        remove_id(npc.ability_ids, read_text(ctx, node, "AbilityId"))
