"""Player vitals, needs and temporary modifiers.

State values are addressed by name (``"Health"``, ``"Hunger"``...) through
:mod:`nodescript.world.player_state`, which keeps every write inside its
legal range.
"""

from __future__ import annotations

import logging

from ...events.bus import HostEvent
from ...runtime.context import NodeResult
from ...utils.coerce import parse_enum
from ...world import player_state
from ...world.models import ModifierDurationType, TemporaryModifier
from ..common import read_flag, read_int, read_text
from . import action

logger = logging.getLogger(__name__)

DIED_PORT = "PlayerDied"
NOT_ENOUGH_PORT = "NotEnough"
DEATH_MESSAGE = "[¡El jugador ha muerto!]"


def _player_died(ctx) -> NodeResult:
    logger.info("Player died")
    ctx.emit(HostEvent.MESSAGE, text=DEATH_MESSAGE)
    return NodeResult.port(DIED_PORT)


# --- direct state changes -----------------------------------------------------


@action("Action_SetPlayerState")
def set_player_state(node, ctx):
    state = read_text(ctx, node, "StateType", "Health")
    if not player_state.set_state(ctx.world.player, state, read_int(ctx, node, "Value", 100)):
        logger.debug("Unknown player state %r on node %s", state, node.id)


@action("Action_ModifyPlayerState")
def modify_player_state(node, ctx):
    state = read_text(ctx, node, "StateType", "Health")
    if player_state.canonical_name(state):
        player_state.modify_state(ctx.world.player, state, read_int(ctx, node, "Amount", 10))


@action("Action_HealPlayer")
def heal_player(node, ctx):
    vitals = ctx.world.player.vitals
    vitals.health = min(vitals.max_health, vitals.health + read_int(ctx, node, "Amount", 25))


@action("Action_DamagePlayer")
def damage_player(node, ctx):
    vitals = ctx.world.player.vitals
    vitals.health = max(0, vitals.health - read_int(ctx, node, "Amount", 10))
    if vitals.health == 0:
        return _player_died(ctx)
    return None


@action("Action_RestoreMana")
def restore_mana(node, ctx):
    vitals = ctx.world.player.vitals
    vitals.mana = min(vitals.max_mana, vitals.mana + read_int(ctx, node, "Amount", 25))


@action("Action_ConsumeMana")
def consume_mana(node, ctx):
    vitals = ctx.world.player.vitals
    amount = read_int(ctx, node, "Amount", 10)
    if vitals.mana < amount:
        return NodeResult.port(NOT_ENOUGH_PORT)
    vitals.mana -= amount
    return None


@action("Action_SetPlayerMaxHealth")
def set_player_max_health(node, ctx):
    vitals = ctx.world.player.vitals
    vitals.max_health = max(1, read_int(ctx, node, "MaxHealth", 100))
    vitals.health = min(vitals.health, vitals.max_health)


@action("Action_FeedPlayer")
def feed_player(node, ctx):
    vitals = ctx.world.player.vitals
    vitals.hunger = max(0, vitals.hunger - read_int(ctx, node, "Amount", 25))


@action("Action_HydratePlayer")
def hydrate_player(node, ctx):
    vitals = ctx.world.player.vitals
    vitals.thirst = max(0, vitals.thirst - read_int(ctx, node, "Amount", 25))


@action("Action_RestPlayer")
def rest_player(node, ctx):
    vitals = ctx.world.player.vitals
    vitals.energy = min(100, vitals.energy + read_int(ctx, node, "Amount", 50))


@action("Action_RestoreAllStats")
def restore_all_stats(node, ctx):
    player_state.restore_all(ctx.world.player)


# --- modifiers ----------------------------------------------------------------


@action("Action_ApplyModifier", required=("ModifierName",))
def apply_modifier(node, ctx):
    name = read_text(ctx, node, "ModifierName")
    state = player_state.canonical_name(read_text(ctx, node, "StateType", "Health"))
    if not name or not state:
        return
    modifier = TemporaryModifier(
        name=name,
        state_type=state,
        amount=read_int(ctx, node, "Amount", 5),
        duration_type=parse_enum(
            ModifierDurationType, read_text(ctx, node, "DurationType", "Turns"), ModifierDurationType.TURNS
        ),
        remaining_duration=read_int(ctx, node, "Duration", 5),
        is_recurring=read_flag(ctx, node, "IsRecurring", True),
    )
    ctx.world.active_modifiers.append(modifier)
    ctx.debug(
        f"[Debug] Modifier '{name}' applied: {state} {modifier.amount:+d}"
        f" ({modifier.duration_type.value} {modifier.remaining_duration})"
    )


@action("Action_RemoveModifier", required=("ModifierName",))
def remove_modifier(node, ctx):
    wanted = read_text(ctx, node, "ModifierName").casefold()
    modifiers = ctx.world.active_modifiers
    modifiers[:] = [m for m in modifiers if m.name.casefold() != wanted]


@action("Action_RemoveModifiersByState")
def remove_modifiers_by_state(node, ctx):
    state = player_state.canonical_name(read_text(ctx, node, "StateType", "Health"))
    modifiers = ctx.world.active_modifiers
    modifiers[:] = [m for m in modifiers if m.state_type != state]


@action("Action_RemoveAllModifiers")
def remove_all_modifiers(node, ctx):
    ctx.world.active_modifiers.clear()


@action("Action_ProcessModifiers")
def process_modifiers(node, ctx):
    """Advance every active modifier by one tick.

    Expired modifiers are dropped first; recurring ones then apply their
    amount, and turn-based ones count down.
    """
    world = ctx.world
    player = world.player
    expired = [m for m in world.active_modifiers if m.is_expired()]
    for modifier in expired:
        world.active_modifiers.remove(modifier)
        logger.debug("Modifier %s expired", modifier.name)

    died = False
    for modifier in world.active_modifiers:
        if modifier.is_recurring:
            value = player_state.modify_state(player, modifier.state_type, modifier.amount)
            if modifier.state_type == "Health" and value <= 0:
                died = True
        if modifier.duration_type is ModifierDurationType.TURNS:
            modifier.remaining_duration -= 1

    if died:
        return _player_died(ctx)
    return None
