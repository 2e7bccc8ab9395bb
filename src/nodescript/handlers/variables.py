"""Variable nodes: read world state onto a data output port.

Getters never choose an execution port. Most publish on ``"Value"``; the
few the authoring tool gives a named port (``Hour``, ``Money``, ``RoomId``,
``Weather``) publish on that port as well.
"""

from __future__ import annotations

from ..accessor import PropertyAccessor
from ..graph.model import NodeCategory
from ..runtime.context import VALUE_PORT, NodeResult
from ..runtime.registry import handler
from ..utils.coerce import parse_enum
from ..world import player_state
from ..world.models import NeedRate
from .conditions import has_active_modifier


def getter(tag: str, required=()):
    return handler(tag, NodeCategory.VARIABLE, required=required, pure=True)


def _named(port: str, value) -> NodeResult:
    return NodeResult(outputs={port: value, VALUE_PORT: value})


@getter("Variable_GetFlag", required=("FlagName",))
def get_flag(node, ctx):
    return NodeResult.value(ctx.world.get_flag(node.text("FlagName")))


@getter("Variable_GetCounter", required=("CounterName",))
def get_counter(node, ctx):
    return NodeResult.value(ctx.world.get_counter(node.text("CounterName")))


@getter("Variable_GetCurrentRoom")
def get_current_room(node, ctx):
    return _named("RoomId", ctx.world.current_room_id)


@getter("Variable_GetGameHour")
def get_game_hour(node, ctx):
    return _named("Hour", ctx.world.game_hour)


@getter("Variable_GetPlayerMoney")
def get_player_money(node, ctx):
    return _named("Money", ctx.world.player.money)


@getter("Variable_GetCurrentWeather")
def get_current_weather(node, ctx):
    return _named("Weather", ctx.world.weather.value)


def _state_getter(state: str):
    def read(node, ctx):
        return NodeResult.value(player_state.get_state(ctx.world.player, state))

    read.__name__ = f"get_player_{state.lower()}"
    return read


for _state in player_state.VITALS + player_state.ATTRIBUTES:
    getter(f"Variable_GetPlayer{_state}")(_state_getter(_state))


@getter("Variable_GetPlayerState")
def get_player_state(node, ctx):
    state = ctx.read_input(node, "StateType", str, "Health")
    return NodeResult.value(player_state.get_state(ctx.world.player, state))


@getter("Variable_GetActiveModifiersCount")
def get_active_modifiers_count(node, ctx):
    return NodeResult.value(sum(1 for m in ctx.world.active_modifiers if not m.is_expired()))


@getter("Variable_HasModifier", required=("ModifierName",))
def variable_has_modifier(node, ctx):
    return NodeResult.value(has_active_modifier(ctx.world, node.text("ModifierName")))


NEED_RATE_ATTRS = {"Hunger": "hunger_rate", "Thirst": "thirst_rate", "Sleep": "sleep_rate"}


@getter("Variable_GetNeedRate")
def get_need_rate(node, ctx):
    attr = NEED_RATE_ATTRS.get(node.text("NeedType", "Hunger"))
    rate = getattr(ctx.world.game, attr) if attr else NeedRate.NORMAL
    rate = parse_enum(NeedRate, rate, NeedRate.NORMAL)
    # published as the rate's index: Low=0, Normal=1, High=2
    return NodeResult.value(list(NeedRate).index(rate))


@getter("Variable_GetProperty", required=("EntityType", "PropertyName"))
def get_property(node, ctx):
    value = PropertyAccessor(ctx.world).get(
        ctx.read_input(node, "EntityType", str, ""),
        ctx.read_input(node, "EntityId", str, ""),
        ctx.read_input(node, "PropertyName", str, ""),
    )
    return NodeResult.value(value)


@getter("Variable_ConstantInt")
def constant_int(node, ctx):
    return NodeResult.value(node.integer("Value", 0))


@getter("Variable_ConstantBool")
def constant_bool(node, ctx):
    return NodeResult.value(node.flag("Value", False))
