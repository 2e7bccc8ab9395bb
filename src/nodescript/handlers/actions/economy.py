"""Money and shop stock.

Gaining or losing money raises the game-wide money events inline, so a
graph listening on ``Event_OnMoneyGained`` sees the new balance.
"""

from __future__ import annotations

import logging

from ...graph.model import same_name
from ...runtime.context import NodeResult
from ...world.models import ShopItem
from ..common import (
    GAME_OWNER,
    add_to_npc_inventory,
    game_owner_id,
    read_float,
    read_int,
    read_text,
    take_from_npc_inventory,
)
from . import action

logger = logging.getLogger(__name__)

INSUFFICIENT_PORT = "OnInsufficient"


async def _money_gained(ctx) -> None:
    await ctx.trigger(GAME_OWNER, game_owner_id(ctx.world), "Event_OnMoneyGained")


async def _money_lost(ctx) -> None:
    await ctx.trigger(GAME_OWNER, game_owner_id(ctx.world), "Event_OnMoneyLost")


# --- player money -------------------------------------------------------------


@action("Action_AddMoney")
async def add_money(node, ctx):
    amount = read_int(ctx, node, "Amount", 0)
    ctx.world.player.money += amount
    if amount > 0:
        await _money_gained(ctx)


@action("Action_RemoveMoney")
async def remove_money(node, ctx):
    player = ctx.world.player
    before = player.money
    player.money = max(0, before - read_int(ctx, node, "Amount", 0))
    if player.money < before:
        await _money_lost(ctx)


@action("Action_AddPlayerMoney")
async def add_player_money(node, ctx):
    amount = read_int(ctx, node, "Amount", 100)
    ctx.world.player.money += amount
    if amount > 0:
        await _money_gained(ctx)


@action("Action_RemovePlayerMoney")
async def remove_player_money(node, ctx):
    """Pay ``Amount``; routes to ``OnInsufficient`` and keeps the money when short."""
    player = ctx.world.player
    amount = read_int(ctx, node, "Amount", 100)
    if player.money < amount:
        return NodeResult.port(INSUFFICIENT_PORT)
    player.money -= amount
    await _money_lost(ctx)
    return None


# --- npc money and stock ------------------------------------------------------


def _npc(node, ctx):
    return ctx.world.npc(read_text(ctx, node, "NpcId"))


@action("Action_SetNpcMoney", required=("NpcId",))
def set_npc_money(node, ctx):
    npc = _npc(node, ctx)
    if npc is not None:
        # -1 gives the NPC unlimited money
        npc.money = read_int(ctx, node, "Money", -1)


@action("Action_AddNpcItem", required=("NpcId", "ObjectId"))
def add_npc_item(node, ctx):
    npc = _npc(node, ctx)
    object_id = read_text(ctx, node, "ObjectId")
    if npc is None or not object_id:
        return
    if any(same_name(item.object_id, object_id) for item in npc.shop_inventory):
        return
    npc.shop_inventory.append(ShopItem(object_id=object_id, quantity=read_int(ctx, node, "Quantity", -1)))


@action("Action_RemoveNpcItem", required=("NpcId", "ObjectId"))
def remove_npc_item(node, ctx):
    npc = _npc(node, ctx)
    if npc is None:
        return
    object_id = read_text(ctx, node, "ObjectId")
    npc.shop_inventory = [item for item in npc.shop_inventory if not same_name(item.object_id, object_id)]


@action("Action_SetBuyMultiplier", required=("NpcId",))
def set_buy_multiplier(node, ctx):
    npc = _npc(node, ctx)
    if npc is not None:
        npc.buy_price_multiplier = read_float(ctx, node, "Multiplier", 0.5)


@action("Action_SetSellMultiplier", required=("NpcId",))
def set_sell_multiplier(node, ctx):
    npc = _npc(node, ctx)
    if npc is not None:
        npc.sell_price_multiplier = read_float(ctx, node, "Multiplier", 1.0)


@action("Action_AddItemToNpcInventory", required=("NpcId", "ObjectId"))
def add_item_to_npc_inventory(node, ctx):
    npc = _npc(node, ctx)
    object_id = read_text(ctx, node, "ObjectId")
    if npc is not None and object_id:
        add_to_npc_inventory(npc, object_id)


@action("Action_RemoveItemFromNpcInventory", required=("NpcId", "ObjectId"))
def remove_item_from_npc_inventory(node, ctx):
    npc = _npc(node, ctx)
    if npc is not None:
        take_from_npc_inventory(npc, read_text(ctx, node, "ObjectId"))
