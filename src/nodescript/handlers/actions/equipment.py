"""Equipping and unequipping items for the player and NPCs."""

from __future__ import annotations

import logging

from ..common import (
    add_to_npc_inventory,
    read_text,
    remove_id,
    slot_attribute,
    take_from_npc_inventory,
)
from . import action

logger = logging.getLogger(__name__)


def _slot(node, ctx):
    slot = read_text(ctx, node, "Slot", "RightHand")
    attr = slot_attribute(slot)
    if attr is None:
        logger.debug("Unknown equipment slot %r on node %s", slot, node.id)
    return attr


@action("Action_EquipPlayerItem", required=("ObjectId",))
def equip_player_item(node, ctx):
    object_id = read_text(ctx, node, "ObjectId")
    attr = _slot(node, ctx)
    if not object_id or attr is None:
        return
    player = ctx.world.player
    setattr(player, attr, object_id)
    remove_id(ctx.world.inventory, object_id)


@action("Action_UnequipPlayerSlot")
def unequip_player_slot(node, ctx):
    attr = _slot(node, ctx)
    if attr is None:
        return
    world = ctx.world
    object_id = getattr(world.player, attr)
    if object_id and not world.has_item(object_id):
        world.inventory.append(object_id)
    setattr(world.player, attr, None)


@action("Action_EquipNpcItem", required=("NpcId", "ObjectId"))
def equip_npc_item(node, ctx):
    npc = ctx.world.npc(read_text(ctx, node, "NpcId"))
    object_id = read_text(ctx, node, "ObjectId")
    attr = _slot(node, ctx)
    if npc is None or not object_id or attr is None:
        return
    setattr(npc, attr, object_id)
    take_from_npc_inventory(npc, object_id)


@action("Action_UnequipNpcSlot", required=("NpcId",))
def unequip_npc_slot(node, ctx):
    npc = ctx.world.npc(read_text(ctx, node, "NpcId"))
    attr = _slot(node, ctx)
    if npc is None or attr is None:
        return
    object_id = getattr(npc, attr)
    if object_id:
        add_to_npc_inventory(npc, object_id)
    setattr(npc, attr, None)
