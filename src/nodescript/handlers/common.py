"""Small helpers shared by the handler families."""

from __future__ import annotations

import logging
from typing import List, Optional

from ..graph.model import same_name
from ..world.models import InventoryItem, Npc, Player
from ..world.state import World

logger = logging.getLogger(__name__)

SLOTS = ("RightHand", "LeftHand", "Torso", "Head")
_SLOT_ATTRS = {
    "RightHand": "equipped_right_hand_id",
    "LeftHand": "equipped_left_hand_id",
    "Torso": "equipped_torso_id",
    "Head": "equipped_head_id",
}

GAME_OWNER = "Game"


def slot_attribute(slot: str) -> Optional[str]:
    """Attribute holding the object equipped in ``slot`` (player and npc share names)."""
    return _SLOT_ATTRS.get(slot)


def equipped_in(holder, slot: str) -> Optional[str]:
    attr = slot_attribute(slot)
    return getattr(holder, attr) if attr else None


def is_equipped(holder, object_id: str, slot: str = "Any") -> bool:
    if not object_id:
        return False
    slots = SLOTS if slot == "Any" else (slot,)
    return any(same_name(equipped_in(holder, s), object_id) for s in slots)


def game_owner_id(world: World) -> str:
    """Owner id used for game-wide events such as money changes."""
    return world.game.id if world.game and world.game.id else "game"


def remove_id(ids: List[str], item_id: str) -> None:
    """Remove every case-insensitive occurrence of ``item_id`` in place."""
    ids[:] = [i for i in ids if not same_name(i, item_id)]


def contains_id(ids: List[str], item_id: str) -> bool:
    return any(same_name(i, item_id) for i in ids)


def place_npc(world: World, npc: Npc, room_id: str) -> None:
    """Move ``npc`` to ``room_id``, keeping room npc lists in step."""
    if npc.room_id:
        old_room = world.room(npc.room_id)
        if old_room is not None:
            remove_id(old_room.npc_ids, npc.id)
    npc.room_id = room_id
    new_room = world.room(room_id)
    if new_room is not None and npc.id and not contains_id(new_room.npc_ids, npc.id):
        new_room.npc_ids.append(npc.id)


def npc_inventory_item(npc: Npc, object_id: str) -> Optional[InventoryItem]:
    for item in npc.inventory:
        if same_name(item.object_id, object_id):
            return item
    return None


def add_to_npc_inventory(npc: Npc, object_id: str) -> None:
    item = npc_inventory_item(npc, object_id)
    if item is not None:
        item.quantity += 1
    else:
        npc.inventory.append(InventoryItem(object_id=object_id, quantity=1))


def take_from_npc_inventory(npc: Npc, object_id: str) -> None:
    item = npc_inventory_item(npc, object_id)
    if item is None:
        return
    if item.quantity > 1:
        item.quantity -= 1
    else:
        npc.inventory.remove(item)


def player_alive(player: Player) -> bool:
    return player.vitals.health > 0


def read_text(ctx, node, key: str, default: str = "") -> str:
    return ctx.read_input(node, key, str, default)


def read_int(ctx, node, key: str, default: int = 0) -> int:
    return ctx.read_input(node, key, int, default)


def read_float(ctx, node, key: str, default: float = 0.0) -> float:
    return ctx.read_input(node, key, float, default)


def read_flag(ctx, node, key: str, default: bool = False) -> bool:
    return ctx.read_input(node, key, bool, default)
