"""Doors, visibility, containers, object properties and light sources."""

from __future__ import annotations

import logging

from ...utils.math import clamp
from ..common import contains_id, read_flag, read_int, read_text, remove_id
from . import action

logger = logging.getLogger(__name__)

DOOR_OWNER = "Door"


# --- doors --------------------------------------------------------------------


def _door(node, ctx):
    return ctx.world.door(read_text(ctx, node, "DoorId"))


@action("Action_OpenDoor", required=("DoorId",))
def open_door(node, ctx):
    door = _door(node, ctx)
    if door is not None:
        door.is_open = True


@action("Action_CloseDoor", required=("DoorId",))
def close_door(node, ctx):
    door = _door(node, ctx)
    if door is not None:
        door.is_open = False


@action("Action_LockDoor", required=("DoorId",))
async def lock_door(node, ctx):
    door = _door(node, ctx)
    if door is None:
        return
    door.is_locked = True
    await ctx.trigger(DOOR_OWNER, door.id, "Event_OnDoorLock")


@action("Action_UnlockDoor", required=("DoorId",))
async def unlock_door(node, ctx):
    door = _door(node, ctx)
    if door is None:
        return
    door.is_locked = False
    await ctx.trigger(DOOR_OWNER, door.id, "Event_OnDoorUnlock")


@action("Action_SetDoorVisible", required=("DoorId",))
def set_door_visible(node, ctx):
    door = _door(node, ctx)
    if door is not None:
        door.visible = read_flag(ctx, node, "Visible", True)


# --- visibility ---------------------------------------------------------------


@action("Action_SetNpcVisible", required=("NpcId",))
def set_npc_visible(node, ctx):
    npc = ctx.world.npc(read_text(ctx, node, "NpcId"))
    if npc is not None:
        npc.visible = read_flag(ctx, node, "Visible", True)


def _object(node, ctx, key: str = "ObjectId"):
    return ctx.world.object(read_text(ctx, node, key))


@action("Action_SetObjectVisible", required=("ObjectId",))
def set_object_visible(node, ctx):
    obj = _object(node, ctx)
    if obj is not None:
        obj.visible = read_flag(ctx, node, "Visible", True)


@action("Action_SetObjectTakeable", required=("ObjectId",))
def set_object_takeable(node, ctx):
    obj = _object(node, ctx)
    if obj is not None:
        obj.can_take = read_flag(ctx, node, "CanTake", True)


# --- containers ---------------------------------------------------------------


def _container(node, ctx, openable: bool = False):
    obj = _object(node, ctx)
    if obj is None or not obj.is_container:
        return None
    if openable and not obj.is_openable:
        return None
    return obj


@action("Action_OpenContainer", required=("ObjectId",))
def open_container(node, ctx):
    container = _container(node, ctx, openable=True)
    if container is not None:
        container.is_open = True


@action("Action_CloseContainer", required=("ObjectId",))
def close_container(node, ctx):
    container = _container(node, ctx, openable=True)
    if container is not None:
        container.is_open = False


@action("Action_LockContainer", required=("ObjectId",))
def lock_container(node, ctx):
    container = _container(node, ctx)
    if container is not None:
        container.is_locked = True


@action("Action_UnlockContainer", required=("ObjectId",))
def unlock_container(node, ctx):
    container = _container(node, ctx)
    if container is not None:
        container.is_locked = False


@action("Action_SetContentsVisible", required=("ObjectId",))
def set_contents_visible(node, ctx):
    container = _container(node, ctx)
    if container is not None:
        container.contents_visible = read_flag(ctx, node, "Visible", True)


@action("Action_PutObjectInContainer", required=("ObjectId", "ContainerId"))
def put_object_in_container(node, ctx):
    world = ctx.world
    obj = _object(node, ctx)
    container = _object(node, ctx, "ContainerId")
    if obj is None or container is None or not container.is_container:
        return
    remove_id(world.inventory, obj.id)
    room = world.room(obj.room_id)
    if room is not None:
        remove_id(room.object_ids, obj.id)
    obj.room_id = None
    if not contains_id(container.contained_object_ids, obj.id):
        container.contained_object_ids.append(obj.id)


@action("Action_RemoveObjectFromContainer", required=("ObjectId", "ContainerId"))
def remove_object_from_container(node, ctx):
    container = _object(node, ctx, "ContainerId")
    if container is not None and container.is_container:
        remove_id(container.contained_object_ids, read_text(ctx, node, "ObjectId"))


# --- object properties --------------------------------------------------------


@action("Action_SetObjectPrice", required=("ObjectId",))
def set_object_price(node, ctx):
    obj = _object(node, ctx)
    if obj is not None:
        obj.price = read_int(ctx, node, "Price", 0)


@action("Action_SetObjectDurability", required=("ObjectId",))
def set_object_durability(node, ctx):
    obj = _object(node, ctx)
    if obj is None:
        return
    durability = read_int(ctx, node, "Durability", 100)
    if obj.max_durability < 0:
        # unbreakable objects have no upper bound
        obj.current_durability = max(0, durability)
    else:
        obj.current_durability = clamp(durability, 0, obj.max_durability)


@action("Action_MoveObjectToRoom", required=("ObjectId", "RoomId"))
def move_object_to_room(node, ctx):
    world = ctx.world
    obj = _object(node, ctx)
    target = world.room(read_text(ctx, node, "RoomId"))
    if obj is None or target is None:
        return
    remove_id(world.inventory, obj.id)
    old_room = world.room(obj.room_id)
    if old_room is not None:
        remove_id(old_room.object_ids, obj.id)
    obj.room_id = target.id
    if not contains_id(target.object_ids, obj.id):
        target.object_ids.append(obj.id)


# --- light sources ------------------------------------------------------------


@action("Action_SetObjectLit", required=("ObjectId",))
def set_object_lit(node, ctx):
    obj = _object(node, ctx)
    if obj is not None and obj.is_light_source:
        obj.is_lit = read_flag(ctx, node, "IsLit", True)


@action("Action_SetLightTurns", required=("ObjectId",))
def set_light_turns(node, ctx):
    obj = _object(node, ctx)
    if obj is not None and obj.is_light_source:
        # -1 means the light never burns out
        obj.light_turns_remaining = read_int(ctx, node, "Turns", -1)
