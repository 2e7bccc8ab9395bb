"""Messages, inventory, rooms, game clock, flags and counters."""

from __future__ import annotations

import logging

from ...events.bus import HostEvent
from ...utils.coerce import parse_enum
from ...utils.math import clamp
from ...world.models import NeedRate, Weather
from ..common import contains_id, remove_id, read_flag, read_int, read_text
from . import action

logger = logging.getLogger(__name__)


# --- messages and media -------------------------------------------------------


@action("Action_ShowMessage", required=("Message",))
def show_message(node, ctx):
    text = read_text(ctx, node, "Message")
    if text:
        ctx.emit(HostEvent.MESSAGE, text=text)


@action("Action_PlaySound", required=("SoundId",))
def play_sound(node, ctx):
    sound_id = read_text(ctx, node, "SoundId")
    if sound_id:
        ctx.emit(HostEvent.PLAY_SOUND, sound_id=sound_id)


@action("Action_SetRoomMusic", required=("RoomId",))
def set_room_music(node, ctx):
    room = ctx.world.room(read_text(ctx, node, "RoomId"))
    if room is None:
        return
    room.music_id = read_text(ctx, node, "MusicId") or None
    ctx.emit(HostEvent.ROOM_MUSIC_CHANGED, room_id=room.id, music_id=room.music_id)


# --- inventory ----------------------------------------------------------------


@action("Action_GiveItem", required=("ObjectId",))
def give_item(node, ctx):
    object_id = read_text(ctx, node, "ObjectId")
    world = ctx.world
    if not object_id or world.has_item(object_id):
        return
    world.inventory.append(object_id)
    obj = world.object(object_id)
    if obj is not None:
        room = world.room(obj.room_id)
        if room is not None:
            remove_id(room.object_ids, object_id)
        obj.room_id = None
    ctx.debug(f"[Debug] GiveItem: {object_id} added to inventory")


@action("Action_RemoveItem", required=("ObjectId",))
def remove_item(node, ctx):
    remove_id(ctx.world.inventory, read_text(ctx, node, "ObjectId"))


# --- player position and rooms ------------------------------------------------


@action("Action_TeleportPlayer", required=("RoomId",))
def teleport_player(node, ctx):
    room_id = read_text(ctx, node, "RoomId")
    if not room_id:
        return
    ctx.world.current_room_id = room_id
    ctx.emit(HostEvent.PLAYER_TELEPORTED, room_id=room_id)


@action("Action_SetRoomIllumination", required=("RoomId",))
def set_room_illumination(node, ctx):
    room = ctx.world.room(read_text(ctx, node, "RoomId"))
    if room is not None:
        room.is_illuminated = read_flag(ctx, node, "IsIlluminated", True)


@action("Action_SetRoomDescription", required=("RoomId",))
def set_room_description(node, ctx):
    room = ctx.world.room(read_text(ctx, node, "RoomId"))
    if room is not None:
        room.description = read_text(ctx, node, "Description")


# --- game clock and weather ---------------------------------------------------


@action("Action_SetWeather")
def set_weather(node, ctx):
    weather = parse_enum(Weather, read_text(ctx, node, "Weather", Weather.CLEAR.value))
    if weather is None:
        logger.debug("Ignoring unknown weather %r on node %s", node.raw("Weather"), node.id)
        return
    ctx.world.weather = weather


@action("Action_SetGameHour")
def set_game_hour(node, ctx):
    ctx.world.set_game_time(hour=clamp(read_int(ctx, node, "Hour", 12), 0, 23))


@action("Action_AdvanceTime")
def advance_time(node, ctx):
    ctx.world.advance_hours(read_int(ctx, node, "Hours", 1))


NEED_RATE_ATTRS = {"hunger": "hunger_rate", "thirst": "thirst_rate", "sleep": "sleep_rate"}


@action("Action_SetNeedRate")
def set_need_rate(node, ctx):
    attr = NEED_RATE_ATTRS.get(read_text(ctx, node, "NeedType", "Hunger").casefold())
    rate = parse_enum(NeedRate, read_text(ctx, node, "Rate", NeedRate.NORMAL.value))
    if attr is None or rate is None:
        return
    setattr(ctx.world.game, attr, rate)


# --- flags and counters -------------------------------------------------------


@action("Action_SetFlag", required=("FlagName",))
def set_flag(node, ctx):
    name = read_text(ctx, node, "FlagName")
    if name:
        ctx.world.set_flag(name, read_flag(ctx, node, "Value", True))


@action("Action_SetCounter", required=("CounterName",))
def set_counter(node, ctx):
    name = read_text(ctx, node, "CounterName")
    if name:
        ctx.world.set_counter(name, read_int(ctx, node, "Value", 0))


@action("Action_IncrementCounter", required=("CounterName",))
def increment_counter(node, ctx):
    name = read_text(ctx, node, "CounterName")
    if name:
        world = ctx.world
        world.set_counter(name, world.get_counter(name) + read_int(ctx, node, "Amount", 1))


# --- abilities ----------------------------------------------------------------


@action("Action_AddAbility", required=("AbilityId",))
def add_ability(node, ctx):
    ability_id = read_text(ctx, node, "AbilityId")
    abilities = ctx.world.player.ability_ids
    if ability_id and not contains_id(abilities, ability_id):
        abilities.append(ability_id)


@action("Action_RemoveAbility", required=("AbilityId",))
def remove_ability(node, ctx):
    remove_id(ctx.world.player.ability_ids, read_text(ctx, node, "AbilityId"))
