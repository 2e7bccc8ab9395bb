import json
from datetime import datetime
from pathlib import Path

import pytest

from nodescript.world.loader import WorldLoadError, load_world, world_from_dict
from nodescript.world.models import MovementMode, QuestStatus, Weather


SNAPSHOT = {
    "Game": {"Id": "adv-1", "Title": "Crypt", "StartHour": 21, "StartWeather": "Tormenta"},
    "CurrentRoomId": "crypt",
    "Rooms": [{"Id": "crypt", "Name": "Crypt", "IsInterior": "true", "IsIlluminated": False, "Extra": 1}],
    "npcs": [
        {
            "id": "ghoul",
            "room_id": "crypt",
            "stats": {"max_health": 12, "current_health": "12"},
            "inventory": [{"object_id": "bone", "quantity": 2}],
            "patrol_movement_mode": "TIME",
        }
    ],
    "Objects": [{"Id": "bone", "Price": "3", "Volume": 1}],
    "QuestDefinitions": [{"Id": "escape", "Name": "Escape", "Objectives": ["Run"]}],
    "Quests": {"escape": {"Status": "InProgress"}},
    "Flags": {"lit": True},
    "Inventory": ["bone"],
}


def test_snapshot_accepts_both_key_styles():
    world = world_from_dict(SNAPSHOT)
    assert world.game.title == "Crypt"
    room = world.room("crypt")
    assert room.is_interior is True and room.is_illuminated is False
    ghoul = world.npc("ghoul")
    assert ghoul.stats.current_health == 12
    assert ghoul.inventory[0].quantity == 2
    assert ghoul.patrol_movement_mode is MovementMode.TIME
    bone = world.object("bone")
    assert bone.price == 3
    assert bone.volume == 1.0
    assert world.get_flag("lit")
    assert world.inventory == ["bone"]


def test_quest_states_take_their_id_from_the_key():
    world = world_from_dict(SNAPSHOT)
    state = world.quest("escape")
    assert state.quest_id == "escape"
    assert state.status is QuestStatus.IN_PROGRESS


def test_clock_and_weather_default_to_game_settings():
    world = world_from_dict(SNAPSHOT)
    assert world.game_hour == 21
    assert world.weather is Weather.STORM


def test_explicit_clock_and_weather_win():
    data = dict(SNAPSHOT, GameTime="2001-05-04T08:30:00", Weather="Nublado")
    world = world_from_dict(data)
    assert world.game_time == datetime(2001, 5, 4, 8, 30)
    assert world.weather is Weather.CLOUDY


@pytest.mark.parametrize(
    "data",
    [
        {"Weather": "Nieve"},
        {"Rooms": [{"Id": "r", "IsInterior": "maybe"}]},
        {"Objects": [{"Id": "o", "Price": "cheap"}]},
        {"Rooms": ["not an object"]},
        ["not", "an", "object"],
    ],
)
def test_bad_snapshots_raise(data):
    with pytest.raises(WorldLoadError):
        world_from_dict(data)


def test_load_world_file(tmp_path: Path):
    path = tmp_path / "world.json"
    path.write_text(json.dumps(SNAPSHOT), encoding="utf-8")
    assert load_world(path).current_room_id == "crypt"

    broken = tmp_path / "broken.json"
    broken.write_text("{", encoding="utf-8")
    with pytest.raises(WorldLoadError):
        load_world(broken)
    with pytest.raises(WorldLoadError):
        load_world(tmp_path / "missing.json")
