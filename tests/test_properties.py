import asyncio

import pytest

from nodescript.accessor import ACCESSIBLE_PROPERTIES, PropertyAccessor, accessible_properties
from nodescript.graph.model import Node
from nodescript.world.models import Weather

READ_ONLY = {("Game", "Title"), ("Game", "TurnCounter")}

ENTITY_IDS = {"Room": "hall", "Door": "trapdoor", "Npc": "guard", "GameObject": "torch", "Player": "", "Game": ""}


def _sample(current):
    if isinstance(current, bool):
        return not current
    if isinstance(current, int):
        return current + 3 if current < 20 else current - 3
    if isinstance(current, float):
        return current + 1.5
    if isinstance(current, Weather) or current in {w.value for w in Weather}:
        return Weather.STORM.value
    return "changed"


@pytest.mark.parametrize(
    "entity_type,prop",
    [(t, p) for t, props in ACCESSIBLE_PROPERTIES.items() for p in props if (t, p) not in READ_ONLY],
)
def test_every_listed_property_round_trips(world, entity_type, prop):
    accessor = PropertyAccessor(world)
    entity_id = ENTITY_IDS[entity_type]
    value = _sample(accessor.get(entity_type, entity_id, prop))
    assert accessor.set(entity_type, entity_id, prop, value)
    assert accessor.get(entity_type, entity_id, prop) == value


def test_read_only_game_values(world):
    accessor = PropertyAccessor(world)
    assert accessor.get("game", "", "Title") == "Test Adventure"
    assert not accessor.set("Game", "", "Title", "Other")
    assert not accessor.set("Game", "", "TurnCounter", 99)
    assert world.turn_counter == 0


def test_writes_are_coerced_and_clamped(world):
    accessor = PropertyAccessor(world)
    accessor.set("Player", "", "Health", "500")
    accessor.set("Npc", "guard", "Visible", "no")
    accessor.set("Game", "", "GameHour", 40)
    assert world.player.vitals.health == 100
    assert world.npc("guard").visible is False
    assert world.game_hour == 23
    assert not accessor.set("Game", "", "Weather", "Nieve")


def test_unknown_entities_and_properties(world):
    accessor = PropertyAccessor(world)
    assert accessor.get("Npc", "nobody", "Name") is None
    assert accessor.get("Npc", "guard", "name") is None
    assert not accessor.set("Dragon", "x", "Name", "y")
    assert accessible_properties("npc") == ACCESSIBLE_PROPERTIES["Npc"]
    assert accessible_properties("Dragon") == ()


def _run(call, world, make_engine, tag, **props):
    engine, rec = make_engine(world)
    call(engine, Node(type_tag=tag, properties=props))
    return rec


@pytest.mark.parametrize(
    "operation,amount,expected",
    [("Add", 5, 35), ("subtract", 10, 20), ("Multiply", 0.5, 15), ("Divide", 4, 8), ("Divide", 0, 30)],
)
def test_modify_property_on_integers(world, make_engine, call, operation, amount, expected):
    _run(
        call, world, make_engine, "Action_ModifyProperty",
        EntityType="Npc", EntityId="guard", PropertyName="CurrentHealth", Operation=operation, Amount=amount,
    )
    assert world.npc("guard").stats.current_health == expected


def test_modify_property_keeps_floats(world, make_engine, call):
    world.object("torch").volume = 1.0
    _run(
        call, world, make_engine, "Action_ModifyProperty",
        EntityType="GameObject", EntityId="torch", PropertyName="Volume", Operation="Multiply", Amount=2.5,
    )
    assert world.object("torch").volume == 2.5


def test_modify_property_ignores_non_numbers(world, make_engine, call):
    _run(
        call, world, make_engine, "Action_ModifyProperty",
        EntityType="Npc", EntityId="guard", PropertyName="Visible", Operation="Add", Amount=1,
    )
    _run(
        call, world, make_engine, "Action_ModifyProperty",
        EntityType="Npc", EntityId="guard", PropertyName="Name", Operation="Add", Amount=1,
    )
    assert world.npc("guard").visible is True
    assert world.npc("guard").name == "Guard"


def test_set_property_debug_trace(world, make_engine, call):
    engine, rec = make_engine(world, debug_messages=True)
    node = Node(
        type_tag="Action_SetProperty",
        properties={"EntityType": "Room", "EntityId": "hall", "PropertyName": "Description", "Value": "Dusty"},
    )
    call(engine, node)
    assert world.room("hall").description == "Dusty"
    assert rec.messages == ["[Debug] Room.Description of 'hall': '' -> 'Dusty'"]


def test_host_change_notification(world, build, make_engine):
    listener = build.chain(
        build.node("ev", "Event_OnPropertyChanged", EntityType="Game", PropertyName="Weather"),
        build.node("say", "Action_ShowMessage", Message="weather changed"),
        owner_type="Game",
        owner_id="game-1",
    )
    engine, rec = make_engine(world, [listener])

    async def go():
        return await engine.notify_property_changed("Game", "", "weather", Weather.CLEAR, Weather.STORM)

    assert asyncio.run(go()).walks == 1
    assert rec.messages == ["weather changed"]
