import pytest

from nodescript.graph.model import Node


@pytest.fixture
def engine(world, make_engine):
    return make_engine(world)[0]


def run(call, engine, tag, **props):
    return call(engine, Node(type_tag=tag, properties=props))


def test_doors_open_close_and_visibility(world, engine, call):
    run(call, engine, "Action_OpenDoor", DoorId="TRAPDOOR")
    assert world.door("trapdoor").is_open
    run(call, engine, "Action_CloseDoor", DoorId="trapdoor")
    run(call, engine, "Action_SetDoorVisible", DoorId="trapdoor", Visible=False)
    door = world.door("trapdoor")
    assert not door.is_open
    assert not door.visible


def test_unlocking_a_door_raises_its_event(world, build, make_engine, fire):
    listener = build.chain(
        build.node("ev", "Event_OnDoorUnlock"),
        build.node("say", "Action_ShowMessage", Message="click"),
        owner_type="Door",
        owner_id="trapdoor",
    )
    script = build.chain(
        build.node("start", "Event_OnEnter"),
        build.node("unlock", "Action_UnlockDoor", DoorId="trapdoor"),
        build.node("after", "Action_ShowMessage", Message="after"),
    )
    engine, rec = make_engine(world, [script, listener])
    fire(engine, "Room", "hall", "Event_OnEnter")
    assert not world.door("trapdoor").is_locked
    # the door's own script runs inline before the walk continues
    assert rec.messages == ["click", "after"]


def test_visibility_and_takeable(world, engine, call):
    run(call, engine, "Action_SetNpcVisible", NpcId="guard", Visible="no")
    run(call, engine, "Action_SetObjectVisible", ObjectId="chest", Visible=False)
    run(call, engine, "Action_SetObjectTakeable", ObjectId="torch", CanTake=False)
    assert not world.npc("guard").visible
    assert not world.object("chest").visible
    assert not world.object("torch").can_take


def test_container_state_needs_a_container(world, engine, call):
    run(call, engine, "Action_OpenContainer", ObjectId="chest")
    run(call, engine, "Action_LockContainer", ObjectId="chest")
    run(call, engine, "Action_SetContentsVisible", ObjectId="chest")
    chest = world.object("chest")
    assert chest.is_open and chest.is_locked and chest.contents_visible
    run(call, engine, "Action_LockContainer", ObjectId="torch")
    assert not world.object("torch").is_locked


def test_only_openable_containers_open(world, engine, call):
    chest = world.object("chest")
    chest.is_openable = False
    run(call, engine, "Action_OpenContainer", ObjectId="chest")
    assert not chest.is_open


def test_put_and_remove_from_container(world, engine, call):
    world.inventory.append("torch")
    run(call, engine, "Action_PutObjectInContainer", ObjectId="torch", ContainerId="chest")
    chest = world.object("chest")
    assert chest.contained_object_ids == ["key", "torch"]
    assert world.inventory == []
    assert "torch" not in world.room("hall").object_ids
    run(call, engine, "Action_RemoveObjectFromContainer", ObjectId="KEY", ContainerId="chest")
    assert chest.contained_object_ids == ["torch"]


def test_price_and_durability(world, engine, call):
    run(call, engine, "Action_SetObjectPrice", ObjectId="sword", Price="120")
    run(call, engine, "Action_SetObjectDurability", ObjectId="sword", Durability=80)
    sword = world.object("sword")
    assert sword.price == 120
    assert sword.current_durability == 50
    run(call, engine, "Action_SetObjectDurability", ObjectId="spear", Durability=80)
    assert world.object("spear").current_durability == 80
    run(call, engine, "Action_SetObjectDurability", ObjectId="spear", Durability=-5)
    assert world.object("spear").current_durability == 0


def test_move_object_to_room(world, engine, call):
    world.inventory.append("torch")
    run(call, engine, "Action_MoveObjectToRoom", ObjectId="torch", RoomId="yard")
    torch = world.object("torch")
    assert torch.room_id == "yard"
    assert world.room("yard").object_ids == ["torch"]
    assert "torch" not in world.room("hall").object_ids
    assert world.inventory == []


def test_light_sources_only(world, engine, call):
    run(call, engine, "Action_SetObjectLit", ObjectId="torch")
    run(call, engine, "Action_SetLightTurns", ObjectId="torch", Turns=12)
    run(call, engine, "Action_SetObjectLit", ObjectId="sword")
    torch = world.object("torch")
    assert torch.is_lit
    assert torch.light_turns_remaining == 12
    assert not world.object("sword").is_lit
