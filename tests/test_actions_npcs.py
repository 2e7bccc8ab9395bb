import pytest

from nodescript.events.bus import HostEvent
from nodescript.graph.model import Node
from nodescript.world.models import CombatState, MovementMode


@pytest.fixture
def session(world, make_engine):
    return make_engine(world)


def run(call, session, tag, **props):
    return call(session[0], Node(type_tag=tag, properties=props))


def test_move_npc_keeps_room_lists_in_step(world, session, call):
    run(call, session, "Action_MoveNpc", NpcId="guard", RoomId="yard")
    assert world.npc("guard").room_id == "yard"
    assert world.room("hall").npc_ids == []
    assert world.room("yard").npc_ids == ["guard"]


def test_patrol_step_walks_the_route_back_and_forth(world, session, call):
    rooms = []
    for _ in range(5):
        run(call, session, "Action_PatrolStep", NpcId="guard")
        rooms.append(world.npc("guard").room_id)
    assert rooms == ["yard", "cellar", "yard", "hall", "yard"]


def test_patrol_settings(world, session, call):
    run(call, session, "Action_StartPatrol", NpcId="guard")
    run(call, session, "Action_SetPatrolMode", NpcId="guard", Mode="Time", TurnSpeed=0, TimeInterval=90)
    guard = world.npc("guard")
    assert guard.is_patrolling
    assert guard.patrol_movement_mode is MovementMode.TIME
    assert guard.patrol_speed == 1
    assert guard.patrol_time_interval == 60.0
    guard.patrol_route_index, guard.patrol_direction = 2, -1
    run(call, session, "Action_SetPatrolRoute", NpcId="guard", Route="yard, ,hall")
    assert guard.patrol_route == ["yard", "hall"]
    assert (guard.patrol_route_index, guard.patrol_direction) == (0, 1)
    run(call, session, "Action_StopPatrol", NpcId="guard")
    assert not guard.is_patrolling


def test_follow_settings(world, session, call):
    run(call, session, "Action_FollowPlayer", NpcId="guard", Speed=9)
    guard = world.npc("guard")
    assert guard.is_following_player
    assert guard.follow_speed == 3
    run(call, session, "Action_SetFollowMode", NpcId="guard", Mode="Time", TimeInterval=2.5)
    assert guard.follow_movement_mode is MovementMode.TIME
    assert guard.follow_time_interval == 2.5
    run(call, session, "Action_StopFollowing", NpcId="guard")
    assert not guard.is_following_player


def test_interaction_callbacks(world, session, call):
    _, rec = session
    run(call, session, "Action_StartConversation", NpcId="guard")
    run(call, session, "Action_StartCombat", NpcId="guard")
    run(call, session, "Action_OpenTrade", NpcId="guard")
    run(call, session, "Action_OpenTrade", NpcId="merchant")
    run(call, session, "Action_CloseTrade")
    world.npc("guard").is_corpse = True
    run(call, session, "Action_StartCombat", NpcId="guard")
    assert rec.of(HostEvent.START_CONVERSATION) == [{"npc_id": "guard"}]
    assert rec.of(HostEvent.START_COMBAT) == [{"npc_id": "guard"}]
    assert rec.of(HostEvent.START_TRADE) == [{"npc_id": "merchant"}]


def test_lethal_damage_routes_to_death_port(world, build, make_engine, fire):
    world.npc("guard").is_patrolling = True
    graph = build.graph(
        [
            build.node("start", "Event_OnEnter"),
            build.node("hit", "Action_DamageNpc", NpcId="guard", Amount=20),
            build.node("hit2", "Action_DamageNpc", NpcId="guard", Amount=20),
            build.node("dead", "Action_ShowMessage", Message="The guard falls."),
            build.node("alive", "Action_ShowMessage", Message="Still standing."),
        ],
        [
            build.wire("start", "Exec", "hit"),
            build.wire("hit", "Exec", "alive"),
            build.wire("alive", "Exec", "hit2"),
            build.wire("hit2", "OnDeath", "dead"),
        ],
    )
    engine, rec = make_engine(world, [graph])
    fire(engine, "Room", "hall", "Event_OnEnter")
    guard = world.npc("guard")
    assert rec.messages == ["Still standing.", "The guard falls."]
    assert guard.stats.current_health == 0
    assert guard.is_corpse
    assert not guard.is_patrolling


def test_heal_revive_and_stats(world, session, call):
    guard = world.npc("guard")
    run(call, session, "Action_KillNpc", NpcId="guard")
    assert not guard.is_alive
    run(call, session, "Action_ReviveNpc", NpcId="guard", HealthPercent=50)
    assert guard.is_alive
    assert guard.stats.current_health == 15
    run(call, session, "Action_HealNpc", NpcId="guard", Amount=100)
    assert guard.stats.current_health == 30
    run(call, session, "Action_SetNpcMaxHealth", NpcId="guard", MaxHealth=20)
    assert (guard.stats.max_health, guard.stats.current_health) == (20, 20)
    run(call, session, "Action_SetNpcAttack", NpcId="guard", Attack=12)
    run(call, session, "Action_SetNpcDefense", NpcId="guard", Defense=7)
    assert (guard.stats.strength, guard.stats.dexterity) == (12, 7)


@pytest.mark.parametrize("tag", ["Action_EndCombatVictory", "Action_EndCombatDefeat", "Action_ForceFlee"])
def test_ending_combat(world, session, call, tag):
    world.active_combat = CombatState("guard")
    run(call, session, tag)
    assert not world.in_combat


def test_npc_abilities(world, session, call):
    run(call, session, "Action_AddAbilityToNpc", NpcId="guard", AbilityId="shield-bash")
    run(call, session, "Action_AddAbilityToNpc", NpcId="guard", AbilityId="Shield-Bash")
    assert world.npc("guard").ability_ids == ["shield-bash"]
    run(call, session, "Action_RemoveAbilityFromNpc", NpcId="guard", AbilityId="shield-bash")
    assert world.npc("guard").ability_ids == []
