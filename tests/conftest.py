import asyncio
import logging
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from nodescript.config.settings import EngineSettings  # noqa: E402
from nodescript.events.bus import EventBus, HostEvent  # noqa: E402
from nodescript.graph.model import Connection, Node, ScriptGraph  # noqa: E402
from nodescript.runtime.engine import ScriptEngine  # noqa: E402
from nodescript.world.models import (  # noqa: E402
    CombatStats,
    Door,
    GameInfo,
    GameObject,
    InventoryItem,
    Npc,
    ObjectType,
    QuestDefinition,
    Room,
)
from nodescript.world.state import World  # noqa: E402


class Recorder:
    """Collects every host callback the engine makes."""

    def __init__(self, bus: EventBus) -> None:
        self.calls = []
        for event in HostEvent.ALL:
            bus.subscribe(event, self._make(event))

    def _make(self, event):
        def record(**payload):
            self.calls.append((event, payload))

        return record

    def of(self, event):
        return [payload for name, payload in self.calls if name == event]

    @property
    def messages(self):
        return [p["text"] for p in self.of(HostEvent.MESSAGE)]


@pytest.fixture(autouse=True)
def _restore_package_log_level():
    # configure_logging() (CLI tests) sets the package logger level globally
    package_logger = logging.getLogger("nodescript")
    level = package_logger.level
    yield
    package_logger.setLevel(level)


@pytest.fixture
def world() -> World:
    """Small world: a hall with a guard, a chest and a torch; a dark cellar; a yard with a merchant."""
    return World(
        game=GameInfo(id="game-1", title="Test Adventure"),
        current_room_id="hall",
        rooms=[
            Room(id="hall", name="Hall", object_ids=["chest", "torch"], npc_ids=["guard"]),
            Room(id="cellar", name="Cellar", is_interior=True, is_illuminated=False),
            Room(id="yard", name="Yard"),
        ],
        doors=[Door(id="trapdoor", room_id_a="hall", room_id_b="cellar", is_locked=True, key_object_id="key")],
        npcs=[
            Npc(
                id="guard",
                name="Guard",
                room_id="hall",
                stats=CombatStats(max_health=30, current_health=30),
                inventory=[InventoryItem("spear", 1)],
                patrol_route=["hall", "yard", "cellar"],
            ),
            Npc(id="merchant", name="Merchant", room_id="yard", is_shopkeeper=True, money=-1),
        ],
        objects=[
            GameObject(id="key", name="Iron key", type=ObjectType.KEY, can_take=True),
            GameObject(
                id="chest",
                name="Chest",
                room_id="hall",
                is_container=True,
                is_openable=True,
                is_open=False,
                contained_object_ids=["key"],
            ),
            GameObject(id="torch", name="Torch", room_id="hall", can_take=True, is_light_source=True),
            GameObject(id="sword", name="Sword", type=ObjectType.WEAPON, max_durability=50, current_durability=50),
            GameObject(id="spear", name="Spear", type=ObjectType.WEAPON),
        ],
        quest_definitions=[
            QuestDefinition(id="main", name="Escape", objectives=["Find the key", "Open the trapdoor"]),
            QuestDefinition(id="side", name="Errand", is_main_quest=False),
        ],
    )


def _node(node_id, tag, **props):
    return Node(id=node_id, type_tag=tag, properties=props)


def _wire(from_id, from_port, to_id, to_port="Exec"):
    return Connection(from_node_id=from_id, from_port=from_port, to_node_id=to_id, to_port=to_port)


def _chain(*nodes, owner_type="Room", owner_id="hall", name="script", extra=()):
    """Graph whose nodes are linked Exec -> Exec in the order given, plus ``extra`` connections."""
    conns = [_wire(a.id, "Exec", b.id) for a, b in zip(nodes, nodes[1:])]
    return ScriptGraph(
        name=name,
        owner_type=owner_type,
        owner_id=owner_id,
        nodes=list(nodes),
        connections=conns + list(extra),
    )


def _graph(nodes, connections, owner_type="Room", owner_id="hall", name="script"):
    return ScriptGraph(name=name, owner_type=owner_type, owner_id=owner_id, nodes=nodes, connections=connections)


@pytest.fixture
def build():
    return SimpleNamespace(node=_node, wire=_wire, chain=_chain, graph=_graph)


@pytest.fixture
def make_engine():
    """Factory returning ``(engine, recorder)`` with fast, seeded settings."""

    def factory(world, graphs=(), **overrides):
        options = {"random_seed": 7, "delay_scale": 0.0}
        options.update(overrides)
        bus = EventBus()
        recorder = Recorder(bus)
        engine = ScriptEngine(world, graphs, bus=bus, settings=EngineSettings(**options))
        return engine, recorder

    return factory


@pytest.fixture
def fire():
    """Run one trigger to completion on a fresh event loop and return its WalkReport."""

    def run(engine, owner_type, owner_id, event_tag):
        async def go():
            return await engine.trigger_by_name(owner_type, owner_id, event_tag)

        return asyncio.run(go())

    return run


@pytest.fixture
def call():
    """Invoke one node's handler directly and return its NodeResult."""

    def invoke(engine, node, graph=None):
        graph = graph or ScriptGraph.for_single_node(node)
        spec = engine.registry.get(node.type_tag)
        assert spec is not None, f"no handler for {node.type_tag}"

        async def go():
            return await engine.walker.invoke(spec, node, engine.new_context(graph))

        return asyncio.run(go())

    return invoke
