from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional, Set, Tuple

from ..exceptions import WalkAborted
from ..graph.model import Node, ScriptGraph
from ..utils.coerce import coerce_to

if TYPE_CHECKING:  # pragma: no cover
    from ..world.state import World
    from .engine import ScriptEngine

logger = logging.getLogger(__name__)

TRUE_PORT = "True"
FALSE_PORT = "False"
VALUE_PORT = "Value"


@dataclass
class NodeResult:
    """What a handler did: the port to continue on and any values it produced.

    ``next_port`` of None means the default "Exec" port; ``halt`` ends this
    branch of the walk regardless of wiring.
    """

    next_port: Optional[str] = None
    outputs: Dict[str, Any] = field(default_factory=dict)
    halt: bool = False

    @classmethod
    def branch(cls, condition: bool) -> "NodeResult":
        return cls(next_port=TRUE_PORT if condition else FALSE_PORT)

    @classmethod
    def port(cls, name: str) -> "NodeResult":
        return cls(next_port=name)

    @classmethod
    def value(cls, value: Any, port: str = VALUE_PORT) -> "NodeResult":
        return cls(outputs={port: value})

    @classmethod
    def stop(cls) -> "NodeResult":
        return cls(halt=True)


def _key(node_id: str, port: str) -> Tuple[str, str]:
    return node_id.casefold(), port.casefold()


class ExecutionContext:
    """Per-walk scratch state: graph and world refs, output cache and guards.

    A context lives for exactly one top-level walk. Nested triggers raised by
    handlers get their own context.
    """

    def __init__(self, graph: ScriptGraph, engine: "ScriptEngine") -> None:
        self.graph = graph
        self.engine = engine
        self.outputs: Dict[Tuple[str, str], Any] = {}
        self.steps = 0
        self.depth = 0
        self.input_port: Optional[str] = None
        self._resolving: Set[str] = set()

    @property
    def world(self) -> "World":
        return self.engine.world

    @property
    def rng(self):
        return self.engine.rng

    @property
    def settings(self):
        return self.engine.settings

    # --- outputs --------------------------------------------------------

    def set_output(self, node_id: str, port: str, value: Any) -> None:
        self.outputs[_key(node_id, port)] = value

    def get_output(self, node_id: str, port: str, default: Any = None) -> Any:
        return self.outputs.get(_key(node_id, port), default)

    def has_output(self, node_id: str, port: str) -> bool:
        return _key(node_id, port) in self.outputs

    # --- guards ---------------------------------------------------------

    def count_step(self, node: Node) -> None:
        self.steps += 1
        if self.steps > self.settings.max_walk_steps:
            raise WalkAborted(
                f"more than {self.settings.max_walk_steps} node steps in graph '{self.graph.name or self.graph.id}'"
                " (cycle?)",
                node.id,
            )

    # --- host / router --------------------------------------------------

    def emit(self, event: str, **payload: Any) -> None:
        self.engine.bus.emit(event, **payload)

    def debug(self, message: str) -> None:
        self.engine.debug(message)

    async def trigger(self, owner_type: str, owner_id: str, event_tag: str) -> int:
        """Run matching graphs inline, inside the current walk."""
        return await self.engine.router.trigger_by_name(owner_type, owner_id, event_tag)

    async def property_changed(self, entity_type: str, entity_id: str, prop: str, old: Any, new: Any) -> int:
        return await self.engine.router.property_changed(entity_type, entity_id, prop, old, new)

    async def run_port(self, node: Node, port: str) -> bool:
        """Walk whatever is wired to ``(node, port)`` as a nested sub-walk.

        Returns False when nothing usable is connected.
        """
        conn = self.graph.connection_from(node.id, port)
        if conn is None:
            return False
        target = self.graph.node(conn.to_node_id)
        if target is None:
            logger.debug("Port %s.%s points at missing node %s", node.id, port, conn.to_node_id)
            return False
        self.depth += 1
        try:
            if self.depth > self.settings.max_sequence_depth:
                raise WalkAborted(f"sub-walks nested deeper than {self.settings.max_sequence_depth}", node.id)
            await self.engine.walker.run_from(target, conn.to_port, self)
        finally:
            self.depth -= 1
        return True

    # --- data inputs ----------------------------------------------------

    def read_input(self, node: Node, port: str, kind: type = str, default: Any = None) -> Any:
        """Value of a data input: the wired source node's output, else the property of that name."""
        conn = self.graph.connection_into(node.id, port)
        if conn is not None:
            value = self.evaluate(conn.from_node_id, conn.from_port)
            if value is not None:
                return coerce_to(value, kind, default)
        return node.prop(port, kind, default)

    def evaluate(self, node_id: str, port: str) -> Any:
        """Produce the value on a data output port by running a pure source node.

        Only handlers registered as pure (conditions, getters, data nodes)
        are evaluated; anything else yields whatever an earlier step of this
        walk cached for that port.
        """
        source = self.graph.node(node_id)
        if source is None:
            return None
        spec = self.engine.registry.get(source.type_tag)
        if spec is None or not spec.pure or spec.is_async:
            return self.get_output(source.id, port)
        marker = source.id.casefold()
        if marker in self._resolving:
            logger.debug("Data loop through node %s; using default", source.id)
            return None
        self._resolving.add(marker)
        try:
            outcome = spec.func(source, self)
        finally:
            self._resolving.discard(marker)
        if inspect.isawaitable(outcome):  # pragma: no cover - guarded by is_async
            outcome.close()
            return None
        result = outcome or NodeResult()
        for out_port, value in result.outputs.items():
            self.set_output(source.id, out_port, value)
        if self.has_output(source.id, port):
            return self.get_output(source.id, port)
        if result.next_port in (TRUE_PORT, FALSE_PORT):
            # a condition wired as data exposes its verdict
            return result.next_port == TRUE_PORT
        return None
