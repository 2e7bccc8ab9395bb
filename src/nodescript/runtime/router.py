from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, List, Tuple

from ..exceptions import WalkAborted
from ..graph.model import DEFAULT_PORT, Node, ScriptGraph, same_name
from ..utils.coerce import to_str

if TYPE_CHECKING:  # pragma: no cover
    from .engine import ScriptEngine

logger = logging.getLogger(__name__)

PROPERTY_CHANGED = "Event_OnPropertyChanged"


class EventRouter:
    """Decides which graphs run for a trigger and walks each of them.

    Calls made here run inline in the caller's task; the engine's queue is
    what serialises top-level triggers. Inline triggers may nest (a quest
    event raised by an action, a property change raised by SetProperty), so
    nesting is bounded by ``max_sequence_depth``.
    """

    def __init__(self, engine: "ScriptEngine") -> None:
        self.engine = engine
        self._nesting = 0

    def graphs_for(self, owner_type: str, owner_id: str) -> List[ScriptGraph]:
        return [g for g in self.engine.graphs if g.owned_by(owner_type, owner_id)]

    async def trigger_by_name(self, owner_type: str, owner_id: str, event_tag: str) -> int:
        """Walk every graph of ``(owner_type, owner_id)`` that has an entry node tagged ``event_tag``.

        Graphs run in declaration order, each with a fresh context. Returns the
        number of walks started.
        """
        self.engine.debug(f"[Debug] Looking for scripts: {owner_type}/{owner_id}/{event_tag}")
        graphs = self.graphs_for(owner_type, owner_id)
        self.engine.debug(f"[Debug] Found {len(graphs)} scripts for {owner_type}/{owner_id}")
        walks = 0
        for graph in graphs:
            entry = graph.first_of_type(event_tag)
            if entry is None:
                continue
            self.engine.debug(f"[Debug] Running script: {graph.name} ({graph.id})")
            await self._walk(graph, entry)
            walks += 1
        logger.debug("Trigger %s/%s/%s ran %d walk(s)", owner_type, owner_id, event_tag, walks)
        return walks

    def property_listeners(self, entity_type: str, prop: str) -> List[Tuple[ScriptGraph, Node]]:
        """First matching OnPropertyChanged entry node of every graph listening to ``(entity_type, prop)``."""
        matches: List[Tuple[ScriptGraph, Node]] = []
        for graph in self.engine.graphs:
            for node in graph.nodes_of_type(PROPERTY_CHANGED):
                if same_name(node.text("EntityType"), entity_type) and same_name(node.text("PropertyName"), prop):
                    matches.append((graph, node))
                    break
        return matches

    async def property_changed(self, entity_type: str, entity_id: str, prop: str, old: Any, new: Any) -> int:
        """Fan a changed property value out to the graphs whose entry node filters on it."""
        listeners = self.property_listeners(entity_type, prop)
        logger.debug(
            "Property %s.%s of %s changed (%r -> %r); %d listener(s)",
            entity_type,
            prop,
            entity_id,
            old,
            new,
            len(listeners),
        )
        for graph, entry in listeners:
            await self._walk(
                graph,
                entry,
                seed={"EntityId": entity_id, "OldValue": to_str(old), "NewValue": to_str(new)},
            )
        return len(listeners)

    async def _walk(self, graph: ScriptGraph, entry: Node, seed=None) -> None:
        self._nesting += 1
        try:
            if self._nesting > self.engine.settings.max_sequence_depth:
                raise WalkAborted(
                    f"triggers nested deeper than {self.engine.settings.max_sequence_depth}", entry.id
                )
            ctx = self.engine.new_context(graph)
            for port, value in (seed or {}).items():
                ctx.set_output(entry.id, port, value)
            await self.engine.walker.run_from(entry, DEFAULT_PORT, ctx)
        finally:
            self._nesting -= 1
