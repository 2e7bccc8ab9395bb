"""Static checks on an authored graph, run before play or from the CLI.

A graph is valid when it has an Event node, has an Action node, execution
flow from some Event reaches some Action, node ids are unique, every
connection points at existing nodes and no node lacks a required property.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set

from .model import Node, NodeCategory, ScriptGraph

logger = logging.getLogger(__name__)

# Output ports that continue a walk; everything else carries data
EXECUTION_PORTS = frozenset(
    p.casefold()
    for p in (
        "Exec",
        "True",
        "False",
        "Then0",
        "Then1",
        "Then2",
        "Out0",
        "Out1",
        "Out2",
        "OnDeath",
        "PlayerDied",
        "NotEnough",
        "OnInsufficient",
    )
)


@dataclass
class IncompleteNode:
    node_id: str
    node_type: str
    missing_properties: List[str] = field(default_factory=list)


@dataclass
class ValidationReport:
    has_event: bool = False
    has_action: bool = False
    is_connected: bool = False
    duplicate_ids: List[str] = field(default_factory=list)
    dangling_connections: List[str] = field(default_factory=list)
    incomplete_nodes: List[IncompleteNode] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return (
            self.has_event
            and self.has_action
            and self.is_connected
            and not self.duplicate_ids
            and not self.dangling_connections
            and not self.incomplete_nodes
        )


def _category(node: Node, registry) -> Optional[NodeCategory]:
    return registry.category_of(node.type_tag) or node.category


def _missing_properties(node: Node, graph: ScriptGraph, registry) -> List[str]:
    spec = registry.get(node.type_tag)
    if spec is None:
        return []
    missing = []
    for name in spec.required:
        if graph.connection_into(node.id, name) is not None:
            continue
        value = node.raw(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


def _reaches_action(graph: ScriptGraph, start: Node, action_ids: Set[str]) -> bool:
    visited: Set[str] = set()
    pending = [start.id]
    while pending:
        node_id = pending.pop()
        key = node_id.casefold()
        if key in visited:
            continue
        visited.add(key)
        if key in action_ids:
            return True
        for conn in graph.outgoing(node_id):
            if conn.from_port.casefold() in EXECUTION_PORTS:
                pending.append(conn.to_node_id)
    return False


def validate_graph(graph: ScriptGraph, registry=None) -> ValidationReport:
    """Check ``graph`` and collect every problem found, in a fixed order."""
    if registry is None:
        from ..runtime.registry import default_registry

        registry = default_registry()

    report = ValidationReport()
    if not graph.nodes:
        report.errors.append("The script has no nodes.")
        return report

    events = [n for n in graph.nodes if _category(n, registry) is NodeCategory.EVENT]
    actions = [n for n in graph.nodes if _category(n, registry) is NodeCategory.ACTION]
    report.has_event = bool(events)
    report.has_action = bool(actions)
    if not report.has_event:
        report.errors.append("The script has no event node, so it will never run.")
    if not report.has_action:
        report.errors.append("The script has no action node, so it does nothing.")

    if events and actions:
        action_ids = {a.id.casefold() for a in actions}
        report.is_connected = any(_reaches_action(graph, e, action_ids) for e in events)
        if not report.is_connected:
            report.errors.append("No event is connected to an action through execution ports.")

    report.duplicate_ids = graph.duplicate_node_ids()
    for node_id in report.duplicate_ids:
        report.errors.append(f"Node id '{node_id}' is used more than once.")

    for conn in graph.connections:
        if graph.node(conn.from_node_id) is None or graph.node(conn.to_node_id) is None:
            report.dangling_connections.append(conn.id)
            report.errors.append(
                f"Connection {conn.id} links {conn.from_node_id}.{conn.from_port} to"
                f" {conn.to_node_id}.{conn.to_port}, but one end does not exist."
            )

    for node in graph.nodes:
        missing = _missing_properties(node, graph, registry)
        if missing:
            report.incomplete_nodes.append(IncompleteNode(node.id, node.type_tag, missing))
            report.errors.append(f"Node {node.type_tag} ({node.id}) is missing: {', '.join(missing)}")

    if not report.is_valid:
        logger.debug("Graph %s has %d problem(s)", graph.name or graph.id, len(report.errors))
    return report
