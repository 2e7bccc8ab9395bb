from __future__ import annotations

import inspect
import logging
from typing import Optional

from ..graph.model import DEFAULT_PORT, Node
from .context import ExecutionContext, NodeResult
from .registry import HandlerRegistry, HandlerSpec

logger = logging.getLogger(__name__)


class Walker:
    """Drives one walk through a graph.

    Starting at an entry node, each step dispatches the node's handler,
    takes the port it selected (default "Exec"), follows the first matching
    connection and repeats with the target node. The walk ends silently when
    a node has no handler, the port is unwired or the target is missing.
    """

    def __init__(self, registry: HandlerRegistry) -> None:
        self.registry = registry

    async def run_from(self, node: Node, input_port: str, ctx: ExecutionContext) -> None:
        current: Optional[Node] = node
        port_in = input_port
        while current is not None:
            spec = self.registry.get(current.type_tag)
            if spec is None:
                logger.debug("No handler for node type %s (node %s); walk stops", current.type_tag, current.id)
                return
            ctx.count_step(current)
            ctx.input_port = port_in
            result = await self.invoke(spec, current, ctx)
            if result.halt:
                return

            out_port = result.next_port or DEFAULT_PORT
            conn = ctx.graph.connection_from(current.id, out_port)
            if conn is None:
                return
            target = ctx.graph.node(conn.to_node_id)
            if target is None:
                logger.debug("Connection %s targets missing node %s; walk stops", conn.id, conn.to_node_id)
                return
            current, port_in = target, conn.to_port

    async def invoke(self, spec: HandlerSpec, node: Node, ctx: ExecutionContext) -> NodeResult:
        logger.debug("Dispatch %s (node %s)", spec.tag, node.id)
        outcome = spec.func(node, ctx)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        result = outcome or NodeResult()
        for port, value in result.outputs.items():
            ctx.set_output(node.id, port, value)
        return result
