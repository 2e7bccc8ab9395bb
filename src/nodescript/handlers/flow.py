"""Flow nodes: branching, fan-out and the one suspension point (Delay)."""

from __future__ import annotations

import asyncio
import logging

from ..graph.model import NodeCategory
from ..runtime.context import NodeResult
from ..runtime.registry import handler

logger = logging.getLogger(__name__)

SEQUENCE_PORTS = ("Then0", "Then1", "Then2")
RANDOM_PORTS = ("Out0", "Out1", "Out2")


@handler("Flow_Branch", NodeCategory.FLOW)
def branch(node, ctx):
    # An unwired Condition input counts as true
    return NodeResult.branch(ctx.read_input(node, "Condition", bool, True))


@handler("Flow_Sequence", NodeCategory.FLOW)
async def sequence(node, ctx):
    """Run each wired ``Then`` port to completion, in order, then stop."""
    for port in SEQUENCE_PORTS:
        await ctx.run_port(node, port)
    return NodeResult.stop()


@handler("Flow_Delay", NodeCategory.FLOW)
async def delay(node, ctx):
    seconds = ctx.read_input(node, "Seconds", float, ctx.settings.default_delay_seconds)
    scaled = max(0.0, seconds) * ctx.settings.delay_scale
    logger.debug("Delay %.3fs at node %s", scaled, node.id)
    await asyncio.sleep(scaled)
    return None


@handler("Flow_RandomBranch", NodeCategory.FLOW)
def random_branch(node, ctx):
    return NodeResult.port(ctx.rng.choice(RANDOM_PORTS))
