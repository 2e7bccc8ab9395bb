"""Action nodes: every node that changes the world or calls into the host.

Importing this package registers all action handlers.
"""

from __future__ import annotations

from ...graph.model import NodeCategory
from ...runtime.registry import handler


def action(tag: str, required=()):
    return handler(tag, NodeCategory.ACTION, required=required)


from . import economy, equipment, npcs, objects, player, properties, quests, world  # noqa: E402,F401
