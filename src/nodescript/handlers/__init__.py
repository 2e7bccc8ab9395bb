"""Built-in node handlers.

Importing this package fills :data:`nodescript.runtime.registry.DEFAULT_REGISTRY`
with every node family: events, conditions, actions, flow, variables and
pure data nodes.
"""

from . import actions, conditions, data, events, flow, variables  # noqa: F401
