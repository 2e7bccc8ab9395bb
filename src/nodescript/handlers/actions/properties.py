"""Generic property writes through the property accessor.

Both actions raise the property-changed fan-out, inline, when the stored
value actually changed.
"""

from __future__ import annotations

import logging

from ...accessor import PropertyAccessor
from ..common import read_float, read_text
from . import action

logger = logging.getLogger(__name__)

_OPERATIONS = {
    "add": lambda current, amount: current + amount,
    "subtract": lambda current, amount: current - amount,
    "multiply": lambda current, amount: current * amount,
    # division by zero leaves the value alone
    "divide": lambda current, amount: current / amount if amount != 0 else current,
}


def _address(node, ctx):
    return (
        read_text(ctx, node, "EntityType"),
        read_text(ctx, node, "EntityId"),
        read_text(ctx, node, "PropertyName"),
    )


async def _write(ctx, entity_type: str, entity_id: str, prop: str, value) -> None:
    accessor = PropertyAccessor(ctx.world)
    old = accessor.get(entity_type, entity_id, prop)
    if not accessor.set(entity_type, entity_id, prop, value):
        return
    new = accessor.get(entity_type, entity_id, prop)
    ctx.debug(f"[Debug] {entity_type}.{prop} of '{entity_id}': {old!r} -> {new!r}")
    if old != new:
        await ctx.property_changed(entity_type, entity_id, prop, old, new)


@action("Action_SetProperty", required=("EntityType", "PropertyName"))
async def set_property(node, ctx):
    entity_type, entity_id, prop = _address(node, ctx)
    await _write(ctx, entity_type, entity_id, prop, read_text(ctx, node, "Value"))


@action("Action_ModifyProperty", required=("EntityType", "PropertyName"))
async def modify_property(node, ctx):
    """Apply ``Operation`` (Add, Subtract, Multiply or Divide) with ``Amount`` to a numeric property."""
    entity_type, entity_id, prop = _address(node, ctx)
    operation = _OPERATIONS.get(read_text(ctx, node, "Operation", "Add").casefold())
    current = PropertyAccessor(ctx.world).get(entity_type, entity_id, prop)
    if operation is None or isinstance(current, bool) or not isinstance(current, (int, float)):
        logger.debug("Cannot modify %s.%s (current value %r)", entity_type, prop, current)
        return
    result = operation(current, read_float(ctx, node, "Amount", 0.0))
    if isinstance(current, int):
        result = int(round(result))
    await _write(ctx, entity_type, entity_id, prop, result)
