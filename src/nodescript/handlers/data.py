"""Pure data nodes: arithmetic, logic, comparison and selection.

These are evaluated on demand when another node reads a data input wired to
their ``Result`` port. Each input (``A``, ``B``, ``Value``...) is itself read
through :meth:`ExecutionContext.read_input`, so expressions can be chained;
an unwired input falls back to the node property of the same name.
"""

from __future__ import annotations

from ..graph.model import NodeCategory
from ..runtime.context import NodeResult
from ..runtime.registry import handler
from ..utils.coerce import compare_numbers
from ..utils.math import clamp

RESULT_PORT = "Result"


def data_node(tag: str, required=()):
    return handler(tag, NodeCategory.VARIABLE, required=required, pure=True)


def _result(value) -> NodeResult:
    return NodeResult.value(value, port=RESULT_PORT)


def _ints(ctx, node, *ports: str):
    return [ctx.read_input(node, port, int, 0) for port in ports]


def _flags(ctx, node, *ports: str):
    return [ctx.read_input(node, port, bool, False) for port in ports]


# --- math ---------------------------------------------------------------------


@data_node("Math_Add")
def add(node, ctx):
    a, b = _ints(ctx, node, "A", "B")
    return _result(a + b)


@data_node("Math_Subtract")
def subtract(node, ctx):
    a, b = _ints(ctx, node, "A", "B")
    return _result(a - b)


@data_node("Math_Multiply")
def multiply(node, ctx):
    a, b = _ints(ctx, node, "A", "B")
    return _result(a * b)


@data_node("Math_Divide")
def divide(node, ctx):
    a, b = _ints(ctx, node, "A", "B")
    if b == 0:
        return _result(0)
    # integer division truncating toward zero
    return _result(int(a / b))


@data_node("Math_Modulo")
def modulo(node, ctx):
    a, b = _ints(ctx, node, "A", "B")
    if b == 0:
        return _result(0)
    return _result(a - b * int(a / b))


@data_node("Math_Negate")
def negate(node, ctx):
    (value,) = _ints(ctx, node, "Value")
    return _result(-value)


@data_node("Math_Abs")
def absolute(node, ctx):
    (value,) = _ints(ctx, node, "Value")
    return _result(abs(value))


@data_node("Math_Min")
def minimum(node, ctx):
    return _result(min(_ints(ctx, node, "A", "B")))


@data_node("Math_Max")
def maximum(node, ctx):
    return _result(max(_ints(ctx, node, "A", "B")))


@data_node("Math_Clamp")
def clamp_value(node, ctx):
    value, low, high = _ints(ctx, node, "Value", "Min", "Max")
    if low > high:
        low, high = high, low
    return _result(clamp(value, low, high))


@data_node("Math_Random")
def random_int(node, ctx):
    low, high = _ints(ctx, node, "Min", "Max")
    if low > high:
        low, high = high, low
    return _result(ctx.rng.randint(low, high))


# --- logic --------------------------------------------------------------------


@data_node("Logic_And")
def logic_and(node, ctx):
    a, b = _flags(ctx, node, "A", "B")
    return _result(a and b)


@data_node("Logic_Or")
def logic_or(node, ctx):
    a, b = _flags(ctx, node, "A", "B")
    return _result(a or b)


@data_node("Logic_Not")
def logic_not(node, ctx):
    (value,) = _flags(ctx, node, "Value")
    return _result(not value)


@data_node("Logic_Xor")
def logic_xor(node, ctx):
    a, b = _flags(ctx, node, "A", "B")
    return _result(a != b)


# --- comparison ---------------------------------------------------------------


def comparison(tag: str, required=()):
    return handler(tag, NodeCategory.CONDITION, required=required, pure=True)


def _verdict(result: bool) -> NodeResult:
    # Usable both as a data source and as a step of a walk
    return NodeResult(next_port="True" if result else "False", outputs={RESULT_PORT: result})


@comparison("Compare_Int")
def compare_int(node, ctx):
    a, b = _ints(ctx, node, "A", "B")
    return _verdict(compare_numbers(a, node.text("Operator", "=="), b))


@comparison("Compare_PlayerMoney")
def compare_player_money(node, ctx):
    (other,) = _ints(ctx, node, "CompareValue")
    return _verdict(compare_numbers(ctx.world.player.money, node.text("Operator", "=="), other))


@comparison("Compare_Counter", required=("CounterName",))
def compare_counter(node, ctx):
    (other,) = _ints(ctx, node, "CompareValue")
    current = ctx.world.get_counter(node.text("CounterName"))
    return _verdict(compare_numbers(current, node.text("Operator", "=="), other))


# --- selection ----------------------------------------------------------------


@data_node("Select_Int")
def select_int(node, ctx):
    chosen = "True" if ctx.read_input(node, "Condition", bool, False) else "False"
    return _result(ctx.read_input(node, chosen, int, 0))


@data_node("Select_Bool")
def select_bool(node, ctx):
    chosen = "True" if ctx.read_input(node, "Condition", bool, False) else "False"
    return _result(ctx.read_input(node, chosen, bool, False))
