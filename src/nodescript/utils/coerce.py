"""Total coercion helpers for loosely-typed authored values.

Property bags arrive from the authoring tool as a mix of strings, numbers
and booleans. Every function in this module accepts anything and never
raises: the ``parse_*`` variants return ``None`` when a value cannot be
interpreted, the ``to_*`` variants fall back to ``False``/``0``.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Any, Optional, Type, TypeVar

E = TypeVar("E", bound=Enum)

TRUTHY = frozenset({"true", "1", "yes", "si", "sí"})
FALSY = frozenset({"false", "0", "no"})

NUMBER_TOLERANCE = 0.0001
COMPARISON_OPERATORS = ("==", "!=", "<", "<=", ">", ">=")


def parse_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        if value == 1:
            return True
        if value == 0:
            return False
        return None
    text = str(value).strip().lower()
    if text in TRUTHY:
        return True
    if text in FALSY:
        return False
    return None


def parse_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return int(value)
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        pass
    number = parse_float(text)
    if number is None:
        return None
    return int(number)


def parse_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def to_bool(value: Any) -> bool:
    """Interpret ``value`` as a flag; anything unrecognised is ``False``."""
    return bool(parse_bool(value))


def to_int(value: Any) -> int:
    parsed = parse_int(value)
    return 0 if parsed is None else parsed


def to_float(value: Any) -> float:
    parsed = parse_float(value)
    return 0.0 if parsed is None else parsed


def to_str(value: Any) -> str:
    """String form used for output ports and change notifications ("" for None)."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return value.value if isinstance(value.value, str) else value.name
    return str(value)


def parse_enum(enum_cls: Type[E], value: Any, default: Optional[E] = None) -> Optional[E]:
    """Look up an enum member by value or name, case-insensitively."""
    if isinstance(value, enum_cls):
        return value
    if value is None:
        return default
    text = str(value).strip().lower()
    members = list(enum_cls)
    for member in members:
        if str(member.value).lower() == text or member.name.lower() == text:
            return member
    if text.isdigit() and int(text) < len(members):
        # numeric form of the authoring tool's enum index
        return members[int(text)]
    return default


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def compare_numbers(left: float, op: str, right: float) -> bool:
    if op == "==":
        return abs(left - right) < NUMBER_TOLERANCE
    if op == "!=":
        return abs(left - right) >= NUMBER_TOLERANCE
    if op == "<":
        return left < right
    if op == "<=":
        return left <= right
    if op == ">":
        return left > right
    if op == ">=":
        return left >= right
    return False


def compare_values(left: Any, op: str, right: Any) -> bool:
    """Compare a property value against an authored operand.

    Booleans and strings support only ``==``/``!=`` (strings ignore case);
    numbers support the six comparison operators. A ``None`` left side or an
    unparseable numeric operand is never equal to anything.
    """
    if left is None:
        return False
    right_text = to_str(right)
    if isinstance(left, bool):
        right_flag = right_text.strip().lower() in ("true", "1", "yes")
        if op == "==":
            return left == right_flag
        if op == "!=":
            return left != right_flag
        return False
    if is_number(left):
        right_number = parse_float(right_text)
        if right_number is None:
            return False
        return compare_numbers(float(left), op, right_number)
    left_text = to_str(left).lower()
    if op == "==":
        return left_text == right_text.lower()
    if op == "!=":
        return left_text != right_text.lower()
    return False


def coerce_to(value: Any, kind: type, default: Any = None) -> Any:
    """Coerce ``value`` to str, int, float or bool, returning ``default`` when impossible."""
    if value is None:
        return default
    if kind is bool:
        parsed = parse_bool(value)
    elif kind is int:
        parsed = parse_int(value)
    elif kind is float:
        parsed = parse_float(value)
    elif kind is str:
        parsed = to_str(value)
    else:
        parsed = value if isinstance(value, kind) else None
    return default if parsed is None else parsed
