"""Player state values addressed by name.

Scripts refer to player vitals and attributes with plain strings such as
``"Health"`` or ``"Sanity"``. Reads of unknown names give 0 and writes to
unknown names are ignored. Writes are clamped to each value's legal range.
"""

from __future__ import annotations

from typing import Callable, Dict, Tuple

from ..utils.math import clamp, percent
from .models import Player

VITALS = ("Health", "MaxHealth", "Hunger", "Thirst", "Energy", "Sleep", "Sanity", "Mana", "MaxMana")
ATTRIBUTES = ("Strength", "Constitution", "Intelligence", "Dexterity", "Charisma")
STATE_NAMES = VITALS + ATTRIBUTES + ("Money",)

_ALIASES = {"gold": "Money"}

# name -> (getter, setter); setters receive an already-clamped value
_Getter = Callable[[Player], int]
_Setter = Callable[[Player, int], None]


def _vital(attr: str) -> Tuple[_Getter, _Setter]:
    return (lambda p: getattr(p.vitals, attr)), (lambda p, v: setattr(p.vitals, attr, v))


def _attribute(attr: str) -> Tuple[_Getter, _Setter]:
    return (lambda p: getattr(p, attr)), (lambda p, v: setattr(p, attr, v))


_ACCESSORS: Dict[str, Tuple[_Getter, _Setter]] = {
    "Health": _vital("health"),
    "MaxHealth": _vital("max_health"),
    "Hunger": _vital("hunger"),
    "Thirst": _vital("thirst"),
    "Energy": _vital("energy"),
    "Sleep": _vital("sleep"),
    "Sanity": _vital("sanity"),
    "Mana": _vital("mana"),
    "MaxMana": _vital("max_mana"),
    "Strength": _attribute("strength"),
    "Constitution": _attribute("constitution"),
    "Intelligence": _attribute("intelligence"),
    "Dexterity": _attribute("dexterity"),
    "Charisma": _attribute("charisma"),
    "Money": _attribute("money"),
}

_BY_FOLDED = {name.casefold(): name for name in _ACCESSORS}


def canonical_name(state: str) -> str:
    """Return the canonical spelling of a state name, or "" when unknown."""
    folded = (state or "").strip().casefold()
    if folded in _ALIASES:
        return _ALIASES[folded]
    return _BY_FOLDED.get(folded, "")


def clamp_state(player: Player, state: str, value: int) -> int:
    """Clamp ``value`` into the legal range of ``state`` for this player."""
    name = canonical_name(state)
    if name == "Health":
        return clamp(value, 0, player.vitals.max_health)
    if name == "Mana":
        return clamp(value, 0, player.vitals.max_mana)
    if name == "MaxHealth":
        return max(1, value)
    if name in ("Hunger", "Thirst", "Energy", "Sleep", "Sanity"):
        return clamp(value, 0, 100)
    return max(0, value)


def get_state(player: Player, state: str) -> int:
    name = canonical_name(state)
    if not name:
        return 0
    getter, _ = _ACCESSORS[name]
    return getter(player)


def set_state(player: Player, state: str, value: int) -> bool:
    """Write a clamped value; returns False for unknown state names."""
    name = canonical_name(state)
    if not name:
        return False
    _, setter = _ACCESSORS[name]
    setter(player, clamp_state(player, name, int(value)))
    return True


def modify_state(player: Player, state: str, amount: int) -> int:
    """Add ``amount`` to a state value and return the resulting value."""
    set_state(player, state, get_state(player, state) + amount)
    return get_state(player, state)


def health_percent(player: Player) -> float:
    return percent(player.vitals.health, player.vitals.max_health)


def restore_all(player: Player) -> None:
    """Full recovery: vitals to their healthy extremes."""
    v = player.vitals
    v.health = v.max_health
    v.mana = v.max_mana
    v.hunger = 0
    v.thirst = 0
    v.energy = 100
    v.sanity = 100
