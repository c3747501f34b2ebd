"""
Manual price overrides.

A field path names one price triple of a snapshot and, optionally, one member
of it: ``ingredientA``, ``item2.high``, ``shale.avg``. Setting a triple without
a member collapses high, low and avg to the same value.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from engine.models import PriceSnapshot, PriceTriple

log = logging.getLogger(__name__)


class UnknownField(KeyError):
    """Raised for a field path that does not address a price in the snapshot."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "unknown field"


class Target(Enum):
    INGREDIENT_A = "ingredientA"
    INGREDIENT_B = "ingredientB"
    ITEM1 = "item1"
    ITEM2 = "item2"
    ITEM3 = "item3"

    @property
    def slot(self) -> Optional[int]:
        """Crafted item list index, or None for an ingredient."""
        if self.value.startswith("item"):
            return int(self.value[4:]) - 1
        return None


class Component(Enum):
    HIGH = "high"
    LOW = "low"
    AVG = "avg"


# Lower-cased external names, including the names used by older edit callers
TARGET_ALIASES = {
    "ingredienta": Target.INGREDIENT_A,
    "ingredientb": Target.INGREDIENT_B,
    "item1": Target.ITEM1,
    "item2": Target.ITEM2,
    "item3": Target.ITEM3,
    "shale": Target.INGREDIENT_A,
    "shard": Target.INGREDIENT_B,
    "armor1": Target.ITEM1,
    "armor2": Target.ITEM2,
    "armor3": Target.ITEM3,
}


@dataclass(frozen=True)
class FieldPath:
    target: Target
    component: Optional[Component] = None

    def __str__(self) -> str:
        if self.component is None:
            return self.target.value
        return f"{self.target.value}.{self.component.value}"


def parse_field_path(text: str) -> FieldPath:
    """Parse ``target[.component]``; raises :class:`UnknownField`."""
    parts = (text or "").strip().lower().split(".")
    if len(parts) > 2:
        raise UnknownField(f"unknown field: {text!r}")

    target = TARGET_ALIASES.get(parts[0])
    if target is None:
        raise UnknownField(f"unknown field: {text!r}")

    if len(parts) == 1:
        return FieldPath(target)
    try:
        return FieldPath(target, Component(parts[1]))
    except ValueError:
        raise UnknownField(f"unknown component {parts[1]!r} in {text!r} (use high, low or avg)") from None


def _resolve(snapshot: PriceSnapshot, path: FieldPath) -> PriceTriple:
    if path.target is Target.INGREDIENT_A:
        return snapshot.ingredient_a
    if path.target is Target.INGREDIENT_B:
        return snapshot.ingredient_b
    slot = path.target.slot
    if slot >= len(snapshot.items):
        raise UnknownField(f"{path.target.value}: snapshot has only {len(snapshot.items)} crafted items")
    return snapshot.items[slot].price


def apply_field(snapshot: PriceSnapshot, field_path, value: int) -> None:
    """
    Set one price in ``snapshot`` in place.

    Args:
        snapshot: snapshot to edit
        field_path: a :class:`FieldPath` or its string form
        value: new price; negatives are not rejected here

    Provenance is left to the caller.
    """
    path = field_path if isinstance(field_path, FieldPath) else parse_field_path(field_path)
    triple = _resolve(snapshot, path)

    if path.component is None:
        triple.high = triple.low = triple.avg = value
    else:
        setattr(triple, path.component.value, value)
    log.debug("Set %s = %d", path, value)
