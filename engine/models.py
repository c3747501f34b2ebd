"""
Price data model for the Oathplate calculator.

Defines the price snapshot the report engine reads and the provenance tag that
says where its numbers came from.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from utils.timefmt import fmt_iso, parse_timestamp

CRAFTED_SLOTS = 3

# OSRS item ids
SHALE_ID = 30848
SHARD_ID = 30765
HELM_ID = 30750
CHEST_ID = 30753
LEGS_ID = 30756

DEFAULT_CRAFTED = [
    ("Oathplate helm", HELM_ID),
    ("Oathplate chest", CHEST_ID),
    ("Oathplate legs", LEGS_ID),
]


class Mode(Enum):
    """Where the snapshot's prices came from."""
    FETCHED = "fetched"
    MANUAL = "manual"


@dataclass
class PriceTriple:
    """High/low/average price of one tradeable item."""
    high: int = 0
    low: int = 0
    avg: int = 0

    @classmethod
    def from_high_low(cls, high: int, low: int) -> "PriceTriple":
        """Build a triple from market high/low; avg is fixed here and never recomputed."""
        return cls(high=high, low=low, avg=(high + low) // 2)

    @classmethod
    def flat(cls, value: int) -> "PriceTriple":
        return cls(high=value, low=value, avg=value)

    def tier(self, name: str) -> int:
        """Return the price for tier ``low``, ``avg`` or ``high``."""
        return getattr(self, name)

    def to_dict(self) -> Dict[str, int]:
        return {'high': self.high, 'low': self.low, 'avg': self.avg}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PriceTriple":
        return cls(high=int(data['high']), low=int(data['low']), avg=int(data['avg']))


@dataclass
class CraftedItemOption:
    """One of the finished armour pieces whose profit is compared."""
    name: str
    item_id: int
    price: PriceTriple = field(default_factory=PriceTriple)

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'item_id': self.item_id, 'price': self.price.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CraftedItemOption":
        return cls(
            name=str(data['name']),
            item_id=int(data['item_id']),
            price=PriceTriple.from_dict(data['price']),
        )


@dataclass
class PriceSnapshot:
    """Raw market data: two ingredients and the crafted item options."""
    ingredient_a: PriceTriple = field(default_factory=PriceTriple)
    ingredient_b: PriceTriple = field(default_factory=PriceTriple)
    items: List[CraftedItemOption] = field(default_factory=list)

    @classmethod
    def default(cls, crafted: Optional[List[tuple]] = None) -> "PriceSnapshot":
        """
        Return an all-zero snapshot with the three placeholder armour pieces.

        Args:
            crafted: optional ``(name, item_id)`` pairs overriding the defaults
        """
        pairs = crafted or DEFAULT_CRAFTED
        return cls(items=[CraftedItemOption(name=name, item_id=item_id) for name, item_id in pairs])

    def to_dict(self) -> Dict[str, Any]:
        return {
            'ingredient_a': self.ingredient_a.to_dict(),
            'ingredient_b': self.ingredient_b.to_dict(),
            'items': [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PriceSnapshot":
        items = [CraftedItemOption.from_dict(item) for item in data['items']]
        if len(items) != CRAFTED_SLOTS:
            raise ValueError(f"expected {CRAFTED_SLOTS} crafted items, got {len(items)}")
        return cls(
            ingredient_a=PriceTriple.from_dict(data['ingredient_a']),
            ingredient_b=PriceTriple.from_dict(data['ingredient_b']),
            items=items,
        )


@dataclass
class Provenance:
    """Tag and fetch time of a snapshot. ``fetched_at`` of None means never fetched."""
    mode: Mode = Mode.MANUAL
    fetched_at: Optional[datetime] = None

    @classmethod
    def fetched(cls, at: datetime) -> "Provenance":
        return cls(mode=Mode.FETCHED, fetched_at=at)

    def as_manual(self) -> "Provenance":
        """Return the provenance after a hand edit; the fetch time is kept."""
        return Provenance(mode=Mode.MANUAL, fetched_at=self.fetched_at)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'mode': self.mode.value,
            'fetched_at': fmt_iso(self.fetched_at) if self.fetched_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Provenance":
        raw = data.get('fetched_at')
        fetched_at = parse_timestamp(raw)
        if fetched_at is None and raw not in (None, "", 0):
            raise ValueError(f"bad fetched_at: {raw!r}")
        return cls(mode=Mode(data['mode']), fetched_at=fetched_at)
