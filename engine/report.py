"""
Report engine for the Oathplate calculator.

Turns a price snapshot and its provenance into a fully derived profitability
report: ingredient cost per pricing tier, profit of each armour piece at each
tier after Grand Exchange tax, and the best pieces to craft.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from engine.models import Mode, PriceSnapshot, PriceTriple, Provenance
from utils.timefmt import now_utc, to_utc

# Recipe amounts for one armour piece
SHALE_NEEDED = 2520
SHARDS_NEEDED = 450

TAX_PERCENT = 2
CACHE_TTL = timedelta(minutes=20)
TARGET_PROFIT = 1_000_000

TIERS = ("low", "avg", "high")


@dataclass(frozen=True)
class TierValues:
    """One integer per pricing tier."""
    low: int
    avg: int
    high: int

    def tier(self, name: str) -> int:
        return getattr(self, name)


# Ingredient cost at low/avg/high pricing
IngredientCostTriple = TierValues


@dataclass(frozen=True)
class ProfitCase:
    """Sale of one crafted item at one tier against the same-tier ingredient cost."""
    tier: str
    sale_price: int
    tax_paid: int
    net_after_tax: int
    profit: int


@dataclass(frozen=True)
class CraftedItemReport:
    name: str
    item_id: int
    price: PriceTriple
    cases: Tuple[ProfitCase, ...]
    best_case: ProfitCase


@dataclass(frozen=True)
class Recommendation:
    """Pointer to the winning crafted item; ``index`` is -1 when there is none."""
    index: int
    name: str
    item_id: int
    value: int

    @property
    def available(self) -> bool:
        return self.index >= 0


NO_RECOMMENDATION = Recommendation(index=-1, name="", item_id=0, value=0)


@dataclass(frozen=True)
class Report:
    mode: Mode
    fetched_at: Optional[datetime]
    age: Optional[timedelta]
    fresh: bool
    ingredient_a: PriceTriple
    ingredient_b: PriceTriple
    ingredient_cost: IngredientCostTriple
    break_even: TierValues
    target_sale: TierValues
    items: Tuple[CraftedItemReport, ...]
    best_by_avg_profit: Recommendation
    best_by_high_sale: Recommendation


def tax_for(sale_price: int) -> int:
    """Grand Exchange tax on a sale, truncated toward zero."""
    tax = abs(sale_price) * TAX_PERCENT // 100
    return tax if sale_price >= 0 else -tax


def profit_case(tier: str, sale_price: int, ingredient_cost: int) -> ProfitCase:
    tax_paid = tax_for(sale_price)
    net_after_tax = sale_price - tax_paid
    return ProfitCase(
        tier=tier,
        sale_price=sale_price,
        tax_paid=tax_paid,
        net_after_tax=net_after_tax,
        profit=net_after_tax - ingredient_cost,
    )


def required_sale_price(cost: int, desired_profit: int = 0) -> int:
    """
    Smallest sale price whose after-tax value covers ``cost + desired_profit``.

    Uses the untruncated tax rate, i.e. ``ceil(target / 0.98)``, in integer
    arithmetic.
    """
    target = cost + desired_profit
    keep = 100 - TAX_PERCENT
    return -((-target * 100) // keep)


def ingredient_costs(ingredient_a: PriceTriple, ingredient_b: PriceTriple) -> IngredientCostTriple:
    values = {
        tier: SHALE_NEEDED * ingredient_a.tier(tier) + SHARDS_NEEDED * ingredient_b.tier(tier)
        for tier in TIERS
    }
    return IngredientCostTriple(**values)


def _first_max(candidates: List[Tuple[int, object]]):
    """Return the item of the first strictly greatest key, scanning in order."""
    best_key, best = candidates[0]
    for key, item in candidates[1:]:
        if key > best_key:
            best_key, best = key, item
    return best


def _recommend(items: Tuple[CraftedItemReport, ...], value_of) -> Recommendation:
    if not items:
        return NO_RECOMMENDATION
    index = _first_max([(value_of(item), i) for i, item in enumerate(items)])
    winner = items[index]
    return Recommendation(index=index, name=winner.name, item_id=winner.item_id, value=value_of(winner))


def compute_report(
    snapshot: PriceSnapshot,
    provenance: Provenance,
    now: Optional[datetime] = None,
) -> Report:
    """
    Build the profitability report for ``snapshot``.

    Args:
        snapshot: current prices
        provenance: fetched/manual tag and fetch time
        now: clock override, defaults to the current UTC time

    Returns:
        Report, recomputed from scratch on every call
    """
    age = None
    fresh = False
    if provenance.fetched_at is not None:
        age = to_utc(now or now_utc()) - to_utc(provenance.fetched_at)
        fresh = age <= CACHE_TTL

    cost = ingredient_costs(snapshot.ingredient_a, snapshot.ingredient_b)

    item_reports = []
    for item in snapshot.items:
        cases = tuple(profit_case(tier, item.price.tier(tier), cost.tier(tier)) for tier in TIERS)
        best_case = _first_max([(case.profit, case) for case in cases])
        item_reports.append(CraftedItemReport(
            name=item.name,
            item_id=item.item_id,
            price=replace(item.price),
            cases=cases,
            best_case=best_case,
        ))
    items = tuple(item_reports)

    return Report(
        mode=provenance.mode,
        fetched_at=provenance.fetched_at,
        age=age,
        fresh=fresh,
        ingredient_a=replace(snapshot.ingredient_a),
        ingredient_b=replace(snapshot.ingredient_b),
        ingredient_cost=cost,
        break_even=TierValues(**{t: required_sale_price(cost.tier(t)) for t in TIERS}),
        target_sale=TierValues(**{t: required_sale_price(cost.tier(t), TARGET_PROFIT) for t in TIERS}),
        items=items,
        best_by_avg_profit=_recommend(items, lambda r: r.cases[1].profit),
        best_by_high_sale=_recommend(items, lambda r: r.price.high),
    )
