"""Plain-text rendering of a profitability report."""

from __future__ import annotations

from typing import List

from engine.models import Mode
from engine.report import CACHE_TTL, TARGET_PROFIT, TAX_PERCENT, Report
from utils.gp import format_gp
from utils.timefmt import fmt_local, round_duration

TIER_LABELS = {"low": "Low", "avg": "Avg", "high": "High"}


def profit_text(profit: int) -> str:
    if profit >= 0:
        return f"Profit: {format_gp(profit)} gp"
    return f"Loss: {format_gp(-profit)} gp"


def status_line(report: Report) -> str:
    """One-line provenance summary used by both dashboards."""
    if report.fetched_at is None:
        return "Manual state (no fetch time)"
    freshness = "fresh" if report.fresh else "stale"
    return (
        f"Fetched: {fmt_local(report.fetched_at)} | Age: {round_duration(report.age)} "
        f"({freshness}) | TTL: {round_duration(CACHE_TTL)}"
    )


def render_prices(report: Report) -> str:
    """Compact one-line price listing (avg tier)."""
    parts = [
        f"shale={format_gp(report.ingredient_a.avg)} gp",
        f"shard={format_gp(report.ingredient_b.avg)} gp",
    ]
    parts += [f"{item.name}={format_gp(item.price.avg)} gp" for item in report.items]
    if report.fetched_at is None:
        parts.append("fetched_at=manual")
    else:
        parts.append(f"fetched_at={fmt_local(report.fetched_at)} (age {round_duration(report.age)})")
    return " | ".join(parts)


def render_report(report: Report) -> str:
    lines: List[str] = []
    mode = "MANUAL" if report.mode is Mode.MANUAL else "FETCHED"
    lines.append(f"Mode: {mode}")
    lines.append(status_line(report))
    lines.append("")

    lines.append(f"{'Ingredient':<18}{'Low':>14}{'Avg':>14}{'High':>14}")
    for label, triple in (("Infernal shale", report.ingredient_a), ("Oathplate shards", report.ingredient_b)):
        lines.append(
            f"{label:<18}{format_gp(triple.low):>14}{format_gp(triple.avg):>14}{format_gp(triple.high):>14}"
        )
    cost = report.ingredient_cost
    lines.append(
        f"{'Ingredient cost':<18}{format_gp(cost.low):>14}{format_gp(cost.avg):>14}{format_gp(cost.high):>14}"
    )
    lines.append(
        f"{'Break-even sale':<18}{format_gp(report.break_even.low):>14}"
        f"{format_gp(report.break_even.avg):>14}{format_gp(report.break_even.high):>14}"
    )
    lines.append(
        f"{'+' + format_gp(TARGET_PROFIT) + ' sale':<18}{format_gp(report.target_sale.low):>14}"
        f"{format_gp(report.target_sale.avg):>14}{format_gp(report.target_sale.high):>14}"
    )

    for item in report.items:
        lines.append("")
        lines.append(f"{item.name} (id {item.item_id})")
        for case in item.cases:
            marker = "*" if case is item.best_case else " "
            lines.append(
                f" {marker}{TIER_LABELS[case.tier]:<5} sale {format_gp(case.sale_price):>14} gp"
                f" | tax ({TAX_PERCENT}%) {format_gp(case.tax_paid):>11}"
                f" | net {format_gp(case.net_after_tax):>14} | {profit_text(case.profit)}"
            )

    lines.append("")
    if report.best_by_avg_profit.available:
        best = report.best_by_avg_profit
        lines.append(f"Best by avg profit: {best.name} ({profit_text(best.value)})")
        top = report.best_by_high_sale
        lines.append(f"Best by highest sale: {top.name} ({format_gp(top.value)} gp)")
    else:
        lines.append("No recommendation available")
    return "\n".join(lines)


__all__ = ["render_report", "render_prices", "status_line", "profit_text"]
