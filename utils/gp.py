"""Parsing and formatting of GP (gold piece) amounts.

Amounts are typed the way players write them in chat: ``125k``, ``1.25m``,
``2b`` or ``1,250,000``.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, DecimalException, localcontext

MAGNITUDES = {
    "k": 1_000,
    "m": 1_000_000,
    "b": 1_000_000_000,
}

_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")


class InvalidFormat(ValueError):
    """Raised when text cannot be read as a GP amount."""


def parse_gp(text: str) -> int:
    """Convert ``text`` into an integer number of GP.

    Commas are ignored and a single trailing ``k``/``m``/``b`` scales the
    value. Fractions are allowed and the result is rounded half away from
    zero. Negative amounts parse; callers that need a price should use
    :func:`parse_non_negative_gp`.
    """
    value = (text or "").strip().lower().replace(",", "")

    multiplier = 1
    if value and value[-1] in MAGNITUDES:
        multiplier = MAGNITUDES[value[-1]]
        value = value[:-1]

    if not _NUMBER_RE.match(value):
        raise InvalidFormat(f"not a GP amount: {text!r}")

    # exact for any length of input
    with localcontext() as ctx:
        ctx.prec = len(value) + 12
        ctx.Emax = max(ctx.Emax, ctx.prec)
        try:
            scaled = Decimal(value) * multiplier
            return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))
        except DecimalException as e:
            raise InvalidFormat(f"not a GP amount: {text!r}") from e


def parse_non_negative_gp(text: str) -> int:
    """Like :func:`parse_gp` but a negative amount is also ``InvalidFormat``."""
    amount = parse_gp(text)
    if amount < 0:
        raise InvalidFormat(f"GP amount must not be negative: {text!r}")
    return amount


def format_gp(amount: int) -> str:
    """Return ``amount`` with thousands separators, e.g. ``1,250,000``."""
    return f"{amount:,}"


__all__ = ["InvalidFormat", "MAGNITUDES", "parse_gp", "parse_non_negative_gp", "format_gp"]
