"""Number presentation for KPI cards, chart tooltips and axis ticks.

Rounding is half-away-from-zero throughout (the same rule browsers apply in
Intl.NumberFormat), so `compact(1250) == "1.3K"` and `full(2.5) == "3"`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Optional, Tuple, Union

Number = Union[int, float]

TOOLTIP_THRESHOLD = 10_000


@dataclass(frozen=True)
class NumberLocale:
    group_separator: str = ","
    decimal_separator: str = "."
    compact_suffixes: Tuple[str, ...] = ("K", "M", "B", "T")


EN_US = NumberLocale()


@dataclass(frozen=True)
class DeltaBadge:
    text: str
    css_class: str


def _is_missing(n: Optional[Number]) -> bool:
    if n is None:
        return True
    try:
        return not math.isfinite(float(n))
    except (TypeError, ValueError, OverflowError):
        return True


def _round_half_up(value: float, ndigits: int) -> Decimal:
    d = Decimal(str(value))
    q = Decimal(10) ** -ndigits
    with localcontext() as ctx:
        ctx.prec = max(28, d.adjusted() + ndigits + 2)
        return d.quantize(q, rounding=ROUND_HALF_UP)


class NumberFormatter:
    def __init__(self, locale: NumberLocale = EN_US) -> None:
        self.locale = locale

    def _localize(self, text: str) -> str:
        if self.locale == EN_US:
            return text
        return (
            text.replace(",", "\0")
            .replace(".", self.locale.decimal_separator)
            .replace("\0", self.locale.group_separator)
        )

    def compact(self, n: Optional[Number]) -> str:
        if _is_missing(n):
            return "0"
        value = float(n)  # type: ignore[arg-type]
        magnitude = abs(value)
        suffixes = ("",) + self.locale.compact_suffixes

        tier = 0
        while tier < len(suffixes) - 1 and magnitude >= 1000 ** (tier + 1):
            tier += 1
        rounded = _round_half_up(magnitude / 1000**tier, 1)
        # 999_950 rounds to 1000.0K; present it as 1M instead.
        if rounded >= 1000 and tier < len(suffixes) - 1:
            tier += 1
            rounded = _round_half_up(magnitude / 1000**tier, 1)

        text = f"{rounded:,.1f}"
        if text.endswith(".0"):
            text = text[:-2]
        sign = "-" if value < 0 and rounded != 0 else ""
        return f"{sign}{self._localize(text)}{suffixes[tier]}"

    def full(self, n: Optional[Number]) -> str:
        if _is_missing(n):
            return "0"
        rounded = _round_half_up(float(n), 0)  # type: ignore[arg-type]
        if rounded == 0:
            rounded = abs(rounded)
        return self._localize(f"{rounded:,.0f}")

    def tooltip(self, n: Optional[Number]) -> str:
        if _is_missing(n):
            return "0"
        if abs(float(n)) < TOOLTIP_THRESHOLD:  # type: ignore[arg-type]
            return self.full(n)
        return self.compact(n)

    def delta(self, d: Optional[float]) -> Optional[DeltaBadge]:
        if _is_missing(d):
            return None
        positive = d >= 0  # type: ignore[operator]
        text = f"{'+' if positive else ''}{d * 100:.2f}%"  # type: ignore[operator]
        return DeltaBadge(text=self._localize(text), css_class="positive" if positive else "negative")

    def prefixed(self, prefix: str, n: Optional[Number], *, style: str = "compact") -> str:
        if style == "tooltip":
            body = self.tooltip(n)
        elif style == "full":
            body = self.full(n)
        else:
            body = self.compact(n)
        return f"{prefix}{body}"


DEFAULT_FORMATTER = NumberFormatter()


def compact(n: Optional[Number]) -> str:
    return DEFAULT_FORMATTER.compact(n)


def full(n: Optional[Number]) -> str:
    return DEFAULT_FORMATTER.full(n)


def tooltip(n: Optional[Number]) -> str:
    return DEFAULT_FORMATTER.tooltip(n)


def delta(d: Optional[float]) -> Optional[DeltaBadge]:
    return DEFAULT_FORMATTER.delta(d)
