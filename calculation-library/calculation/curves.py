"""
Discount curves held as market data.

Curve math is deliberately minimal and explicit:
- Times are **year fractions** measured from the valuation date.
- Rates are **continuously compounded zero rates**.
- Interpolation is **linear in zero rates** between pillars, flat outside.

Curves are built straight from quoted node rates; there is no calibration.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from calculation.currency import Currency


@dataclass(frozen=True)
class ZeroRateCurve:
    """Zero rate curve for one currency. Implements the Curve protocol."""

    name: str
    currency: Currency
    pillars: tuple[float, ...]
    zero_rates_cc: tuple[float, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "pillars", tuple(self.pillars))
        object.__setattr__(self, "zero_rates_cc", tuple(self.zero_rates_cc))
        if not self.pillars:
            raise ValueError(f"curve {self.name} has no pillars")
        if len(self.pillars) != len(self.zero_rates_cc):
            raise ValueError("pillars and zero_rates_cc must have the same length")
        for i in range(1, len(self.pillars)):
            if self.pillars[i] <= self.pillars[i - 1]:
                raise ValueError("pillars must be strictly increasing")

    @staticmethod
    def of(name: str, currency: Currency, pillars: Sequence[float], rates: Sequence[float]) -> "ZeroRateCurve":
        return ZeroRateCurve(name, currency, tuple(pillars), tuple(rates))

    def zero_rate_cc(self, t: float) -> float:
        if t < 0:
            raise ValueError("t must be >= 0")
        if t <= self.pillars[0]:
            return self.zero_rates_cc[0]
        if t >= self.pillars[-1]:
            return self.zero_rates_cc[-1]
        for i in range(len(self.pillars) - 1):
            t0, t1 = self.pillars[i], self.pillars[i + 1]
            if t0 <= t <= t1:
                r0, r1 = self.zero_rates_cc[i], self.zero_rates_cc[i + 1]
                return r0 + (r1 - r0) * (t - t0) / (t1 - t0)
        return self.zero_rates_cc[-1]

    def df(self, t: float) -> float:
        """DF(t) = exp(-r(t) * t)."""
        return math.exp(-self.zero_rate_cc(t) * t)

    def bumped(self, bump: float) -> "ZeroRateCurve":
        """Parallel additive shift of every zero rate (1bp = 0.0001)."""
        return ZeroRateCurve(
            name=self.name,
            currency=self.currency,
            pillars=self.pillars,
            zero_rates_cc=tuple(r + bump for r in self.zero_rates_cc),
        )


class CurveGroup:
    """Named set of discount curves, at most one per currency."""

    def __init__(self, name: str, discount_curves: Mapping[Currency, ZeroRateCurve]) -> None:
        self.name = name
        self._discount_curves = MappingProxyType(dict(discount_curves))

    @property
    def currencies(self) -> frozenset[Currency]:
        return frozenset(self._discount_curves)

    def discount_curve(self, currency: Currency) -> Optional[ZeroRateCurve]:
        return self._discount_curves.get(currency)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CurveGroup):
            return NotImplemented
        return self.name == other.name and dict(self._discount_curves) == dict(other._discount_curves)

    def __hash__(self) -> int:
        return hash((self.name, frozenset(self._discount_curves.items())))

    def __repr__(self) -> str:
        return f"CurveGroup({self.name!r}, {sorted(c.code for c in self._discount_curves)})"
