"""FX forward product (target data only; pricing via FXPricer)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from calculation.currency import CurrencyPair


@dataclass
class FXForward:
    """
    FX forward: notional_base in pair.base, strike (counter per base), settle at maturity.
    Valuation uses covered interest rate parity (CIP): F = spot * DF_base(T) / DF_counter(T),
    PV in the counter currency = notional_base * DF_counter(T) * (F - strike).
    """

    target_type: ClassVar[str] = "FXForward"

    pair: CurrencyPair
    maturity: float
    notional_base: float
    strike: float
