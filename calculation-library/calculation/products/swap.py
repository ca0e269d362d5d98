"""Fixed-float interest rate swap (single-curve; target data only; pricing via SwapPricer)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from calculation.currency import Currency


@dataclass
class FixedFloatSwap:
    """
    Fixed vs float swap (single curve, the currency's discount curve).
    Receive float, pay fixed.
    PV = PV_float_leg - PV_fixed_leg.
    pay_times: payment times (year-fractions); accruals inferred as differences from t0.
    """

    target_type: ClassVar[str] = "FixedFloatSwap"

    currency: Currency
    notional: float
    fixed_rate: float
    pay_times: list[float] = field(default_factory=list)
    t0: float = 0.0

    def __post_init__(self) -> None:
        if not self.pay_times:
            raise ValueError("swap needs at least one payment time")
