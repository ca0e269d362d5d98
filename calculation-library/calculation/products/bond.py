"""Zero-coupon bond product (target data only; pricing via BondPricer)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from calculation.currency import Currency


@dataclass
class ZeroCouponBond:
    """
    Zero-coupon bond: single cashflow at maturity.
    PV = notional * DF(maturity) on the currency's discount curve.
    """

    target_type: ClassVar[str] = "ZeroCouponBond"

    currency: Currency
    maturity: float
    notional: float
