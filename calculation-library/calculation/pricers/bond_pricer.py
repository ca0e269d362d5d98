"""Pricer for zero-coupon bonds."""

from __future__ import annotations

from typing import Any

from calculation.currency import CurrencyAmount
from calculation.pricers.base import BasePricer
from calculation.products.bond import ZeroCouponBond
from calculation.rates import RatesProvider


class BondPricer(BasePricer):
    """Pricer for zero-coupon bonds."""

    def present_value(self, product: ZeroCouponBond, rates: RatesProvider) -> CurrencyAmount:
        """Zero-coupon bond: PV = notional * DF(maturity)."""
        c = rates.discount_curve(product.currency)
        return CurrencyAmount(product.currency, product.notional * c.df(product.maturity))

    def explain_present_value(self, product: ZeroCouponBond, rates: RatesProvider) -> dict[str, Any]:
        df = rates.discount_curve(product.currency).df(product.maturity)
        return {
            "product": ZeroCouponBond.target_type,
            "currency": product.currency.code,
            "maturity": product.maturity,
            "notional": product.notional,
            "discount_factor": df,
            "present_value": product.notional * df,
        }
