"""Pricer for FX forwards (CIP-based valuation)."""

from __future__ import annotations

from typing import Any

from calculation.currency import CurrencyAmount
from calculation.pricers.base import BasePricer
from calculation.products.fx import FXForward
from calculation.rates import RatesProvider


class FXPricer(BasePricer):
    """Pricer for FX forwards (covered interest rate parity)."""

    def present_value(self, product: FXForward, rates: RatesProvider) -> CurrencyAmount:
        """
        FX forward: F = spot * DF_base(T) / DF_counter(T),
        PV = notional_base * DF_counter(T) * (F - strike), in the counter currency.
        """
        forward_rate, df_counter = self._forward(product, rates)
        counter = product.pair.counter
        return CurrencyAmount(counter, product.notional_base * df_counter * (forward_rate - product.strike))

    def fx_delta(self, product: FXForward, rates: RatesProvider, bump_pct: float = 0.01) -> float:
        """Finite-difference delta: (PV(bumped) - PV(base)) / (spot_bumped - spot)."""
        base, counter = product.pair.base, product.pair.counter
        spot = rates.fx_rate(base, counter)
        spot_bumped = spot * (1.0 + bump_pct)
        bumped_rates = rates.with_fx(base, counter, spot_bumped)
        pv_base = self.present_value(product, rates).amount
        pv_bumped = self.present_value(product, bumped_rates).amount
        return (pv_bumped - pv_base) / (spot_bumped - spot)

    def explain_present_value(self, product: FXForward, rates: RatesProvider) -> dict[str, Any]:
        forward_rate, df_counter = self._forward(product, rates)
        return {
            "product": FXForward.target_type,
            "currency": product.pair.counter.code,
            "pair": str(product.pair),
            "spot": rates.fx_rate(product.pair.base, product.pair.counter),
            "forward_rate": forward_rate,
            "strike": product.strike,
            "discount_factor": df_counter,
            "present_value": product.notional_base * df_counter * (forward_rate - product.strike),
        }

    @staticmethod
    def _forward(product: FXForward, rates: RatesProvider) -> tuple[float, float]:
        base, counter = product.pair.base, product.pair.counter
        spot = rates.fx_rate(base, counter)
        df_base = rates.discount_curve(base).df(product.maturity)
        df_counter = rates.discount_curve(counter).df(product.maturity)
        return spot * df_base / df_counter, df_counter
