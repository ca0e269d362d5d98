"""Pricer for fixed-float interest rate swaps (single curve)."""

from __future__ import annotations

from typing import Any

from calculation.currency import CurrencyAmount
from calculation.interfaces import Curve
from calculation.pricers.base import BasePricer
from calculation.products.swap import FixedFloatSwap
from calculation.rates import RatesProvider


class SwapPricer(BasePricer):
    """Pricer for fixed-float interest rate swaps (single curve)."""

    def present_value(self, product: FixedFloatSwap, rates: RatesProvider) -> CurrencyAmount:
        """
        Fixed-float swap (single curve).
        Convention: receive float, pay fixed. PV = PV(float leg) - PV(fixed leg).
        """
        c = rates.discount_curve(product.currency)
        pv_fixed = self._pv_fixed_leg(product, c)
        pv_float = self._pv_float_leg(product, c)
        return CurrencyAmount(product.currency, pv_float - pv_fixed)

    def par_rate(self, product: FixedFloatSwap, rates: RatesProvider) -> float:
        """Fixed rate giving zero PV: PV(float leg) / annuity."""
        c = rates.discount_curve(product.currency)
        annuity = self._annuity(product, c)
        return self._pv_float_leg(product, c) / annuity

    def explain_present_value(self, product: FixedFloatSwap, rates: RatesProvider) -> dict[str, Any]:
        c = rates.discount_curve(product.currency)
        pv_fixed = self._pv_fixed_leg(product, c)
        pv_float = self._pv_float_leg(product, c)
        return {
            "product": FixedFloatSwap.target_type,
            "currency": product.currency.code,
            "notional": product.notional,
            "fixed_rate": product.fixed_rate,
            "pv_fixed_leg": pv_fixed,
            "pv_float_leg": pv_float,
            "present_value": pv_float - pv_fixed,
        }

    @staticmethod
    def _annuity(swap: FixedFloatSwap, c: Curve) -> float:
        """sum_i notional * accrual_i * DF(t_i)."""
        total = 0.0
        prev = swap.t0
        for t in swap.pay_times:
            total += swap.notional * (t - prev) * c.df(t)
            prev = t
        return total

    @classmethod
    def _pv_fixed_leg(cls, swap: FixedFloatSwap, c: Curve) -> float:
        """
        Fixed leg PV.
        Accrual fractions come from successive pay times.
        CF_i = notional * fixed_rate * accrual_i, PV = sum_i CF_i * DF(t_i).
        """
        return swap.fixed_rate * cls._annuity(swap, c)

    @staticmethod
    def _pv_float_leg(swap: FixedFloatSwap, c: Curve) -> float:
        """
        Float leg PV (single-curve).
        Forward rate from discount factors: f = (DF(prev)/DF(t) - 1) / accrual.
        """
        pv = 0.0
        prev = swap.t0
        df_prev = c.df(prev)
        for t in swap.pay_times:
            accrual = t - prev
            df_t = c.df(t)
            fwd = (df_prev / df_t - 1.0) / accrual if accrual > 0 else 0.0
            cf = swap.notional * fwd * accrual
            pv += cf * df_t
            prev = t
            df_prev = df_t
        return pv
