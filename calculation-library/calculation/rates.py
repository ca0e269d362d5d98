"""
Rates provider: the market state a pricer sees for one scenario.

- Discount curves, keyed by currency
- FX rates, for any currency pair

`RatesProvider` reads through to one scenario of the calculation market data
and can hold overrides on top, so risk measures can bump and reprice without
touching the shared environment.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping, Optional

from calculation.currency import Currency, CurrencyPair, FxRate
from calculation.errors import MissingMarketDataError
from calculation.interfaces import Curve
from calculation.marketdata.keys import DiscountCurveKey
from calculation.marketdata.view import SingleScenarioMarketData


class RatesProvider:
    """
    Immutable-style: with_curve / with_fx return new RatesProvider instances.
    Also an `FxRateProvider`.
    """

    def __init__(
        self,
        market_data: Optional[SingleScenarioMarketData] = None,
        curves: Mapping[Currency, Curve] | None = None,
        fx_rates: Mapping[CurrencyPair, FxRate] | None = None,
        valuation_date: Optional[date] = None,
    ) -> None:
        self._market_data = market_data
        self._curves: dict[Currency, Curve] = dict(curves) if curves else {}
        self._fx_rates: dict[CurrencyPair, FxRate] = dict(fx_rates) if fx_rates else {}
        self._valuation_date = valuation_date

    @staticmethod
    def of(
        curves: Mapping[Currency, Curve],
        fx_rates: Iterable[FxRate] = (),
        valuation_date: Optional[date] = None,
    ) -> "RatesProvider":
        """Standalone provider holding only the given curves and rates."""
        return RatesProvider(
            curves=curves,
            fx_rates={r.pair.to_conventional(): r for r in fx_rates},
            valuation_date=valuation_date,
        )

    @property
    def valuation_date(self) -> Optional[date]:
        if self._valuation_date is None and self._market_data is not None:
            return self._market_data.valuation_date
        return self._valuation_date

    def discount_curve(self, currency: Currency) -> Curve:
        """Raises MissingMarketDataError if there is no curve for the currency."""
        curve = self._curves.get(currency)
        if curve is not None:
            return curve
        if self._market_data is None:
            raise MissingMarketDataError(f"No discount curve available for {currency}")
        return self._market_data.value(DiscountCurveKey(currency))

    def fx_rate(self, base: Currency, counter: Currency) -> float:
        if base == counter:
            return 1.0
        rate = self._fx_rates.get(CurrencyPair(base, counter).to_conventional())
        if rate is not None:
            return rate.fx_rate(base, counter)
        if self._market_data is None:
            raise MissingMarketDataError(f"No FX rate available for {base}/{counter}")
        return self._market_data.fx_rate(base, counter)

    def with_curve(self, currency: Currency, curve: Curve) -> "RatesProvider":
        """Return a new RatesProvider with the currency's curve replaced."""
        new_curves = dict(self._curves)
        new_curves[currency] = curve
        return RatesProvider(self._market_data, new_curves, self._fx_rates, self._valuation_date)

    def with_fx(self, base: Currency, counter: Currency, rate: float) -> "RatesProvider":
        """Return a new RatesProvider with the base/counter rate replaced."""
        # Copy-on-write update: keep original snapshot unchanged.
        fx = FxRate(CurrencyPair(base, counter), rate)
        conventional = fx.pair.to_conventional()
        new_fx = dict(self._fx_rates)
        new_fx[conventional] = FxRate(conventional, fx.fx_rate(conventional.base, conventional.counter))
        return RatesProvider(self._market_data, self._curves, new_fx, self._valuation_date)
