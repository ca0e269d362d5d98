"""
Protocol-based interfaces for the extension points of the calculation engine.

Using typing.Protocol enables structural subtyping: any class that implements
the required methods satisfies the protocol without explicit inheritance.
New targets, curves, pricers, convertible results and observable sources can
be plugged in without modifying the engine.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Iterable, Mapping, Protocol, runtime_checkable

if TYPE_CHECKING:
    from calculation.currency import Currency, CurrencyAmount
    from calculation.marketdata.box import MarketDataBox
    from calculation.marketdata.ids import MarketDataId
    from calculation.marketdata.view import CalculationMarketData
    from calculation.rates import RatesProvider


@runtime_checkable
class Curve(Protocol):
    """Protocol for discount curve implementations."""

    name: str

    def df(self, t: float) -> float:
        """Return discount factor to time t (year-fraction)."""
        ...

    def bumped(self, bump: float) -> Curve:
        """Return new curve with parallel additive rate shift."""
        ...


class Target(Protocol):
    """
    Anything a measure can be calculated for (trade, position, product).

    `target_type` is the stable identifier function dispatch is keyed on.
    """

    target_type: ClassVar[str]


class FxRateProvider(Protocol):
    def fx_rate(self, base: Currency, counter: Currency) -> float:
        """Return the rate converting one unit of base into counter."""
        ...


@runtime_checkable
class FxConvertible(Protocol):
    """A single value that can be converted to another currency given FX rates."""

    def convert_with(self, result_currency: Currency, fx: FxRateProvider) -> Any:
        ...


@runtime_checkable
class CurrencyConvertible(Protocol):
    """
    A scenario result that converts itself to a reporting currency, pulling
    one FX rate per scenario from the calculation market data.
    """

    def convert_to(self, currency: Currency, market_data: CalculationMarketData) -> Any:
        ...


class Pricer(Protocol):
    """Narrow pricing interface consumed by the calculation functions."""

    def present_value(self, product: Any, rates: RatesProvider) -> CurrencyAmount:
        ...

    def present_value_sensitivity(
        self, product: Any, rates: RatesProvider, currency: Currency, bump_bp: float = 1.0
    ) -> CurrencyAmount:
        ...

    def explain_present_value(self, product: Any, rates: RatesProvider) -> dict[str, Any]:
        ...


class ObservableSource(Protocol):
    """External provider of raw observable market data (quotes)."""

    def fetch(self, ids: Iterable[MarketDataId]) -> Mapping[MarketDataId, MarketDataBox]:
        """Return boxes for the ids it knows; ids it cannot supply are left out."""
        ...
