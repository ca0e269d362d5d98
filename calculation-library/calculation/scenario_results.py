"""
Scenario results: one value per scenario, in scenario order.

- `DefaultScenarioResult`: any values, never converted.
- `CurrencyValuesArray`: one currency and a float per scenario; converts to a
  reporting currency with one FX rate per scenario.
- `FxConvertibleList`: per-scenario values that each know how to convert
  themselves given an FX rate provider.

`to_scenario_result` collects per-scenario outputs into the right variant.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Sequence

from calculation.currency import Currency, CurrencyAmount
from calculation.errors import (
    ConversionUnavailableError,
    MarketDataBuildError,
    MissingMarketDataError,
    ScenarioMismatchError,
)
from calculation.interfaces import FxConvertible

if TYPE_CHECKING:
    from calculation.marketdata.view import CalculationMarketData


class ScenarioResult(ABC):
    """Immutable sequence of per-scenario values."""

    @property
    @abstractmethod
    def values(self) -> tuple[Any, ...]:
        ...

    @property
    def scenario_count(self) -> int:
        return len(self.values)

    def get(self, scenario_index: int) -> Any:
        return self.values[scenario_index]

    def __getitem__(self, scenario_index: int) -> Any:
        return self.get(scenario_index)

    def __len__(self) -> int:
        return self.scenario_count

    def __iter__(self) -> Iterator[Any]:
        return (self.get(i) for i in range(self.scenario_count))


@dataclass(frozen=True)
class DefaultScenarioResult(ScenarioResult):
    items: tuple[Any, ...]

    @staticmethod
    def of(values: Iterable[Any]) -> "DefaultScenarioResult":
        return DefaultScenarioResult(tuple(values))

    @property
    def values(self) -> tuple[Any, ...]:
        return self.items


def _conversion_unavailable(source: Currency, target: Currency, exc: Exception) -> ConversionUnavailableError:
    return ConversionUnavailableError(
        f"No market data available for converting {source} to {target}: {exc}"
    )


@dataclass(frozen=True)
class CurrencyValuesArray(ScenarioResult):
    """Amounts in one currency, one per scenario. Items are `CurrencyAmount`s."""

    currency: Currency
    amounts: tuple[float, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "amounts", tuple(float(a) for a in self.amounts))

    @staticmethod
    def of(currency: "str | Currency", amounts: Iterable[float]) -> "CurrencyValuesArray":
        return CurrencyValuesArray(Currency.of(currency), tuple(amounts))

    @staticmethod
    def from_amounts(amounts: Sequence[CurrencyAmount]) -> "CurrencyValuesArray":
        if not amounts:
            raise ValueError("Cannot build a CurrencyValuesArray from no amounts")
        currency = amounts[0].currency
        for amount in amounts:
            if amount.currency != currency:
                raise ValueError(f"Mixed currencies {currency} and {amount.currency}")
        return CurrencyValuesArray(currency, tuple(a.amount for a in amounts))

    @property
    def values(self) -> tuple[CurrencyAmount, ...]:
        return tuple(CurrencyAmount(self.currency, a) for a in self.amounts)

    def get(self, scenario_index: int) -> CurrencyAmount:
        return CurrencyAmount(self.currency, self.amounts[scenario_index])

    @property
    def scenario_count(self) -> int:
        return len(self.amounts)

    def convert_to(self, currency: Currency, market_data: "CalculationMarketData") -> "CurrencyValuesArray":
        """
        values[i] * rate[i] where rate[i] converts this currency into `currency`
        in scenario i. No FX data is read when the currency already matches.
        """
        if currency == self.currency:
            return self
        try:
            rates = market_data.fx_rates(self.currency, currency)
        except (MissingMarketDataError, MarketDataBuildError) as exc:
            raise _conversion_unavailable(self.currency, currency, exc) from exc
        if len(rates) != len(self.amounts):
            raise ScenarioMismatchError(
                f"Number of rates ({len(rates)}) must be the same as the number of values ({len(self.amounts)})",
                observed=len(rates),
                expected=len(self.amounts),
            )
        return CurrencyValuesArray(
            currency,
            tuple(a * r.fx_rate(self.currency, currency) for a, r in zip(self.amounts, rates)),
        )


@dataclass(frozen=True)
class FxConvertibleList(ScenarioResult):
    """Per-scenario values that are each `FxConvertible`."""

    items: tuple[Any, ...]

    @property
    def values(self) -> tuple[Any, ...]:
        return self.items

    def convert_to(self, currency: Currency, market_data: "CalculationMarketData") -> ScenarioResult:
        if len(self.items) != market_data.scenario_count:
            raise ScenarioMismatchError(
                f"Number of scenarios ({market_data.scenario_count}) must be the same as "
                f"the number of values ({len(self.items)})",
                observed=market_data.scenario_count,
                expected=len(self.items),
            )
        converted = []
        for i, item in enumerate(self.items):
            try:
                converted.append(item.convert_with(currency, market_data.scenario(i)))
            except (MissingMarketDataError, MarketDataBuildError) as exc:
                raise ConversionUnavailableError(
                    f"No market data available for converting scenario {i} to {currency}: {exc}"
                ) from exc
        if all(isinstance(v, CurrencyAmount) for v in converted):
            return CurrencyValuesArray.from_amounts(converted)
        return DefaultScenarioResult(tuple(converted))


def to_scenario_result(values: Iterable[Any], convert_currencies: bool = True) -> ScenarioResult:
    """
    Collect per-scenario values. With `convert_currencies`, a list in which
    every value is FX-convertible becomes an `FxConvertibleList` (an empty
    list included); anything else is a `DefaultScenarioResult`.
    """
    collected = tuple(values)
    if convert_currencies and all(isinstance(v, FxConvertible) for v in collected):
        return FxConvertibleList(collected)
    return DefaultScenarioResult(collected)
