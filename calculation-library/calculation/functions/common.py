"""Calculation functions shared by the product function groups, built around a pricer."""

from __future__ import annotations

from typing import Any, Callable, ClassVar, Iterable, Optional

from calculation.currency import Currency, CurrencyAmount
from calculation.functions.base import CalculationFunction, PerScenarioFunction
from calculation.marketdata.keys import MarketDataKey
from calculation.marketdata.requirements import FunctionRequirements
from calculation.marketdata.view import CalculationMarketData, SingleScenarioMarketData
from calculation.pricers.base import BasePricer
from calculation.rates import RatesProvider
from calculation.scenario_results import CurrencyValuesArray, DefaultScenarioResult, ScenarioResult

KeysFn = Callable[[Any], Iterable[MarketDataKey]]
CurrencyFn = Callable[[Any], Currency]


class PricerFunction(PerScenarioFunction):
    """
    A per-scenario function over a pricer. `keys` lists the market data the
    product needs; `currency` is the currency its values are in.
    """

    def __init__(self, pricer: BasePricer, keys: KeysFn, currency: CurrencyFn) -> None:
        self.pricer = pricer
        self._keys = keys
        self._currency = currency

    def requirements(self, target: Any) -> FunctionRequirements:
        return FunctionRequirements.of(*self._keys(target), output_currencies=[self._currency(target)])

    def default_reporting_currency(self, target: Any) -> Optional[Currency]:
        return self._currency(target)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({type(self.pricer).__name__})"


class PresentValueFunction(PricerFunction):
    """Present value in every scenario, as one `CurrencyValuesArray`."""

    def execute(self, target: Any, market_data: CalculationMarketData) -> ScenarioResult:
        return CurrencyValuesArray.from_amounts(
            [self.execute_scenario(target, scenario) for scenario in market_data.scenarios()]
        )

    def execute_scenario(self, target: Any, market_data: SingleScenarioMarketData) -> CurrencyAmount:
        return self.pricer.present_value(target, RatesProvider(market_data))


class PresentValueSensitivityFunction(PricerFunction):
    """PV01: sum of the PV changes for a 1bp parallel bump of each curve in `curve_currencies`."""

    def __init__(
        self,
        pricer: BasePricer,
        keys: KeysFn,
        currency: CurrencyFn,
        curve_currencies: Callable[[Any], Iterable[Currency]],
        bump_bp: float = 1.0,
    ) -> None:
        super().__init__(pricer, keys, currency)
        self._curve_currencies = curve_currencies
        self.bump_bp = bump_bp

    def execute_scenario(self, target: Any, market_data: SingleScenarioMarketData) -> CurrencyAmount:
        rates = RatesProvider(market_data)
        total = CurrencyAmount(self._currency(target), 0.0)
        for currency in self._curve_currencies(target):
            total = total.plus(self.pricer.present_value_sensitivity(target, rates, currency, self.bump_bp))
        return total


class ExplainPresentValueFunction(PricerFunction):
    convert_currencies: ClassVar[bool] = False

    def requirements(self, target: Any) -> FunctionRequirements:
        return FunctionRequirements.of(*self._keys(target))

    def execute_scenario(self, target: Any, market_data: SingleScenarioMarketData) -> dict[str, Any]:
        return self.pricer.explain_present_value(target, RatesProvider(market_data))


class NotionalFunction(CalculationFunction):
    """Contractual notional; needs no market data and is never converted."""

    def __init__(self, notional: Callable[[Any], CurrencyAmount]) -> None:
        self._notional = notional

    def requirements(self, target: Any) -> FunctionRequirements:
        return FunctionRequirements.empty()

    def execute(self, target: Any, market_data: CalculationMarketData) -> ScenarioResult:
        return DefaultScenarioResult((self._notional(target),) * market_data.scenario_count)
