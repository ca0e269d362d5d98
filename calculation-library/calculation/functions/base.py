"""
Calculation functions: calculate one measure for one target across every
scenario.

A function declares the market data it needs up front (`requirements`), then
`execute` receives a view holding that data for all N scenarios and returns
one value per scenario. Most functions only know how to price one market
state; they extend `PerScenarioFunction` and implement `execute_scenario`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Optional

from calculation.currency import Currency
from calculation.marketdata.requirements import FunctionRequirements
from calculation.marketdata.view import CalculationMarketData, SingleScenarioMarketData
from calculation.scenario_results import ScenarioResult, to_scenario_result


class CalculationFunction(ABC):
    @abstractmethod
    def requirements(self, target: Any) -> FunctionRequirements:
        """Market data keys needed, plus the currencies the output is in."""
        ...

    @abstractmethod
    def execute(self, target: Any, market_data: CalculationMarketData) -> ScenarioResult:
        ...

    def default_reporting_currency(self, target: Any) -> Optional[Currency]:
        """Currency results are reported in when the request names none."""
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class PerScenarioFunction(CalculationFunction):
    """Runs `execute_scenario` once per scenario, in scenario order."""

    convert_currencies: ClassVar[bool] = True

    def execute(self, target: Any, market_data: CalculationMarketData) -> ScenarioResult:
        return to_scenario_result(
            (self.execute_scenario(target, scenario) for scenario in market_data.scenarios()),
            convert_currencies=self.convert_currencies,
        )

    @abstractmethod
    def execute_scenario(self, target: Any, market_data: SingleScenarioMarketData) -> Any:
        ...
