"""
Calculation-facing views over a `ScenarioMarketDataEnvironment`.

`CalculationMarketData` answers key-based lookups for all scenarios at once,
applying the mappings layer. `SingleScenarioMarketData` pins one scenario
index, so a function written for one market state sees only that scenario.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Iterator

from calculation.currency import Currency, FxRate
from calculation.marketdata.box import MarketDataBox
from calculation.marketdata.environment import ScenarioMarketDataEnvironment
from calculation.marketdata.ids import MarketDataId
from calculation.marketdata.keys import FxRateKey, MarketDataKey
from calculation.marketdata.mappings import MarketDataMappings


class CalculationMarketData:
    def __init__(self, environment: ScenarioMarketDataEnvironment, mappings: MarketDataMappings) -> None:
        self._environment = environment
        self._mappings = mappings

    @property
    def environment(self) -> ScenarioMarketDataEnvironment:
        return self._environment

    @property
    def mappings(self) -> MarketDataMappings:
        return self._mappings

    @property
    def scenario_count(self) -> int:
        return self._environment.scenario_count

    def valuation_date(self, scenario_index: int = 0) -> date:
        return self._environment.valuation_date_for(scenario_index)

    def id_for(self, key: MarketDataKey) -> MarketDataId:
        return self._mappings.id_for(key)

    def contains(self, key: MarketDataKey) -> bool:
        return self._environment.contains(self.id_for(key))

    def get_box(self, key: MarketDataKey) -> MarketDataBox[Any]:
        """Raises MissingMarketDataError if the key has no value."""
        return self._environment.box(self.id_for(key))

    def get_values(self, key: MarketDataKey) -> tuple[Any, ...]:
        """One value per scenario; a shared value is repeated."""
        return self.get_box(key).values_for(self.scenario_count)

    def get_value(self, key: MarketDataKey, scenario_index: int) -> Any:
        return self.get_box(key).value_for(scenario_index)

    def fx_rates(self, base: Currency, counter: Currency) -> tuple[FxRate, ...]:
        if base == counter:
            return (FxRate.of(base, counter, 1.0),) * self.scenario_count
        return self.get_values(FxRateKey.of(base, counter))

    def scenario(self, scenario_index: int) -> "SingleScenarioMarketData":
        if not 0 <= scenario_index < self.scenario_count:
            raise IndexError(f"Scenario index {scenario_index} out of range for {self.scenario_count} scenarios")
        return SingleScenarioMarketData(self, scenario_index)

    def scenarios(self) -> Iterator["SingleScenarioMarketData"]:
        for i in range(self.scenario_count):
            yield SingleScenarioMarketData(self, i)


class SingleScenarioMarketData:
    """Market data as seen from one scenario. Also an `FxRateProvider`."""

    def __init__(self, market_data: CalculationMarketData, scenario_index: int) -> None:
        self._market_data = market_data
        self._scenario_index = scenario_index

    @property
    def scenario_index(self) -> int:
        return self._scenario_index

    @property
    def valuation_date(self) -> date:
        return self._market_data.valuation_date(self._scenario_index)

    def value(self, key: MarketDataKey) -> Any:
        return self._market_data.get_value(key, self._scenario_index)

    def fx_rate(self, base: Currency, counter: Currency) -> float:
        if base == counter:
            return 1.0
        rate: FxRate = self.value(FxRateKey.of(base, counter))
        return rate.fx_rate(base, counter)
