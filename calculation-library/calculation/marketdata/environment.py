"""
Immutable, scenario-indexed market-data store.

Each id maps to a `MarketDataBox` (one shared value, or one value per
scenario) or to the `Failure` explaining why it could not be built. A
per-scenario box must hold exactly `scenario_count` values; that is checked
when the environment is built, never on lookup.
"""

from __future__ import annotations

from datetime import date
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Sequence

from calculation.errors import MarketDataBuildError, MissingMarketDataError, ScenarioMismatchError
from calculation.marketdata.box import MarketDataBox
from calculation.marketdata.ids import MarketDataId
from calculation.result import Failure, FailureReason


def _check_box(label: str, box: MarketDataBox[Any], scenario_count: int) -> None:
    if not box.is_single and box.scenario_count != scenario_count:
        raise ScenarioMismatchError(
            f"Number of values ({box.scenario_count}) for {label} must match "
            f"the scenario count ({scenario_count})",
            observed=box.scenario_count,
            expected=scenario_count,
        )


class ScenarioMarketDataEnvironment:
    """Read-only after construction; safe to share between threads."""

    def __init__(
        self,
        scenario_count: int,
        valuation_date: MarketDataBox[date],
        values: Optional[Mapping[MarketDataId, MarketDataBox[Any]]] = None,
        failures: Optional[Mapping[MarketDataId, Failure]] = None,
    ) -> None:
        if scenario_count < 1:
            raise ValueError(f"scenario_count must be >= 1, got {scenario_count}")
        _check_box("valuation date", valuation_date, scenario_count)
        values = dict(values or {})
        for market_data_id, box in values.items():
            _check_box(str(market_data_id), box, scenario_count)
        failures = {k: v for k, v in (failures or {}).items() if k not in values}
        self._scenario_count = scenario_count
        self._valuation_date = valuation_date
        self._values = MappingProxyType(values)
        self._failures = MappingProxyType(failures)

    @staticmethod
    def builder(scenario_count: int, valuation_date: "date | Sequence[date]") -> "EnvironmentBuilder":
        return EnvironmentBuilder(scenario_count, valuation_date)

    @staticmethod
    def empty(scenario_count: int, valuation_date: "date | Sequence[date]") -> "ScenarioMarketDataEnvironment":
        return EnvironmentBuilder(scenario_count, valuation_date).build()

    @property
    def scenario_count(self) -> int:
        return self._scenario_count

    @property
    def valuation_date(self) -> MarketDataBox[date]:
        return self._valuation_date

    def valuation_date_for(self, scenario_index: int) -> date:
        return self._valuation_date.value_for(scenario_index)

    def ids(self) -> frozenset[MarketDataId]:
        return frozenset(self._values)

    def failed_ids(self) -> frozenset[MarketDataId]:
        return frozenset(self._failures)

    def contains(self, market_data_id: MarketDataId) -> bool:
        return market_data_id in self._values

    def is_resolved(self, market_data_id: MarketDataId) -> bool:
        """True once the id holds either a value or a failure."""
        return market_data_id in self._values or market_data_id in self._failures

    def failure(self, market_data_id: MarketDataId) -> Optional[Failure]:
        return self._failures.get(market_data_id)

    def box(self, market_data_id: MarketDataId) -> MarketDataBox[Any]:
        """
        Return the box for an id. Raises MissingMarketDataError when nothing is
        held, or the recorded failure's error when building it failed.
        """
        box = self._values.get(market_data_id)
        if box is not None:
            return box
        failure = self._failures.get(market_data_id)
        if failure is None:
            raise MissingMarketDataError(f"No market data available for {market_data_id}")
        if failure.reason == FailureReason.MISSING_DATA:
            raise MissingMarketDataError(failure.message)
        raise MarketDataBuildError(f"Market data {market_data_id} failed to build: {failure.message}")

    def value(self, market_data_id: MarketDataId, scenario_index: int = 0) -> Any:
        return self.box(market_data_id).value_for(scenario_index)

    def with_results(
        self,
        values: Mapping[MarketDataId, MarketDataBox[Any]],
        failures: Optional[Mapping[MarketDataId, Failure]] = None,
    ) -> "ScenarioMarketDataEnvironment":
        """Return a new environment with extra values and failures added."""
        merged_values = dict(self._values)
        merged_values.update(values)
        merged_failures = dict(self._failures)
        merged_failures.update(failures or {})
        return ScenarioMarketDataEnvironment(
            self._scenario_count, self._valuation_date, merged_values, merged_failures
        )

    def __repr__(self) -> str:
        return (
            f"ScenarioMarketDataEnvironment(scenarios={self._scenario_count}, "
            f"values={len(self._values)}, failures={len(self._failures)})"
        )


class EnvironmentBuilder:
    """Mutable builder; `build()` validates every box against the scenario count."""

    def __init__(self, scenario_count: int, valuation_date: "date | Sequence[date]") -> None:
        if scenario_count < 1:
            raise ValueError(f"scenario_count must be >= 1, got {scenario_count}")
        self._scenario_count = scenario_count
        if isinstance(valuation_date, date):
            self._valuation_date: MarketDataBox[date] = MarketDataBox.single(valuation_date)
        else:
            self._valuation_date = MarketDataBox.scenarios(valuation_date)
        self._values: dict[MarketDataId, MarketDataBox[Any]] = {}
        self._failures: dict[MarketDataId, Failure] = {}

    def add_value(self, market_data_id: MarketDataId, value: Any) -> "EnvironmentBuilder":
        """Add a value shared by every scenario."""
        self._values[market_data_id] = MarketDataBox.single(value)
        return self

    def add_values(self, market_data_id: MarketDataId, values: Iterable[Any]) -> "EnvironmentBuilder":
        """Add one value per scenario."""
        box = MarketDataBox.scenarios(values)
        _check_box(str(market_data_id), box, self._scenario_count)
        self._values[market_data_id] = box
        return self

    def add_box(self, market_data_id: MarketDataId, box: MarketDataBox[Any]) -> "EnvironmentBuilder":
        _check_box(str(market_data_id), box, self._scenario_count)
        self._values[market_data_id] = box
        return self

    def add_failure(self, market_data_id: MarketDataId, failure: Failure) -> "EnvironmentBuilder":
        self._failures[market_data_id] = failure
        return self

    def build(self) -> ScenarioMarketDataEnvironment:
        return ScenarioMarketDataEnvironment(
            self._scenario_count, self._valuation_date, self._values, self._failures
        )
