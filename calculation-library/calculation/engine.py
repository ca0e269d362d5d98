"""
Calculation engine: calculates measures for targets across market-data scenarios.

Flow of one request:
- dispatch every (target, measure) cell to a calculation function via the
  pricing rules, and gather the market data the functions ask for
- build that market data once, for all scenarios
- run the cells on a bounded thread pool, converting monetary results into
  the reporting currency
- return a grid of results; a failing cell never fails its siblings
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence

from calculation.currency import Currency
from calculation.functions import CalculationFunction, PricingRules, create_default_rules, target_type_of
from calculation.interfaces import CurrencyConvertible
from calculation.marketdata.builder import MarketDataBuilder
from calculation.marketdata.config import MarketDataConfig
from calculation.marketdata.environment import ScenarioMarketDataEnvironment
from calculation.marketdata.mappings import MarketDataMappings
from calculation.marketdata.requirements import MarketDataRequirements
from calculation.marketdata.scenarios import ScenarioDefinition
from calculation.marketdata.view import CalculationMarketData
from calculation.measures import Measure
from calculation.result import FailureReason, Result
from calculation.scenario_results import ScenarioResult
from calculation.settings import DEFAULT_MAX_WORKERS, EngineSettings

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalculationRequest:
    """
    Targets (rows) and measures (columns) to calculate.

    `market_data` holds the supplied data (usually the observable quotes) and
    fixes the scenario count and valuation date(s). When `scenarios` is given
    it is applied to `market_data` first.
    """

    targets: Sequence[Any]
    measures: Sequence[Measure]
    market_data: ScenarioMarketDataEnvironment
    config: MarketDataConfig = field(default_factory=MarketDataConfig.empty)
    mappings: MarketDataMappings = field(default_factory=MarketDataMappings)
    reporting_currency: Optional[Currency] = None
    scenarios: Optional[ScenarioDefinition] = None


@dataclass(frozen=True)
class CalculationResults:
    """Grid of cell results keyed by (row, column)."""

    targets: tuple[Any, ...]
    measures: tuple[Measure, ...]
    cells: Mapping[tuple[int, int], Result[ScenarioResult]]
    market_data: ScenarioMarketDataEnvironment

    @property
    def row_count(self) -> int:
        return len(self.targets)

    @property
    def column_count(self) -> int:
        return len(self.measures)

    def get(self, row: int, column: int) -> Result[ScenarioResult]:
        return self.cells[(row, column)]

    def column(self, measure: Measure) -> list[Result[ScenarioResult]]:
        col = self.measures.index(measure)
        return [self.cells[(row, col)] for row in range(self.row_count)]

    def failures(self) -> dict[tuple[int, int], Result[ScenarioResult]]:
        return {k: v for k, v in self.cells.items() if v.is_failure}


@dataclass
class _Cell:
    row: int
    column: int
    target: Any
    measure: Measure
    function: Optional[CalculationFunction] = None
    reporting_currency: Optional[Currency] = None
    requirements: MarketDataRequirements = field(default_factory=MarketDataRequirements.empty)
    result: Optional[Result[ScenarioResult]] = None


class CalculationEngine:
    """
    Stateless between requests; one instance can serve concurrent callers.
    Set `cancel` to stop cells that have not started yet, they are reported
    as CANCELLED.
    """

    def __init__(
        self,
        rules: Optional[PricingRules] = None,
        builder: Optional[MarketDataBuilder] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self._rules = rules or create_default_rules()
        self._builder = builder or MarketDataBuilder()
        self._max_workers = max_workers

    @property
    def rules(self) -> PricingRules:
        return self._rules

    def calculate(
        self, request: CalculationRequest, cancel: Optional[threading.Event] = None
    ) -> CalculationResults:
        self._validate(request)
        supplied = request.market_data
        if request.scenarios is not None:
            supplied = request.scenarios.apply(supplied)
        LOGGER.info(
            "Calculating %d targets x %d measures over %d scenarios",
            len(request.targets), len(request.measures), supplied.scenario_count,
        )

        cells = [
            self._dispatch(row, column, target, measure, request)
            for row, target in enumerate(request.targets)
            for column, measure in enumerate(request.measures)
        ]
        requirements = MarketDataRequirements.empty()
        for cell in cells:
            requirements = requirements | cell.requirements

        if requirements.is_empty():
            environment = supplied
        else:
            environment = self._builder.build(requirements, request.config, supplied)
        market_data = CalculationMarketData(environment, request.mappings)

        pending = [c for c in cells if c.result is None]
        if len(pending) <= 1 or self._max_workers == 1:
            for cell in pending:
                cell.result = self._run(cell, market_data, cancel)
        else:
            with ThreadPoolExecutor(
                max_workers=min(self._max_workers, len(pending)),
                thread_name_prefix="calculation",
            ) as pool:
                outcomes = pool.map(lambda c: self._run(c, market_data, cancel), pending)
                for cell, outcome in zip(pending, outcomes):
                    cell.result = outcome

        results = {(c.row, c.column): c.result for c in cells}
        failed = sum(1 for r in results.values() if r is not None and r.is_failure)
        LOGGER.info("Calculated %d cells, %d failed", len(results), failed)
        return CalculationResults(
            targets=tuple(request.targets),
            measures=tuple(request.measures),
            cells=MappingProxyType(results),
            market_data=environment,
        )

    @staticmethod
    def _validate(request: CalculationRequest) -> None:
        if not request.targets:
            raise ValueError("A calculation request needs at least one target")
        for i, target in enumerate(request.targets):
            if target is None:
                raise ValueError(f"Target {i} is None")
        if request.market_data.scenario_count < 1:
            raise ValueError("Scenario count must be >= 1")

    def _dispatch(
        self, row: int, column: int, target: Any, measure: Measure, request: CalculationRequest
    ) -> _Cell:
        cell = _Cell(row, column, target, measure)

        def resolve() -> MarketDataRequirements:
            function = self._rules.function_for(target, measure)
            cell.function = function
            cell.reporting_currency = request.reporting_currency or function.default_reporting_currency(target)
            return MarketDataRequirements.from_function(
                function.requirements(target), request.mappings, cell.reporting_currency
            )

        resolved = Result.of(resolve)
        if resolved.is_success:
            cell.requirements = resolved.value
            LOGGER.debug("Cell (%d, %d) %s/%s -> %r", row, column, target_type_of(target), measure, cell.function)
        else:
            cell.result = resolved
            LOGGER.warning("Cell (%d, %d) not dispatched: %s", row, column, resolved.failure)
        return cell

    @staticmethod
    def _run(
        cell: _Cell, market_data: CalculationMarketData, cancel: Optional[threading.Event]
    ) -> Result[ScenarioResult]:
        if cancel is not None and cancel.is_set():
            return Result.failed(FailureReason.CANCELLED, "Calculation cancelled before it started")
        function = cell.function
        assert function is not None

        def calculate() -> ScenarioResult:
            result = function.execute(cell.target, market_data)
            if cell.reporting_currency is not None and isinstance(result, CurrencyConvertible):
                result = result.convert_to(cell.reporting_currency, market_data)
            return result

        result = Result.of(calculate)
        if result.is_failure:
            LOGGER.warning(
                "Cell (%d, %d) %s failed: %s", cell.row, cell.column, cell.measure, result.failure
            )
        return result


def create_default_engine(settings: Optional[EngineSettings] = None) -> CalculationEngine:
    """Factory for the default engine: built-in rules and market-data functions."""
    settings = settings or EngineSettings.from_env()
    return CalculationEngine(
        rules=create_default_rules(),
        builder=MarketDataBuilder(max_workers=settings.max_build_workers),
        max_workers=settings.max_workers,
    )
