"""
Scenario market-data builder.

Two steps:

1. `resolve()` walks requirements in rounds over a frontier: every new
   derived id asks its market-data function for its own requirements, until a
   round discovers nothing new. The resulting dependency graph is split into
   topological layers; ids left over sit on (or depend on) a cycle.
2. `build()` fills the environment layer by layer. Observables come from the
   supplied environment or the `ObservableSource`; derived ids in one layer
   are built concurrently on a bounded thread pool. A failure is recorded
   against its id only, and ids depending on it fail when they look it up.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence

from calculation.errors import CalculationError, DependencyCycleError
from calculation.interfaces import ObservableSource
from calculation.marketdata.box import MarketDataBox
from calculation.marketdata.config import MarketDataConfig
from calculation.marketdata.environment import ScenarioMarketDataEnvironment
from calculation.marketdata.ids import MarketDataId
from calculation.marketdata.registry import MarketDataFunctionRegistry, create_default_registry
from calculation.marketdata.requirements import MarketDataRequirements
from calculation.result import Failure, FailureReason
from calculation.settings import DEFAULT_MAX_BUILD_WORKERS

LOGGER = logging.getLogger(__name__)


def _failure_from(exc: Exception) -> Failure:
    reason = exc.reason if isinstance(exc, CalculationError) else FailureReason.BUILD_FAILED
    return Failure(reason, str(exc) or type(exc).__name__)


@dataclass(frozen=True)
class ResolvedRequirements:
    """Transitively closed dependency graph, in build order."""

    dependencies: Mapping[MarketDataId, frozenset[MarketDataId]]
    layers: tuple[frozenset[MarketDataId], ...]
    failures: Mapping[MarketDataId, Failure] = field(default_factory=dict)
    rounds: int = 0

    def all_ids(self) -> frozenset[MarketDataId]:
        return frozenset(self.dependencies)

    def to_requirements(self) -> MarketDataRequirements:
        return MarketDataRequirements.of(*self.dependencies)


def _layers(
    dependencies: Mapping[MarketDataId, frozenset[MarketDataId]],
) -> tuple[tuple[frozenset[MarketDataId], ...], frozenset[MarketDataId]]:
    """Kahn layering. Returns (layers, ids that never became ready)."""
    remaining = {k: set(v) for k, v in dependencies.items()}
    layers: list[frozenset[MarketDataId]] = []
    while remaining:
        ready = frozenset(k for k, deps in remaining.items() if not deps)
        if not ready:
            break
        layers.append(ready)
        for k in ready:
            del remaining[k]
        for deps in remaining.values():
            deps -= ready
    return tuple(layers), frozenset(remaining)


class MarketDataBuilder:
    """
    Builds a `ScenarioMarketDataEnvironment` for a set of requirements.
    Stateless between calls; one instance serves every request.
    """

    def __init__(
        self,
        registry: Optional[MarketDataFunctionRegistry] = None,
        observable_source: Optional[ObservableSource] = None,
        max_workers: int = DEFAULT_MAX_BUILD_WORKERS,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self._registry = registry or create_default_registry()
        self._observable_source = observable_source
        self._max_workers = max_workers

    @property
    def registry(self) -> MarketDataFunctionRegistry:
        return self._registry

    def resolve(
        self,
        requirements: MarketDataRequirements,
        config: MarketDataConfig,
        supplied: Optional[ScenarioMarketDataEnvironment] = None,
    ) -> ResolvedRequirements:
        """Close the requirements under dependency. Ids already in `supplied` are leaves."""

        def needed(market_data_id: MarketDataId) -> bool:
            return supplied is None or not supplied.is_resolved(market_data_id)

        dependencies: dict[MarketDataId, frozenset[MarketDataId]] = {}
        failures: dict[MarketDataId, Failure] = {}
        frontier = [i for i in requirements.all_ids() if needed(i)]
        rounds = 0
        while frontier:
            rounds += 1
            discovered: list[MarketDataId] = []
            for market_data_id in frontier:
                if market_data_id in dependencies:
                    continue
                deps: frozenset[MarketDataId] = frozenset()
                if not market_data_id.observable:
                    function = self._registry.function_for(market_data_id)
                    if function is None:
                        failures[market_data_id] = Failure(
                            FailureReason.MISSING_DATA,
                            f"No market data function available to build {market_data_id}",
                        )
                    else:
                        try:
                            own = function.requirements(market_data_id, config)
                        except Exception as exc:  # noqa: BLE001
                            failures[market_data_id] = _failure_from(exc)
                        else:
                            deps = frozenset(i for i in own.all_ids() if needed(i))
                dependencies[market_data_id] = deps
                discovered.extend(d for d in deps if d not in dependencies)
            LOGGER.debug("Resolution round %d discovered %d ids", rounds, len(discovered))
            frontier = discovered

        layers, stuck = _layers(dependencies)
        if stuck:
            names = ", ".join(sorted(str(i) for i in stuck))
            error = DependencyCycleError(f"Market data dependency cycle involving: {names}")
            for market_data_id in stuck:
                failures.setdefault(market_data_id, _failure_from(error))
            layers = layers + (stuck,)
            LOGGER.warning("%s", error)
        return ResolvedRequirements(
            dependencies=MappingProxyType(dependencies),
            layers=layers,
            failures=MappingProxyType(failures),
            rounds=rounds,
        )

    def build(
        self,
        requirements: MarketDataRequirements,
        config: MarketDataConfig,
        supplied: ScenarioMarketDataEnvironment,
    ) -> ScenarioMarketDataEnvironment:
        """Return `supplied` plus a value or failure for every required id."""
        resolved = self.resolve(requirements, config, supplied)
        environment = supplied.with_results({}, resolved.failures)
        for depth, layer in enumerate(resolved.layers):
            pending = [i for i in layer if not environment.is_resolved(i)]
            if not pending:
                continue
            observables = [i for i in pending if i.observable]
            derived = [i for i in pending if not i.observable]
            values, failures = self._source_observables(observables, environment.scenario_count)
            built, build_failures = self._build_layer(derived, environment, config)
            values.update(built)
            failures.update(build_failures)
            for market_data_id, failure in failures.items():
                LOGGER.warning("Market data %s unavailable: %s", market_data_id, failure)
            environment = environment.with_results(values, failures)
            LOGGER.debug(
                "Layer %d: %d built, %d failed", depth, len(values), len(failures)
            )
        LOGGER.info(
            "Market data built in %d layers: %d values, %d failures",
            len(resolved.layers), len(environment.ids()), len(environment.failed_ids()),
        )
        return environment

    def _source_observables(
        self, ids: Sequence[MarketDataId], scenario_count: int
    ) -> tuple[dict[MarketDataId, MarketDataBox[Any]], dict[MarketDataId, Failure]]:
        values: dict[MarketDataId, MarketDataBox[Any]] = {}
        failures: dict[MarketDataId, Failure] = {}
        fetched: Mapping[MarketDataId, MarketDataBox[Any]] = {}
        if ids and self._observable_source is not None:
            try:
                fetched = self._observable_source.fetch(ids)
            except Exception as exc:  # noqa: BLE001
                LOGGER.warning("Observable source failed for %d ids: %s", len(ids), exc)
                message = f"Observable source failed: {str(exc) or type(exc).__name__}"
                return values, {i: Failure(FailureReason.MISSING_DATA, message) for i in ids}
        for market_data_id in ids:
            box = fetched.get(market_data_id)
            if box is None:
                failures[market_data_id] = Failure(
                    FailureReason.MISSING_DATA,
                    f"No value available for observable market data {market_data_id}",
                )
                continue
            failure = _check_scenarios(market_data_id, box, scenario_count)
            if failure is None:
                values[market_data_id] = box
            else:
                failures[market_data_id] = failure
        return values, failures

    def _build_layer(
        self,
        ids: Sequence[MarketDataId],
        environment: ScenarioMarketDataEnvironment,
        config: MarketDataConfig,
    ) -> tuple[dict[MarketDataId, MarketDataBox[Any]], dict[MarketDataId, Failure]]:

        def build_one(market_data_id: MarketDataId) -> tuple[MarketDataId, Any]:
            function = self._registry.function_for(market_data_id)
            assert function is not None
            LOGGER.debug("Building %s with %r", market_data_id, function)
            try:
                box = function.build(market_data_id, environment, config)
            except Exception as exc:  # noqa: BLE001
                return market_data_id, _failure_from(exc)
            return market_data_id, _check_scenarios(market_data_id, box, environment.scenario_count) or box

        if len(ids) <= 1 or self._max_workers == 1:
            outcomes = [build_one(i) for i in ids]
        else:
            with ThreadPoolExecutor(
                max_workers=min(self._max_workers, len(ids)),
                thread_name_prefix="marketdata-build",
            ) as pool:
                outcomes = list(pool.map(build_one, ids))

        values: dict[MarketDataId, MarketDataBox[Any]] = {}
        failures: dict[MarketDataId, Failure] = {}
        for market_data_id, outcome in outcomes:
            if isinstance(outcome, Failure):
                failures[market_data_id] = outcome
            else:
                values[market_data_id] = outcome
        return values, failures


def _check_scenarios(
    market_data_id: MarketDataId, box: MarketDataBox[Any], scenario_count: int
) -> Optional[Failure]:
    if box.is_single or box.scenario_count == scenario_count:
        return None
    return Failure(
        FailureReason.SCENARIO_MISMATCH,
        f"Number of values ({box.scenario_count}) for {market_data_id} must match "
        f"the scenario count ({scenario_count})",
    )
