"""
Scenario definitions: turn one base market state into N scenario states by
shifting observable quotes.

A `QuoteShifts` perturbation holds one shift per scenario and applies it to a
set of tickers, either added to the quote (ABSOLUTE) or as a proportion of it
(RELATIVE, 0.1 = +10%).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

from calculation.errors import ScenarioMismatchError
from calculation.marketdata.box import MarketDataBox
from calculation.marketdata.environment import ScenarioMarketDataEnvironment
from calculation.marketdata.ids import NO_FEED, MarketDataFeed, QuoteId


class ShiftType(Enum):
    ABSOLUTE = "ABSOLUTE"
    RELATIVE = "RELATIVE"

    def apply(self, value: float, shift: float) -> float:
        if self is ShiftType.ABSOLUTE:
            return value + shift
        return value * (1.0 + shift)


@dataclass(frozen=True)
class QuoteShifts:
    tickers: tuple[str, ...]
    shifts: tuple[float, ...]
    shift_type: ShiftType = ShiftType.ABSOLUTE
    feed: MarketDataFeed = NO_FEED

    def __post_init__(self) -> None:
        object.__setattr__(self, "tickers", tuple(self.tickers))
        object.__setattr__(self, "shifts", tuple(float(s) for s in self.shifts))
        if not self.shifts:
            raise ValueError("QuoteShifts needs at least one shift")

    @property
    def scenario_count(self) -> int:
        return len(self.shifts)

    def ids(self) -> list[QuoteId]:
        return [QuoteId(ticker, self.feed) for ticker in self.tickers]

    def apply_to(self, box: MarketDataBox[Any]) -> MarketDataBox[float]:
        base = box.values_for(self.scenario_count)
        return MarketDataBox.scenarios(
            self.shift_type.apply(float(value), shift) for value, shift in zip(base, self.shifts)
        )


class ScenarioDefinition:
    """Ordered perturbations that all agree on the number of scenarios."""

    def __init__(self, perturbations: Sequence[QuoteShifts]) -> None:
        if not perturbations:
            raise ValueError("A scenario definition needs at least one perturbation")
        count = perturbations[0].scenario_count
        for perturbation in perturbations[1:]:
            if perturbation.scenario_count != count:
                raise ScenarioMismatchError(
                    f"Number of shifts ({perturbation.scenario_count}) must match "
                    f"the scenario count ({count})",
                    observed=perturbation.scenario_count,
                    expected=count,
                )
        self._perturbations = tuple(perturbations)
        self._scenario_count = count

    @property
    def scenario_count(self) -> int:
        return self._scenario_count

    @property
    def perturbations(self) -> tuple[QuoteShifts, ...]:
        return self._perturbations

    def apply(self, environment: ScenarioMarketDataEnvironment) -> ScenarioMarketDataEnvironment:
        """
        Return an environment with `scenario_count` scenarios. The base must
        hold a single scenario, or already the same number of scenarios.
        Unshifted values are shared by every scenario.
        """
        count = self._scenario_count
        base_count = environment.scenario_count
        if base_count not in (1, count):
            raise ScenarioMismatchError(
                f"Number of shifts ({count}) must match the scenario count ({base_count})",
                observed=count,
                expected=base_count,
            )
        dates = _shared(environment.valuation_date)
        valuation_date = dates.single_value if dates.is_single else dates.values
        builder = ScenarioMarketDataEnvironment.builder(count, valuation_date)
        for market_data_id in environment.ids():
            builder.add_box(market_data_id, _shared(environment.box(market_data_id)))
        for market_data_id in environment.failed_ids():
            failure = environment.failure(market_data_id)
            assert failure is not None
            builder.add_failure(market_data_id, failure)
        for perturbation in self._perturbations:
            for quote_id in perturbation.ids():
                # A missing quote stays missing and fails when it is used.
                if environment.contains(quote_id):
                    builder.add_box(quote_id, perturbation.apply_to(_shared(environment.box(quote_id))))
        return builder.build()


def _shared(box: MarketDataBox[Any]) -> MarketDataBox[Any]:
    """A one-scenario box is the same value in every scenario."""
    if not box.is_single and box.scenario_count == 1:
        return MarketDataBox.single(box.values[0])
    return box
