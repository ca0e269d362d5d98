"""Container for one market-data value shared by all scenarios, or one value per scenario."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Sequence, TypeVar

from calculation.errors import ScenarioMismatchError

T = TypeVar("T")


@dataclass(frozen=True)
class MarketDataBox(Generic[T]):
    """
    Either a single value used in every scenario, or an ordered tuple with
    exactly one value per scenario. Build with `single()` / `scenarios()`.
    """

    values: tuple[T, ...]
    is_single: bool

    @staticmethod
    def single(value: T) -> "MarketDataBox[T]":
        return MarketDataBox(values=(value,), is_single=True)

    @staticmethod
    def scenarios(values: Iterable[T]) -> "MarketDataBox[T]":
        values = tuple(values)
        if not values:
            raise ValueError("A scenario box needs at least one value")
        return MarketDataBox(values=values, is_single=False)

    @property
    def scenario_count(self) -> int:
        """Number of scenario values held; 1 for a single value."""
        return len(self.values)

    @property
    def single_value(self) -> T:
        if not self.is_single:
            raise ValueError("Box holds one value per scenario, not a single value")
        return self.values[0]

    def value_for(self, scenario_index: int) -> T:
        if self.is_single:
            return self.values[0]
        if not 0 <= scenario_index < len(self.values):
            raise IndexError(
                f"Scenario index {scenario_index} out of range for {len(self.values)} scenario values"
            )
        return self.values[scenario_index]

    def values_for(self, scenario_count: int) -> tuple[T, ...]:
        """Expand to exactly scenario_count values."""
        if self.is_single:
            return self.values * scenario_count
        if len(self.values) != scenario_count:
            raise ScenarioMismatchError(
                f"Box holds {len(self.values)} scenario values but {scenario_count} scenarios were expected",
                observed=len(self.values),
                expected=scenario_count,
            )
        return self.values

    def map(self, fn: Callable[[T], Any]) -> "MarketDataBox[Any]":
        if self.is_single:
            return MarketDataBox.single(fn(self.values[0]))
        return MarketDataBox.scenarios(fn(v) for v in self.values)

    @staticmethod
    def combine(boxes: Sequence["MarketDataBox[Any]"], fn: Callable[..., Any]) -> "MarketDataBox[Any]":
        """
        Apply fn across boxes scenario by scenario. The result is single only if
        every input is single; per-scenario inputs must agree on their length.
        """
        multi = [b for b in boxes if not b.is_single]
        if not multi:
            return MarketDataBox.single(fn(*(b.values[0] for b in boxes)))
        count = multi[0].scenario_count
        for box in multi[1:]:
            if box.scenario_count != count:
                raise ScenarioMismatchError(
                    f"Cannot combine boxes with {box.scenario_count} and {count} scenario values",
                    observed=box.scenario_count,
                    expected=count,
                )
        return MarketDataBox.scenarios(
            fn(*(b.value_for(i) for b in boxes)) for i in range(count)
        )
