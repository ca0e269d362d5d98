"""
Pricing rules: which function calculates a measure for a target.

Rules are keyed on the target's `target_type` tag. For each target type the
function groups are searched in order; the first group configuring the
measure wins.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable

from calculation.errors import UnsupportedMeasureError
from calculation.functions.base import CalculationFunction
from calculation.functions.groups import FunctionGroup
from calculation.measures import Measure


def target_type_of(target: Any) -> str:
    """The dispatch tag of a target; the class name if it declares none."""
    return getattr(target, "target_type", None) or type(target).__name__


class PricingRules:
    def __init__(self, groups: Iterable[FunctionGroup]) -> None:
        by_type: dict[str, list[FunctionGroup]] = {}
        for group in groups:
            by_type.setdefault(group.target_type, []).append(group)
        self._groups = MappingProxyType({k: tuple(v) for k, v in by_type.items()})

    @staticmethod
    def of(*groups: FunctionGroup) -> "PricingRules":
        return PricingRules(groups)

    @property
    def target_types(self) -> frozenset[str]:
        return frozenset(self._groups)

    def groups_for(self, target_type: str) -> tuple[FunctionGroup, ...]:
        return self._groups.get(target_type, ())

    def configured_measures(self, target: Any) -> frozenset[Measure]:
        measures: set[Measure] = set()
        for group in self.groups_for(target_type_of(target)):
            measures |= group.configured_measures
        return frozenset(measures)

    def function_for(self, target: Any, measure: Measure) -> CalculationFunction:
        """Raises UnsupportedMeasureError if no group for the target type configures the measure."""
        target_type = target_type_of(target)
        for group in self.groups_for(target_type):
            function = group.function(measure)
            if function is not None:
                return function
        raise UnsupportedMeasureError(target_type, measure)
