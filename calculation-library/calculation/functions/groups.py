"""Function groups: the calculation functions for the measures of one target type."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from calculation.functions.base import CalculationFunction
from calculation.measures import Measure


class FunctionGroup:
    """Immutable; build with `FunctionGroup.builder(target_type)`."""

    def __init__(self, name: str, target_type: str, functions: Mapping[Measure, CalculationFunction]) -> None:
        self.name = name
        self.target_type = target_type
        self._functions = MappingProxyType(dict(functions))

    @staticmethod
    def builder(target_type: str) -> "FunctionGroupBuilder":
        return FunctionGroupBuilder(target_type)

    @property
    def configured_measures(self) -> frozenset[Measure]:
        return frozenset(self._functions)

    def function(self, measure: Measure) -> Optional[CalculationFunction]:
        return self._functions.get(measure)

    def __repr__(self) -> str:
        measures = sorted(m.name for m in self._functions)
        return f"FunctionGroup({self.name!r}, {self.target_type!r}, {measures})"


class FunctionGroupBuilder:
    def __init__(self, target_type: str) -> None:
        self._target_type = target_type
        self._name = target_type
        self._functions: list[tuple[Measure, CalculationFunction]] = []

    def name(self, name: str) -> "FunctionGroupBuilder":
        self._name = name
        return self

    def add_function(self, measure: Measure, function: CalculationFunction) -> "FunctionGroupBuilder":
        self._functions.append((measure, function))
        return self

    def build(self) -> FunctionGroup:
        """Raises ValueError if a measure was added more than once."""
        functions: dict[Measure, CalculationFunction] = {}
        for measure, function in self._functions:
            if measure in functions:
                raise ValueError(f"Measure {measure} registered more than once in function group {self._name}")
            functions[measure] = function
        return FunctionGroup(self._name, self._target_type, functions)
