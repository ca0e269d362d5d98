"""
Registry of market-data functions keyed by the `value_type` tag of the ids
they build. Built once at startup and never mutated afterwards.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Optional

from calculation.marketdata.functions import (
    CurveGroupMarketDataFunction,
    DiscountCurveMarketDataFunction,
    FxRateMarketDataFunction,
    MarketDataFunction,
    MissingMappingMarketDataFunction,
)
from calculation.marketdata.ids import MarketDataId


class MarketDataFunctionRegistry:
    def __init__(self, functions: Iterable[MarketDataFunction]) -> None:
        by_type: dict[str, MarketDataFunction] = {}
        for function in functions:
            if function.value_type in by_type:
                raise ValueError(
                    f"More than one market data function registered for {function.value_type}"
                )
            by_type[function.value_type] = function
        self._functions = MappingProxyType(by_type)

    def function_for(self, market_data_id: MarketDataId) -> Optional[MarketDataFunction]:
        return self._functions.get(market_data_id.value_type)

    @property
    def value_types(self) -> frozenset[str]:
        return frozenset(self._functions)

    def with_functions(self, *functions: MarketDataFunction) -> "MarketDataFunctionRegistry":
        """New registry with extra functions; replacing an existing value type is an error."""
        return MarketDataFunctionRegistry([*self._functions.values(), *functions])


def create_default_registry() -> MarketDataFunctionRegistry:
    """Registry with every built-in market-data function."""
    return MarketDataFunctionRegistry([
        MissingMappingMarketDataFunction(),
        FxRateMarketDataFunction(),
        CurveGroupMarketDataFunction(),
        DiscountCurveMarketDataFunction(),
    ])
