"""Base class for market-data functions: build one kind of derived market data."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from calculation.marketdata.box import MarketDataBox
from calculation.marketdata.config import MarketDataConfig
from calculation.marketdata.environment import ScenarioMarketDataEnvironment
from calculation.marketdata.ids import MarketDataId
from calculation.marketdata.requirements import MarketDataRequirements


class MarketDataFunction(ABC):
    """
    Builds values for ids of one `value_type`.

    `requirements()` names the data the value is derived from; `build()` is only
    called once all of it is resolved in the environment it receives. Failures
    are raised (CalculationError subclasses) and recorded against the id by
    the builder. Implementations hold no state and are shared across requests.
    """

    value_type: ClassVar[str]

    @abstractmethod
    def requirements(self, market_data_id: Any, config: MarketDataConfig) -> MarketDataRequirements:
        ...

    @abstractmethod
    def build(
        self,
        market_data_id: Any,
        market_data: ScenarioMarketDataEnvironment,
        config: MarketDataConfig,
    ) -> MarketDataBox[Any]:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def dependency(market_data: ScenarioMarketDataEnvironment, market_data_id: MarketDataId) -> MarketDataBox[Any]:
    """Box of a dependency; raises the dependency's own failure if it has one."""
    return market_data.box(market_data_id)
