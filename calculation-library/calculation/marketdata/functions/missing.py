"""Builds the failure for keys the mappings could not resolve."""

from __future__ import annotations

from typing import Any

from calculation.errors import MissingMarketDataError
from calculation.marketdata.box import MarketDataBox
from calculation.marketdata.config import MarketDataConfig
from calculation.marketdata.environment import ScenarioMarketDataEnvironment
from calculation.marketdata.functions.base import MarketDataFunction
from calculation.marketdata.ids import MissingMappingId
from calculation.marketdata.requirements import MarketDataRequirements


class MissingMappingMarketDataFunction(MarketDataFunction):
    value_type = MissingMappingId.value_type

    def requirements(self, market_data_id: MissingMappingId, config: MarketDataConfig) -> MarketDataRequirements:
        return MarketDataRequirements.empty()

    def build(
        self,
        market_data_id: MissingMappingId,
        market_data: ScenarioMarketDataEnvironment,
        config: MarketDataConfig,
    ) -> MarketDataBox[Any]:
        raise MissingMarketDataError(
            f"No market data mapping found for market data key {market_data_id.key}"
        )
