"""Market data: keys, ids, requirements, scenario environments and the builder."""

from calculation.marketdata.box import MarketDataBox
from calculation.marketdata.builder import MarketDataBuilder, ResolvedRequirements
from calculation.marketdata.config import (
    CurveDefinition,
    CurveGroupDefinition,
    CurveNode,
    FxRateConfig,
    MarketDataConfig,
)
from calculation.marketdata.environment import EnvironmentBuilder, ScenarioMarketDataEnvironment
from calculation.marketdata.ids import (
    NO_FEED,
    CurveGroupId,
    DiscountCurveId,
    FxRateId,
    MarketDataFeed,
    MarketDataId,
    MissingMappingId,
    QuoteId,
)
from calculation.marketdata.keys import DiscountCurveKey, FxRateKey, MarketDataKey, QuoteKey
from calculation.marketdata.mappings import MarketDataMappings
from calculation.marketdata.registry import MarketDataFunctionRegistry, create_default_registry
from calculation.marketdata.requirements import FunctionRequirements, MarketDataRequirements
from calculation.marketdata.scenarios import QuoteShifts, ScenarioDefinition, ShiftType
from calculation.marketdata.view import CalculationMarketData, SingleScenarioMarketData

__all__ = [
    "MarketDataBox",
    "MarketDataBuilder",
    "ResolvedRequirements",
    "CurveDefinition",
    "CurveGroupDefinition",
    "CurveNode",
    "FxRateConfig",
    "MarketDataConfig",
    "EnvironmentBuilder",
    "ScenarioMarketDataEnvironment",
    "NO_FEED",
    "CurveGroupId",
    "DiscountCurveId",
    "FxRateId",
    "MarketDataFeed",
    "MarketDataId",
    "MissingMappingId",
    "QuoteId",
    "DiscountCurveKey",
    "FxRateKey",
    "MarketDataKey",
    "QuoteKey",
    "MarketDataMappings",
    "MarketDataFunctionRegistry",
    "create_default_registry",
    "FunctionRequirements",
    "MarketDataRequirements",
    "QuoteShifts",
    "ScenarioDefinition",
    "ShiftType",
    "CalculationMarketData",
    "SingleScenarioMarketData",
]
