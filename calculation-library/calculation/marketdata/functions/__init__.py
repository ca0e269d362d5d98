"""Market-data functions: builders for derived market data."""

from calculation.marketdata.functions.base import MarketDataFunction
from calculation.marketdata.functions.curves import (
    CurveGroupMarketDataFunction,
    DiscountCurveMarketDataFunction,
)
from calculation.marketdata.functions.fx import FxRateMarketDataFunction
from calculation.marketdata.functions.missing import MissingMappingMarketDataFunction

__all__ = [
    "MarketDataFunction",
    "CurveGroupMarketDataFunction",
    "DiscountCurveMarketDataFunction",
    "FxRateMarketDataFunction",
    "MissingMappingMarketDataFunction",
]
