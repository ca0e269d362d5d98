"""
Market-data ids: feed-bound identifiers of the values held in a
`ScenarioMarketDataEnvironment`.

Every id class declares a stable `value_type` tag (used to find the function
that builds it) and whether it is `observable` (sourced externally rather
than derived).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from calculation.currency import Currency, CurrencyPair

if TYPE_CHECKING:
    from calculation.marketdata.keys import MarketDataKey


@dataclass(frozen=True)
class MarketDataFeed:
    """Source of observable data, e.g. a vendor feed."""

    name: str

    def __str__(self) -> str:
        return self.name


NO_FEED = MarketDataFeed("None")


class MarketDataId:
    value_type: ClassVar[str]
    observable: ClassVar[bool] = False


@dataclass(frozen=True)
class QuoteId(MarketDataId):
    """A raw quoted number (rate, price) from a feed."""

    value_type: ClassVar[str] = "Quote"
    observable: ClassVar[bool] = True

    ticker: str
    feed: MarketDataFeed = NO_FEED

    def __str__(self) -> str:
        return f"QuoteId({self.ticker}, {self.feed})"


@dataclass(frozen=True)
class FxRateId(MarketDataId):
    """FX rate between two currencies; always held in market convention orientation."""

    value_type: ClassVar[str] = "FxRate"

    pair: CurrencyPair
    feed: MarketDataFeed = NO_FEED

    def __post_init__(self) -> None:
        object.__setattr__(self, "pair", self.pair.to_conventional())

    @staticmethod
    def of(base: "str | Currency", counter: "str | Currency", feed: MarketDataFeed = NO_FEED) -> "FxRateId":
        return FxRateId(CurrencyPair.of(base, counter), feed)

    def __str__(self) -> str:
        return f"FxRateId({self.pair}, {self.feed})"


@dataclass(frozen=True)
class CurveGroupId(MarketDataId):
    """A named group of curves built together from one definition."""

    value_type: ClassVar[str] = "CurveGroup"

    name: str
    feed: MarketDataFeed = NO_FEED

    def __str__(self) -> str:
        return f"CurveGroupId({self.name}, {self.feed})"


@dataclass(frozen=True)
class DiscountCurveId(MarketDataId):
    """The discount curve of one currency, taken from a curve group."""

    value_type: ClassVar[str] = "DiscountCurve"

    currency: Currency
    curve_group: str
    feed: MarketDataFeed = NO_FEED

    def __str__(self) -> str:
        return f"DiscountCurveId({self.currency}, {self.curve_group}, {self.feed})"


@dataclass(frozen=True)
class MissingMappingId(MarketDataId):
    """Placeholder for a key the mappings could not resolve; always builds to a failure."""

    value_type: ClassVar[str] = "MissingMapping"

    key: "MarketDataKey"

    def __str__(self) -> str:
        return f"MissingMappingId({self.key})"
