"""Mapping layer: resolves feed-agnostic keys to the ids held in the environment."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from calculation.marketdata.ids import (
    NO_FEED,
    DiscountCurveId,
    FxRateId,
    MarketDataFeed,
    MarketDataId,
    MissingMappingId,
    QuoteId,
)
from calculation.marketdata.keys import DiscountCurveKey, FxRateKey, MarketDataKey, QuoteKey


@dataclass(frozen=True)
class MarketDataMappings:
    """
    - `feed`: feed every observable/derived id is bound to
    - `curve_group`: curve group discount curves come from; without one,
      discount curve keys resolve to a `MissingMappingId`
    - `overrides`: explicit key -> id entries, checked first
    """

    feed: MarketDataFeed = NO_FEED
    curve_group: Optional[str] = None
    overrides: Mapping[MarketDataKey, MarketDataId] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "overrides", MappingProxyType(dict(self.overrides)))

    @staticmethod
    def of(feed: MarketDataFeed = NO_FEED, curve_group: Optional[str] = None) -> "MarketDataMappings":
        return MarketDataMappings(feed=feed, curve_group=curve_group)

    def id_for(self, key: MarketDataKey) -> MarketDataId:
        override = self.overrides.get(key)
        if override is not None:
            return override
        resolver = _RESOLVERS.get(key.value_type)
        if resolver is None:
            return MissingMappingId(key)
        return resolver(self, key)


def _quote_id(mappings: MarketDataMappings, key: MarketDataKey) -> MarketDataId:
    assert isinstance(key, QuoteKey)
    return QuoteId(key.ticker, mappings.feed)


def _fx_rate_id(mappings: MarketDataMappings, key: MarketDataKey) -> MarketDataId:
    assert isinstance(key, FxRateKey)
    return FxRateId(key.pair, mappings.feed)


def _discount_curve_id(mappings: MarketDataMappings, key: MarketDataKey) -> MarketDataId:
    assert isinstance(key, DiscountCurveKey)
    if mappings.curve_group is None:
        return MissingMappingId(key)
    return DiscountCurveId(key.currency, mappings.curve_group, mappings.feed)


_RESOLVERS: Mapping[str, Callable[[MarketDataMappings, MarketDataKey], MarketDataId]] = MappingProxyType({
    QuoteKey.value_type: _quote_id,
    FxRateKey.value_type: _fx_rate_id,
    DiscountCurveKey.value_type: _discount_curve_id,
})
