"""
FX rate market-data function.

Route for a pair A/B, in order:
1. A == B: rate 1
2. A/B or B/A is quoted in `FxRateConfig`: single quote lookup
3. a triangulation currency C of A or B (C not A or B) with both A/C and C/B
   quoted: rate(A/C) * rate(C/B), built from the two leg `FxRateId`s
4. A or B is the other's triangulation currency but unquoted: missing data
5. otherwise there is no rate path

Only single-hop triangulation is supported.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from calculation.currency import CurrencyPair, FxRate
from calculation.errors import MissingMarketDataError, NoRatePathError
from calculation.marketdata.box import MarketDataBox
from calculation.marketdata.config import FxRateConfig, MarketDataConfig
from calculation.marketdata.environment import ScenarioMarketDataEnvironment
from calculation.marketdata.functions.base import MarketDataFunction, dependency
from calculation.marketdata.ids import FxRateId, QuoteId
from calculation.marketdata.requirements import MarketDataRequirements


@dataclass(frozen=True)
class _FxRoute:
    quoted_pair: Optional[CurrencyPair] = None
    quote_id: Optional[QuoteId] = None
    legs: tuple[FxRateId, ...] = ()


def _fx_config(config: MarketDataConfig) -> FxRateConfig:
    return config.find_default(FxRateConfig) or FxRateConfig()


def _route(market_data_id: FxRateId, fx_config: FxRateConfig) -> Optional[_FxRoute]:
    base, counter = market_data_id.pair.base, market_data_id.pair.counter
    if base == counter:
        return _FxRoute()
    quote = fx_config.quote_for(base, counter)
    if quote is not None:
        quoted_pair, ticker = quote
        return _FxRoute(quoted_pair=quoted_pair, quote_id=QuoteId(ticker, market_data_id.feed))
    candidates = dict.fromkeys((base.triangulation_currency, counter.triangulation_currency))
    for via in candidates:
        if via in (base, counter):
            continue
        if fx_config.is_quoted(base, via) and fx_config.is_quoted(via, counter):
            legs = (
                FxRateId(CurrencyPair(base, via), market_data_id.feed),
                FxRateId(CurrencyPair(via, counter), market_data_id.feed),
            )
            return _FxRoute(legs=legs)
    return None


class FxRateMarketDataFunction(MarketDataFunction):
    value_type = FxRateId.value_type

    def requirements(self, market_data_id: FxRateId, config: MarketDataConfig) -> MarketDataRequirements:
        route = _route(market_data_id, _fx_config(config))
        if route is None:
            return MarketDataRequirements.empty()
        if route.quote_id is not None:
            return MarketDataRequirements.of(route.quote_id)
        return MarketDataRequirements.of(*route.legs)

    def build(
        self,
        market_data_id: FxRateId,
        market_data: ScenarioMarketDataEnvironment,
        config: MarketDataConfig,
    ) -> MarketDataBox[Any]:
        pair = market_data_id.pair
        route = _route(market_data_id, _fx_config(config))
        if route is None and (
            pair.base.triangulation_currency == pair.counter or pair.counter.triangulation_currency == pair.base
        ):
            # Only a direct quote can price a pair against its own triangulation currency.
            raise MissingMarketDataError(f"No FX quote configured for {pair}")
        if route is None:
            raise NoRatePathError(
                f"No rate path for {pair}: the pair is not quoted and no triangulation "
                f"currency of {pair.base} or {pair.counter} has both legs quoted"
            )
        if pair.is_identity():
            return MarketDataBox.single(FxRate(pair, 1.0))

        if route.quote_id is not None:
            quoted_pair = route.quoted_pair
            assert quoted_pair is not None

            def from_quote(quote: float) -> FxRate:
                quoted = FxRate(quoted_pair, float(quote))
                return FxRate(pair, quoted.fx_rate(pair.base, pair.counter))

            return dependency(market_data, route.quote_id).map(from_quote)

        first, second = (dependency(market_data, leg) for leg in route.legs)
        return MarketDataBox.combine([first, second], FxRate.cross_rate)
