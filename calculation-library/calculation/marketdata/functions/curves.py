"""Curve group and discount curve market-data functions."""

from __future__ import annotations

from typing import Any

from calculation.curves import CurveGroup, ZeroRateCurve
from calculation.errors import MissingMarketDataError
from calculation.marketdata.box import MarketDataBox
from calculation.marketdata.config import CurveDefinition, CurveGroupDefinition, MarketDataConfig
from calculation.marketdata.environment import ScenarioMarketDataEnvironment
from calculation.marketdata.functions.base import MarketDataFunction, dependency
from calculation.marketdata.ids import CurveGroupId, DiscountCurveId, MarketDataFeed, QuoteId
from calculation.marketdata.requirements import MarketDataRequirements


def _node_ids(definition: CurveDefinition, feed: MarketDataFeed) -> list[QuoteId]:
    return [QuoteId(node.ticker, feed) for node in definition.nodes]


class CurveGroupMarketDataFunction(MarketDataFunction):
    """
    Builds a `CurveGroup` from its `CurveGroupDefinition`; node quotes are
    used as the zero rates. Quotes that vary by scenario give one curve group
    per scenario.
    """

    value_type = CurveGroupId.value_type

    def requirements(self, market_data_id: CurveGroupId, config: MarketDataConfig) -> MarketDataRequirements:
        definition = config.get(CurveGroupDefinition, market_data_id.name)
        ids = [qid for curve in definition.curves for qid in _node_ids(curve, market_data_id.feed)]
        return MarketDataRequirements.of(*ids)

    def build(
        self,
        market_data_id: CurveGroupId,
        market_data: ScenarioMarketDataEnvironment,
        config: MarketDataConfig,
    ) -> MarketDataBox[Any]:
        definition = config.get(CurveGroupDefinition, market_data_id.name)
        curve_boxes = [
            self._build_curve(curve, market_data, market_data_id.feed) for curve in definition.curves
        ]

        def group(*curves: ZeroRateCurve) -> CurveGroup:
            return CurveGroup(definition.name, {c.currency: c for c in curves})

        return MarketDataBox.combine(curve_boxes, group)

    @staticmethod
    def _build_curve(
        definition: CurveDefinition,
        market_data: ScenarioMarketDataEnvironment,
        feed: MarketDataFeed,
    ) -> MarketDataBox[ZeroRateCurve]:
        quote_boxes = [dependency(market_data, qid) for qid in _node_ids(definition, feed)]
        pillars = [node.time for node in definition.nodes]

        def curve(*rates: float) -> ZeroRateCurve:
            return ZeroRateCurve.of(definition.name, definition.currency, pillars, [float(r) for r in rates])

        return MarketDataBox.combine(quote_boxes, curve)


class DiscountCurveMarketDataFunction(MarketDataFunction):
    """Picks one currency's discount curve out of a built curve group."""

    value_type = DiscountCurveId.value_type

    def requirements(self, market_data_id: DiscountCurveId, config: MarketDataConfig) -> MarketDataRequirements:
        return MarketDataRequirements.of(CurveGroupId(market_data_id.curve_group, market_data_id.feed))

    def build(
        self,
        market_data_id: DiscountCurveId,
        market_data: ScenarioMarketDataEnvironment,
        config: MarketDataConfig,
    ) -> MarketDataBox[Any]:
        group_box = dependency(market_data, CurveGroupId(market_data_id.curve_group, market_data_id.feed))

        def discount_curve(group: CurveGroup) -> ZeroRateCurve:
            curve = group.discount_curve(market_data_id.currency)
            if curve is None:
                raise MissingMarketDataError(
                    f"No discount curve available for {market_data_id.currency} "
                    f"in curve group {market_data_id.curve_group}"
                )
            return curve

        return group_box.map(discount_curve)
