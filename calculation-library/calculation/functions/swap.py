"""Function group for fixed-float swaps."""

from __future__ import annotations

from typing import ClassVar

from calculation.currency import Currency, CurrencyAmount
from calculation.functions.common import (
    ExplainPresentValueFunction,
    NotionalFunction,
    PresentValueFunction,
    PresentValueSensitivityFunction,
    PricerFunction,
)
from calculation.functions.groups import FunctionGroup
from calculation.marketdata.keys import DiscountCurveKey, MarketDataKey
from calculation.marketdata.requirements import FunctionRequirements
from calculation.marketdata.view import SingleScenarioMarketData
from calculation.measures import EXPLAIN_PRESENT_VALUE, NOTIONAL, PAR_RATE, PRESENT_VALUE, PV01
from calculation.pricers.swap_pricer import SwapPricer
from calculation.products.swap import FixedFloatSwap
from calculation.rates import RatesProvider


def _keys(swap: FixedFloatSwap) -> list[MarketDataKey]:
    return [DiscountCurveKey(swap.currency)]


def _currency(swap: FixedFloatSwap) -> Currency:
    return swap.currency


class ParRateFunction(PricerFunction):
    """Par rate per scenario; a plain number, never converted."""

    pricer: SwapPricer
    convert_currencies: ClassVar[bool] = False

    def requirements(self, target: FixedFloatSwap) -> FunctionRequirements:
        return FunctionRequirements.of(*_keys(target))

    def execute_scenario(self, target: FixedFloatSwap, market_data: SingleScenarioMarketData) -> float:
        return self.pricer.par_rate(target, RatesProvider(market_data))


def swap_function_group() -> FunctionGroup:
    pricer = SwapPricer()
    return (
        FunctionGroup.builder(FixedFloatSwap.target_type)
        .name("DiscountingFixedFloatSwap")
        .add_function(PRESENT_VALUE, PresentValueFunction(pricer, _keys, _currency))
        .add_function(PV01, PresentValueSensitivityFunction(pricer, _keys, _currency, lambda s: [s.currency]))
        .add_function(PAR_RATE, ParRateFunction(pricer, _keys, _currency))
        .add_function(EXPLAIN_PRESENT_VALUE, ExplainPresentValueFunction(pricer, _keys, _currency))
        .add_function(NOTIONAL, NotionalFunction(lambda s: CurrencyAmount(s.currency, s.notional)))
        .build()
    )
