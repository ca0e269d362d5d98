"""Function group for FX forwards."""

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
from calculation.marketdata.keys import DiscountCurveKey, FxRateKey, MarketDataKey
from calculation.marketdata.requirements import FunctionRequirements
from calculation.marketdata.view import SingleScenarioMarketData
from calculation.measures import EXPLAIN_PRESENT_VALUE, FX_DELTA, NOTIONAL, PRESENT_VALUE, PV01
from calculation.pricers.fx_pricer import FXPricer
from calculation.products.fx import FXForward
from calculation.rates import RatesProvider


def _keys(fwd: FXForward) -> list[MarketDataKey]:
    return [
        DiscountCurveKey(fwd.pair.base),
        DiscountCurveKey(fwd.pair.counter),
        FxRateKey(fwd.pair),
    ]


def _currency(fwd: FXForward) -> Currency:
    return fwd.pair.counter


class FxDeltaFunction(PricerFunction):
    """FX delta per scenario, in units of the base currency; never converted."""

    pricer: FXPricer
    convert_currencies: ClassVar[bool] = False

    def __init__(self, pricer: FXPricer, bump_pct: float = 0.01) -> None:
        super().__init__(pricer, _keys, _currency)
        self.bump_pct = bump_pct

    def requirements(self, target: FXForward) -> FunctionRequirements:
        return FunctionRequirements.of(*_keys(target))

    def execute_scenario(self, target: FXForward, market_data: SingleScenarioMarketData) -> float:
        return self.pricer.fx_delta(target, RatesProvider(market_data), self.bump_pct)


def fx_forward_function_group() -> FunctionGroup:
    pricer = FXPricer()
    return (
        FunctionGroup.builder(FXForward.target_type)
        .name("DiscountingFxForward")
        .add_function(PRESENT_VALUE, PresentValueFunction(pricer, _keys, _currency))
        .add_function(
            PV01,
            PresentValueSensitivityFunction(pricer, _keys, _currency, lambda f: [f.pair.base, f.pair.counter]),
        )
        .add_function(FX_DELTA, FxDeltaFunction(pricer))
        .add_function(EXPLAIN_PRESENT_VALUE, ExplainPresentValueFunction(pricer, _keys, _currency))
        .add_function(NOTIONAL, NotionalFunction(lambda f: CurrencyAmount(f.pair.base, f.notional_base)))
        .build()
    )
