"""Function group for zero-coupon bonds."""

from __future__ import annotations

from calculation.currency import Currency, CurrencyAmount
from calculation.functions.common import (
    ExplainPresentValueFunction,
    NotionalFunction,
    PresentValueFunction,
    PresentValueSensitivityFunction,
)
from calculation.functions.groups import FunctionGroup
from calculation.marketdata.keys import DiscountCurveKey, MarketDataKey
from calculation.measures import EXPLAIN_PRESENT_VALUE, NOTIONAL, PRESENT_VALUE, PV01
from calculation.pricers.bond_pricer import BondPricer
from calculation.products.bond import ZeroCouponBond


def _keys(bond: ZeroCouponBond) -> list[MarketDataKey]:
    return [DiscountCurveKey(bond.currency)]


def _currency(bond: ZeroCouponBond) -> Currency:
    return bond.currency


def bond_function_group() -> FunctionGroup:
    pricer = BondPricer()
    return (
        FunctionGroup.builder(ZeroCouponBond.target_type)
        .name("DiscountingZeroCouponBond")
        .add_function(PRESENT_VALUE, PresentValueFunction(pricer, _keys, _currency))
        .add_function(PV01, PresentValueSensitivityFunction(pricer, _keys, _currency, lambda b: [b.currency]))
        .add_function(EXPLAIN_PRESENT_VALUE, ExplainPresentValueFunction(pricer, _keys, _currency))
        .add_function(NOTIONAL, NotionalFunction(lambda b: CurrencyAmount(b.currency, b.notional)))
        .build()
    )
