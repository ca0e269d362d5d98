"""Tests for the bond, swap and FX forward pricers and their sensitivities."""

import math

import pytest

from calculation.currency import EUR, GBP, USD, CurrencyPair, FxRate
from calculation.curves import ZeroRateCurve
from calculation.errors import MissingMarketDataError
from calculation.pricers import BondPricer, FXPricer, SwapPricer
from calculation.products import FXForward, FixedFloatSwap, ZeroCouponBond
from calculation.rates import RatesProvider


def _flat(currency, rate, pillars=(1.0,)) -> ZeroRateCurve:
    return ZeroRateCurve.of(f"{currency}-DISC", currency, list(pillars), [rate] * len(pillars))


def test_bond_pv_equals_notional_times_df() -> None:
    """Bond PV = notional * DF(maturity)."""
    curve = ZeroRateCurve.of("C", USD, [1.0, 2.0], [0.04, 0.035])
    bond = ZeroCouponBond(currency=USD, maturity=1.5, notional=1_000_000)
    pv = BondPricer().present_value(bond, RatesProvider.of({USD: curve}))
    assert pv.currency == USD
    assert abs(pv.amount - 1_000_000 * curve.df(1.5)) < 1e-6


def test_bond_explain() -> None:
    """Explain breaks the PV down into its discount factor."""
    rates = RatesProvider.of({USD: _flat(USD, 0.05, (2.0,))})
    explain = BondPricer().explain_present_value(ZeroCouponBond(USD, 2.0, 100.0), rates)
    assert explain["product"] == "ZeroCouponBond"
    assert explain["discount_factor"] == pytest.approx(math.exp(-0.1))
    assert explain["present_value"] == pytest.approx(100.0 * math.exp(-0.1))


def test_missing_curve() -> None:
    """Pricing without the product's curve is missing market data."""
    with pytest.raises(MissingMarketDataError, match="No discount curve available for EUR"):
        BondPricer().present_value(ZeroCouponBond(EUR, 1.0, 1.0), RatesProvider.of({USD: _flat(USD, 0.04)}))


def test_swap_par_fixed_near_zero() -> None:
    """When fixed_rate is close to par (flat curve), PV should be near 0."""
    rates = RatesProvider.of({USD: _flat(USD, 0.04, (0.5, 1.0, 1.5, 2.0))})
    swap = FixedFloatSwap(USD, notional=10_000_000, fixed_rate=0.04, pay_times=[0.5, 1.0, 1.5, 2.0])
    pv = SwapPricer().present_value(swap, rates)
    assert abs(pv.amount) < 0.01 * 10_000_000


def test_swap_high_and_low_fixed() -> None:
    """Paying fixed above the forwards loses; below them gains."""
    rates = RatesProvider.of({USD: _flat(USD, 0.03, (0.5, 1.0))})
    pricer = SwapPricer()
    high = FixedFloatSwap(USD, 1_000_000, 0.10, [0.5, 1.0])
    low = FixedFloatSwap(USD, 1_000_000, 0.01, [0.5, 1.0])
    assert pricer.present_value(high, rates).amount < 0
    assert pricer.present_value(low, rates).amount > 0


def test_swap_par_rate() -> None:
    """At the par rate the fixed and float legs match."""
    rates = RatesProvider.of({USD: ZeroRateCurve.of("C", USD, [0.5, 2.0], [0.03, 0.045])})
    pricer = SwapPricer()
    swap = FixedFloatSwap(USD, 1_000_000, 0.0, [0.5, 1.0, 1.5, 2.0])
    par = pricer.par_rate(swap, rates)
    at_par = FixedFloatSwap(USD, 1_000_000, par, [0.5, 1.0, 1.5, 2.0])
    explain = pricer.explain_present_value(at_par, rates)
    assert explain["pv_fixed_leg"] == pytest.approx(explain["pv_float_leg"])
    assert pricer.present_value(at_par, rates).amount == pytest.approx(0.0, abs=1e-8)


def test_swap_needs_pay_times() -> None:
    """A swap with no payments is rejected."""
    with pytest.raises(ValueError, match="at least one payment time"):
        FixedFloatSwap(USD, 1_000_000, 0.04, [])


def test_fx_forward_cip_with_distinct_curves() -> None:
    """CIP: F = spot * DF_base/DF_counter; PV in the counter currency."""
    rates = RatesProvider.of(
        {EUR: _flat(EUR, 0.03), USD: _flat(USD, 0.05)},
        [FxRate.of(EUR, USD, 1.08)],
    )
    fwd = FXForward(CurrencyPair(EUR, USD), maturity=1.0, notional_base=1_000_000, strike=1.08)
    pv = FXPricer().present_value(fwd, rates)
    df_eur = math.exp(-0.03)
    df_usd = math.exp(-0.05)
    expected = 1_000_000 * df_usd * (1.08 * df_eur / df_usd - 1.08)
    assert pv.currency == USD
    assert abs(pv.amount - expected) < 1e-6
    assert pv.amount > 0


def test_fx_forward_at_the_money_zero_pv() -> None:
    """Equal rates and spot == strike give zero PV."""
    rates = RatesProvider.of(
        {EUR: _flat(EUR, 0.05), USD: _flat(USD, 0.05)},
        [FxRate.of(USD, EUR, 1 / 1.08)],
    )
    fwd = FXForward(CurrencyPair(EUR, USD), 1.0, 5_000_000, 1.08)
    assert abs(FXPricer().present_value(fwd, rates).amount) < 1e-6


def test_pv01_zcb_negative() -> None:
    """Bumping rates up lowers a bond's PV."""
    rates = RatesProvider.of({USD: ZeroRateCurve.of("C", USD, [1.0, 2.0], [0.04, 0.04])})
    bond = ZeroCouponBond(USD, 1.5, 1_000_000)
    pv01 = BondPricer().present_value_sensitivity(bond, rates, USD, bump_bp=1.0)
    assert pv01.currency == USD
    assert pv01.amount < 0


def test_pv01_scale_sanity() -> None:
    """d(PV) ~ -PV * T * 1bp."""
    rates = RatesProvider.of({USD: _flat(USD, 0.04, (2.0,))})
    bond = ZeroCouponBond(USD, 2.0, 1_000_000)
    pricer = BondPricer()
    pv = pricer.present_value(bond, rates).amount
    pv01 = pricer.present_value_sensitivity(bond, rates, USD).amount
    approx = -pv * 2.0 * 0.0001
    assert abs(pv01 - approx) < abs(approx) * 0.01


def test_bump_leaves_rates_unchanged() -> None:
    """Bump-and-reprice works on a copy of the rates."""
    curve = _flat(USD, 0.04, (2.0,))
    rates = RatesProvider.of({USD: curve})
    BondPricer().present_value_sensitivity(ZeroCouponBond(USD, 2.0, 1.0), rates, USD)
    assert rates.discount_curve(USD) is curve


def test_fx_delta_close_to_df_base_times_notional() -> None:
    """d(PV)/d(spot) = notional_base * DF_base."""
    rates = RatesProvider.of(
        {EUR: _flat(EUR, 0.05), USD: _flat(USD, 0.05)},
        [FxRate.of(EUR, USD, 1.08)],
    )
    fwd = FXForward(CurrencyPair(EUR, USD), 1.0, 5_000_000, 1.085)
    delta = FXPricer().fx_delta(fwd, rates, bump_pct=0.01)
    expected = 5_000_000 * math.exp(-0.05)
    assert abs(delta - expected) < expected * 0.01
    assert rates.fx_rate(EUR, USD) == 1.08


def test_rates_provider_fx() -> None:
    """Overrides are held by conventional pair and answered either way round."""
    rates = RatesProvider.of({}, [FxRate.of(USD, EUR, 0.8)])
    assert rates.fx_rate(EUR, USD) == pytest.approx(1.25)
    assert rates.fx_rate(USD, EUR) == pytest.approx(0.8)
    assert rates.fx_rate(USD, USD) == 1.0
    bumped = rates.with_fx(USD, EUR, 0.5)
    assert bumped.fx_rate(EUR, USD) == pytest.approx(2.0)
    assert rates.fx_rate(EUR, USD) == pytest.approx(1.25)
    with pytest.raises(MissingMarketDataError, match="No FX rate available for GBP/USD"):
        rates.fx_rate(GBP, USD)
