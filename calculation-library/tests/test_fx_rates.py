"""Tests for the FX rate market-data function: direct quotes and triangulation."""

from datetime import date

import pytest

from calculation.currency import EUR, GBP, JPY, USD, Currency, CurrencyPair
from calculation.marketdata.builder import MarketDataBuilder
from calculation.marketdata.config import FxRateConfig, MarketDataConfig
from calculation.marketdata.environment import ScenarioMarketDataEnvironment
from calculation.marketdata.functions.fx import FxRateMarketDataFunction
from calculation.marketdata.ids import FxRateId, QuoteId
from calculation.marketdata.requirements import MarketDataRequirements
from calculation.result import FailureReason

VAL = date(2026, 1, 2)
SEK = Currency("SEK")
NOK = Currency("NOK")

CONFIG = MarketDataConfig.of(
    fx=FxRateConfig({
        CurrencyPair(GBP, USD): "GBPUSD",
        CurrencyPair(USD, JPY): "USDJPY",
        CurrencyPair(USD, EUR): "USDEUR",
        CurrencyPair(EUR, SEK): "EURSEK",
        CurrencyPair(EUR, NOK): "EURNOK",
    })
)


def _build(*ids, scenario_count=1, **quotes):
    builder = ScenarioMarketDataEnvironment.builder(scenario_count, VAL)
    for ticker, value in quotes.items():
        if isinstance(value, list):
            builder.add_values(QuoteId(ticker), value)
        else:
            builder.add_value(QuoteId(ticker), value)
    return MarketDataBuilder().build(MarketDataRequirements.of(*ids), CONFIG, builder.build())


def test_direct_quote() -> None:
    """Quoted pair is a single lookup, answered in either direction."""
    env = _build(FxRateId.of(USD, GBP), GBPUSD=1.25)
    rate = env.value(FxRateId.of(GBP, USD))
    assert rate.pair == CurrencyPair(GBP, USD)
    assert rate.fx_rate(GBP, USD) == 1.25
    assert abs(rate.fx_rate(USD, GBP) - 0.8) < 1e-12


def test_inverse_quote() -> None:
    """USD/EUR is quoted; the EUR/USD id holds the inverted rate."""
    env = _build(FxRateId.of(EUR, USD), USDEUR=0.8)
    rate = env.value(FxRateId.of(EUR, USD))
    assert rate.pair == CurrencyPair(EUR, USD)
    assert abs(rate.rate - 1.25) < 1e-12


def test_triangulation_through_usd() -> None:
    """GBP and JPY both triangulate through USD: GBP/JPY = GBP/USD * USD/JPY."""
    function = FxRateMarketDataFunction()
    reqs = function.requirements(FxRateId.of(GBP, JPY), CONFIG)
    assert reqs.non_observables == {FxRateId.of(GBP, USD), FxRateId.of(USD, JPY)}

    env = _build(FxRateId.of(JPY, GBP), GBPUSD=1.25, USDJPY=150.0)
    rate = env.value(FxRateId.of(GBP, JPY))
    assert abs(rate.fx_rate(GBP, JPY) - 1.25 * 150.0) < 1e-9
    assert abs(rate.fx_rate(JPY, GBP) * rate.fx_rate(GBP, JPY) - 1.0) < 1e-12


def test_triangulation_through_eur() -> None:
    """NOK and SEK both triangulate through EUR."""
    env = _build(FxRateId.of(NOK, SEK), EURNOK=11.5, EURSEK=11.2)
    rate = env.value(FxRateId.of(SEK, NOK))
    assert abs(rate.fx_rate(NOK, SEK) - 11.2 / 11.5) < 1e-12
    assert abs(rate.fx_rate(SEK, NOK) - 11.5 / 11.2) < 1e-12


def test_triangulation_per_scenario() -> None:
    """Per-scenario legs give a per-scenario cross rate."""
    env = _build(FxRateId.of(GBP, JPY), scenario_count=2, GBPUSD=[1.2, 1.3], USDJPY=150.0)
    box = env.box(FxRateId.of(GBP, JPY))
    assert [pytest.approx(r.rate) for r in box.values] == [180.0, 195.0]


def test_identity_pair_needs_nothing() -> None:
    """A/A is 1 with no requirements."""
    function = FxRateMarketDataFunction()
    assert function.requirements(FxRateId.of(USD, USD), CONFIG).is_empty()
    env = _build(FxRateId.of(USD, USD))
    assert env.value(FxRateId.of(USD, USD)).rate == 1.0


def test_no_rate_path() -> None:
    """AUD/ZAR: both triangulate through USD but no leg is quoted."""
    env = _build(FxRateId.of("AUD", "ZAR"), GBPUSD=1.25)
    failure = env.failure(FxRateId.of("AUD", "ZAR"))
    assert failure.reason == FailureReason.BUILD_FAILED
    assert "No rate path for AUD/ZAR" in failure.message


def test_unquoted_pair_against_own_triangulation_currency() -> None:
    """DKK triangulates through EUR; EUR/DKK unquoted is missing data, not a cross."""
    env = _build(FxRateId.of("EUR", "DKK"))
    failure = env.failure(FxRateId.of("EUR", "DKK"))
    assert failure.reason == FailureReason.MISSING_DATA
    assert "No FX quote configured for EUR/DKK" in failure.message


def test_missing_leg_quote_fails_cross() -> None:
    """The cross rate fails when a leg's quote has no value."""
    env = _build(FxRateId.of(GBP, JPY), GBPUSD=1.25)
    assert env.failure(QuoteId("USDJPY")).reason == FailureReason.MISSING_DATA
    assert env.failure(FxRateId.of(GBP, JPY)).reason == FailureReason.MISSING_DATA
