"""Tests for keys, ids, mappings and requirements."""

from calculation.currency import EUR, GBP, USD, CurrencyPair
from calculation.marketdata.ids import (
    CurveGroupId,
    DiscountCurveId,
    FxRateId,
    MarketDataFeed,
    MissingMappingId,
    QuoteId,
)
from calculation.marketdata.keys import DiscountCurveKey, FxRateKey, QuoteKey
from calculation.marketdata.mappings import MarketDataMappings
from calculation.marketdata.requirements import FunctionRequirements, MarketDataRequirements

FEED = MarketDataFeed("VENDOR")


def test_fx_key_and_id_are_direction_independent() -> None:
    """USD/EUR and EUR/USD are the same key and the same id."""
    assert FxRateKey.of("USD", "EUR") == FxRateKey.of("EUR", "USD")
    assert FxRateKey.of("USD", "EUR").pair == CurrencyPair(EUR, USD)
    assert FxRateId.of("USD", "EUR") == FxRateId.of("EUR", "USD")


def test_mapping_binds_feed() -> None:
    """Quote and FX keys resolve to ids on the configured feed."""
    mappings = MarketDataMappings.of(feed=FEED)
    assert mappings.id_for(QuoteKey("X")) == QuoteId("X", FEED)
    assert mappings.id_for(FxRateKey.of("GBP", "USD")) == FxRateId(CurrencyPair(GBP, USD), FEED)


def test_discount_curve_needs_curve_group() -> None:
    """Without a curve group the key has no mapping."""
    assert MarketDataMappings().id_for(DiscountCurveKey(USD)) == MissingMappingId(DiscountCurveKey(USD))
    mapped = MarketDataMappings.of(curve_group="G").id_for(DiscountCurveKey(USD))
    assert mapped == DiscountCurveId(USD, "G")


def test_override_wins() -> None:
    """Explicit overrides are checked first."""
    mappings = MarketDataMappings(overrides={QuoteKey("X"): QuoteId("Y")})
    assert mappings.id_for(QuoteKey("X")) == QuoteId("Y")


def test_requirements_classify_ids() -> None:
    """Observable, derived and missing-mapping ids go in separate sets."""
    missing = MissingMappingId(DiscountCurveKey(USD))
    reqs = MarketDataRequirements.of(QuoteId("X"), CurveGroupId("G"), missing)
    assert reqs.observables == {QuoteId("X")}
    assert reqs.non_observables == {CurveGroupId("G")}
    assert reqs.missing_mappings == {missing}
    assert reqs.all_ids() == {QuoteId("X"), CurveGroupId("G"), missing}
    assert MarketDataRequirements.empty().is_empty()


def test_requirements_union() -> None:
    """Combining requirements is a union."""
    a = MarketDataRequirements.of(QuoteId("X"))
    b = MarketDataRequirements.of(QuoteId("X"), CurveGroupId("G"))
    assert (a | b).all_ids() == {QuoteId("X"), CurveGroupId("G")}


def test_output_currency_adds_fx_requirement() -> None:
    """A GBP output reported in USD needs GBP/USD; a USD output does not."""
    mappings = MarketDataMappings.of(curve_group="G")
    gbp = FunctionRequirements.of(DiscountCurveKey(GBP), output_currencies=[GBP])
    reqs = MarketDataRequirements.from_function(gbp, mappings, USD)
    assert reqs.non_observables == {DiscountCurveId(GBP, "G"), FxRateId.of(GBP, USD)}
    assert reqs.output_currencies == {GBP}

    usd = FunctionRequirements.of(DiscountCurveKey(USD), output_currencies=[USD])
    assert MarketDataRequirements.from_function(usd, mappings, USD).non_observables == {DiscountCurveId(USD, "G")}
