"""Tests for requirements resolution and the layered market-data build."""

from dataclasses import dataclass
from datetime import date
from typing import ClassVar

import pytest

from calculation.curves import CurveGroup, ZeroRateCurve
from calculation.currency import GBP, USD
from calculation.marketdata.box import MarketDataBox
from calculation.marketdata.builder import MarketDataBuilder
from calculation.marketdata.config import CurveDefinition, CurveGroupDefinition, CurveNode, MarketDataConfig
from calculation.marketdata.environment import ScenarioMarketDataEnvironment
from calculation.marketdata.functions.base import MarketDataFunction, dependency
from calculation.marketdata.ids import CurveGroupId, DiscountCurveId, MarketDataId, MissingMappingId, QuoteId
from calculation.marketdata.keys import DiscountCurveKey
from calculation.marketdata.registry import MarketDataFunctionRegistry, create_default_registry
from calculation.marketdata.requirements import MarketDataRequirements
from calculation.result import FailureReason

VAL = date(2026, 1, 2)


def _config() -> MarketDataConfig:
    usd = CurveDefinition("USD-DISC", USD, (CurveNode(1.0, "USD1Y"), CurveNode(2.0, "USD2Y")))
    gbp = CurveDefinition("GBP-DISC", GBP, (CurveNode(1.0, "GBP1Y"), CurveNode(2.0, "GBP2Y")))
    return MarketDataConfig.of(
        G=CurveGroupDefinition("G", (usd, gbp)),
        H=CurveGroupDefinition("H", (usd,)),
    )


def _quotes(scenario_count: int = 1, **overrides) -> ScenarioMarketDataEnvironment:
    builder = ScenarioMarketDataEnvironment.builder(scenario_count, VAL)
    quotes = {"USD1Y": 0.04, "USD2Y": 0.045, "GBP1Y": 0.05, "GBP2Y": 0.052}
    quotes.update(overrides)
    for ticker, value in quotes.items():
        if value is None:
            continue
        if isinstance(value, list):
            builder.add_values(QuoteId(ticker), value)
        else:
            builder.add_value(QuoteId(ticker), value)
    return builder.build()


@dataclass(frozen=True)
class NodeId(MarketDataId):
    value_type: ClassVar[str] = "TestNode"

    name: str


class NodeFunction(MarketDataFunction):
    """Value of a node = 1 + sum of its dependencies; 'boom' raises."""

    value_type = NodeId.value_type

    def __init__(self, edges: dict[str, tuple[str, ...]]) -> None:
        self.edges = edges

    def requirements(self, market_data_id, config):
        return MarketDataRequirements.of(*(NodeId(n) for n in self.edges.get(market_data_id.name, ())))

    def build(self, market_data_id, market_data, config):
        if market_data_id.name == "boom":
            raise RuntimeError("boom")
        if market_data_id.name == "wide":
            return MarketDataBox.scenarios([1.0, 2.0, 3.0])
        deps = [dependency(market_data, NodeId(n)).single_value for n in self.edges.get(market_data_id.name, ())]
        return MarketDataBox.single(1 + sum(deps))


def _node_builder(edges: dict[str, tuple[str, ...]], max_workers: int = 4) -> MarketDataBuilder:
    registry = create_default_registry().with_functions(NodeFunction(edges))
    return MarketDataBuilder(registry, max_workers=max_workers)


def test_builds_discount_curve_from_quotes() -> None:
    """Discount curve -> curve group -> quotes, built in dependency order."""
    reqs = MarketDataRequirements.of(DiscountCurveId(USD, "G"))
    env = MarketDataBuilder().build(reqs, _config(), _quotes())
    curve = env.value(DiscountCurveId(USD, "G"))
    assert isinstance(curve, ZeroRateCurve)
    assert curve.zero_rates_cc == (0.04, 0.045)
    assert curve.pillars == (1.0, 2.0)
    group = env.value(CurveGroupId("G"))
    assert isinstance(group, CurveGroup)
    assert group.currencies == {USD, GBP}


def test_resolution_rounds_and_layers() -> None:
    """Nothing supplied: three rounds of discovery, three build layers."""
    reqs = MarketDataRequirements.of(DiscountCurveId(USD, "H"))
    resolved = MarketDataBuilder().resolve(reqs, _config())
    assert resolved.rounds == 3
    assert resolved.layers[0] == {QuoteId("USD1Y"), QuoteId("USD2Y")}
    assert resolved.layers[1] == {CurveGroupId("H")}
    assert resolved.layers[2] == {DiscountCurveId(USD, "H")}
    assert not resolved.failures


def test_resolution_is_idempotent() -> None:
    """Resolving an already complete set adds nothing."""
    builder = MarketDataBuilder()
    reqs = MarketDataRequirements.of(DiscountCurveId(USD, "G"), DiscountCurveId(GBP, "G"))
    resolved = builder.resolve(reqs, _config())
    again = builder.resolve(resolved.to_requirements(), _config())
    assert again.all_ids() == resolved.all_ids()
    assert again.dependencies == resolved.dependencies


def test_supplied_values_are_leaves() -> None:
    """A supplied curve group is reused; its quotes are not required."""
    curve = ZeroRateCurve.of("USD-DISC", USD, [1.0], [0.03])
    supplied = ScenarioMarketDataEnvironment.builder(1, VAL).add_value(
        CurveGroupId("G"), CurveGroup("G", {USD: curve})
    ).build()
    builder = MarketDataBuilder()
    reqs = MarketDataRequirements.of(DiscountCurveId(USD, "G"))
    resolved = builder.resolve(reqs, _config(), supplied)
    assert resolved.all_ids() == {DiscountCurveId(USD, "G")}
    env = builder.build(reqs, _config(), supplied)
    assert env.value(DiscountCurveId(USD, "G")) is curve


def test_per_scenario_quotes_give_per_scenario_curves() -> None:
    """Quotes varying by scenario produce one curve per scenario."""
    supplied = _quotes(scenario_count=2, USD1Y=[0.04, 0.05])
    env = MarketDataBuilder().build(MarketDataRequirements.of(DiscountCurveId(USD, "H")), _config(), supplied)
    box = env.box(DiscountCurveId(USD, "H"))
    assert not box.is_single
    assert [c.zero_rates_cc for c in box.values] == [(0.04, 0.045), (0.05, 0.045)]


def test_missing_quote_fails_dependents_only() -> None:
    """A missing GBP quote fails group G and its curves; group H still builds."""
    reqs = MarketDataRequirements.of(DiscountCurveId(USD, "G"), DiscountCurveId(USD, "H"))
    env = MarketDataBuilder().build(reqs, _config(), _quotes(GBP2Y=None))
    assert env.failure(QuoteId("GBP2Y")).reason == FailureReason.MISSING_DATA
    failure = env.failure(DiscountCurveId(USD, "G"))
    assert failure.reason == FailureReason.MISSING_DATA
    assert "GBP2Y" in failure.message
    assert env.value(DiscountCurveId(USD, "H")).zero_rates_cc == (0.04, 0.045)


def test_missing_mapping_becomes_failure() -> None:
    """Missing mappings resolve to a typed failure instead of raising."""
    missing = MissingMappingId(DiscountCurveKey(USD))
    env = MarketDataBuilder().build(MarketDataRequirements.of(missing), _config(), _quotes())
    failure = env.failure(missing)
    assert failure.reason == FailureReason.MISSING_DATA
    assert failure.message == "No market data mapping found for market data key DiscountCurveKey(USD)"


def test_missing_configuration_fails_at_resolution() -> None:
    """Unknown curve group: requirements fail, recorded against the group id."""
    reqs = MarketDataRequirements.of(DiscountCurveId(USD, "NOPE"))
    env = MarketDataBuilder().build(reqs, _config(), _quotes())
    assert "No configuration found of type CurveGroupDefinition with name NOPE" in env.failure(
        CurveGroupId("NOPE")
    ).message
    assert env.failure(DiscountCurveId(USD, "NOPE")).reason == FailureReason.MISSING_DATA


def test_curve_missing_from_group() -> None:
    """Group H has no GBP curve."""
    env = MarketDataBuilder().build(MarketDataRequirements.of(DiscountCurveId(GBP, "H")), _config(), _quotes())
    failure = env.failure(DiscountCurveId(GBP, "H"))
    assert failure.reason == FailureReason.MISSING_DATA
    assert "No discount curve available for GBP in curve group H" in failure.message


def test_dependency_cycle_fails_cycle_and_dependents() -> None:
    """a -> b -> c -> b: a, b, c fail with BUILD_FAILED; d builds."""
    builder = _node_builder({"a": ("b",), "b": ("c",), "c": ("b",)})
    reqs = MarketDataRequirements.of(NodeId("a"), NodeId("d"))
    env = builder.build(reqs, MarketDataConfig.empty(), ScenarioMarketDataEnvironment.empty(1, VAL))
    for name in ("a", "b", "c"):
        failure = env.failure(NodeId(name))
        assert failure.reason == FailureReason.BUILD_FAILED
        assert "cycle" in failure.message
    assert env.value(NodeId("d")) == 1


def test_builder_exception_is_isolated() -> None:
    """An exception in one builder fails that id and its dependents only."""
    builder = _node_builder({"top": ("boom", "ok"), "ok": ("leaf",)})
    reqs = MarketDataRequirements.of(NodeId("top"), NodeId("ok"))
    env = builder.build(reqs, MarketDataConfig.empty(), ScenarioMarketDataEnvironment.empty(1, VAL))
    assert env.failure(NodeId("boom")).reason == FailureReason.BUILD_FAILED
    assert env.failure(NodeId("boom")).message == "boom"
    assert env.failure(NodeId("top")).reason == FailureReason.BUILD_FAILED
    assert env.value(NodeId("ok")) == 2


def test_wrong_scenario_count_from_builder_is_a_failure() -> None:
    """A builder returning 3 values for 2 scenarios fails that id only."""
    builder = _node_builder({})
    reqs = MarketDataRequirements.of(NodeId("wide"), NodeId("x"))
    env = builder.build(reqs, MarketDataConfig.empty(), ScenarioMarketDataEnvironment.empty(2, VAL))
    assert env.failure(NodeId("wide")).reason == FailureReason.SCENARIO_MISMATCH
    assert env.value(NodeId("x")) == 1


def test_wide_layer_builds_on_pool_and_serially() -> None:
    """Pool size changes nothing about the result."""
    edges = {"root": tuple(f"n{i}" for i in range(20))}
    reqs = MarketDataRequirements.of(NodeId("root"))
    for workers in (1, 4):
        env = _node_builder(edges, max_workers=workers).build(
            reqs, MarketDataConfig.empty(), ScenarioMarketDataEnvironment.empty(1, VAL)
        )
        assert env.value(NodeId("root")) == 21


def test_observables_from_source() -> None:
    """Quotes not supplied are fetched from the observable source."""

    class DictSource:
        def __init__(self, values):
            self.values = values
            self.requested = []

        def fetch(self, ids):
            ids = list(ids)
            self.requested.extend(ids)
            return {i: MarketDataBox.single(self.values[i.ticker]) for i in ids if i.ticker in self.values}

    source = DictSource({"USD1Y": 0.01, "USD2Y": 0.02})
    builder = MarketDataBuilder(observable_source=source)
    env = builder.build(
        MarketDataRequirements.of(DiscountCurveId(USD, "H")),
        _config(),
        ScenarioMarketDataEnvironment.empty(1, VAL),
    )
    assert env.value(DiscountCurveId(USD, "H")).zero_rates_cc == (0.01, 0.02)
    assert set(source.requested) == {QuoteId("USD1Y"), QuoteId("USD2Y")}


def test_failing_observable_source_is_missing_data() -> None:
    """A source that raises fails the fetched quotes and their dependents, not the build."""

    class BrokenSource:
        def fetch(self, ids):
            raise ConnectionError("redis down")

    builder = MarketDataBuilder(observable_source=BrokenSource())
    env = builder.build(
        MarketDataRequirements.of(DiscountCurveId(USD, "H")),
        _config(),
        ScenarioMarketDataEnvironment.empty(1, VAL),
    )
    for ticker in ("USD1Y", "USD2Y"):
        failure = env.failure(QuoteId(ticker))
        assert failure.reason == FailureReason.MISSING_DATA
        assert failure.message == "Observable source failed: redis down"
    assert env.failure(DiscountCurveId(USD, "H")).reason == FailureReason.MISSING_DATA


def test_registry_rejects_duplicate_value_types() -> None:
    """One function per value type."""
    with pytest.raises(ValueError, match="More than one market data function registered for TestNode"):
        MarketDataFunctionRegistry([NodeFunction({}), NodeFunction({})])


def test_unknown_value_type_is_missing_data() -> None:
    """No function registered for an id's value type."""
    env = MarketDataBuilder().build(
        MarketDataRequirements.of(NodeId("a")), MarketDataConfig.empty(), ScenarioMarketDataEnvironment.empty(1, VAL)
    )
    assert env.failure(NodeId("a")).reason == FailureReason.MISSING_DATA
