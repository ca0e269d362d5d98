"""
Market-data requirements.

`FunctionRequirements` is what a calculation function declares (feed-agnostic
keys plus the currencies of its output). `MarketDataRequirements` is the
id-level set the builder works with, split into observable ids, derived
(non-observable) ids and missing-mapping markers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from calculation.currency import Currency
from calculation.marketdata.ids import MarketDataId, MissingMappingId
from calculation.marketdata.keys import FxRateKey, MarketDataKey
from calculation.marketdata.mappings import MarketDataMappings


@dataclass(frozen=True)
class FunctionRequirements:
    keys: frozenset[MarketDataKey] = field(default_factory=frozenset)
    output_currencies: frozenset[Currency] = field(default_factory=frozenset)

    @staticmethod
    def of(*keys: MarketDataKey, output_currencies: Iterable[Currency] = ()) -> "FunctionRequirements":
        return FunctionRequirements(frozenset(keys), frozenset(output_currencies))

    @staticmethod
    def empty() -> "FunctionRequirements":
        return FunctionRequirements()


@dataclass(frozen=True)
class MarketDataRequirements:
    observables: frozenset[MarketDataId] = field(default_factory=frozenset)
    non_observables: frozenset[MarketDataId] = field(default_factory=frozenset)
    missing_mappings: frozenset[MissingMappingId] = field(default_factory=frozenset)
    output_currencies: frozenset[Currency] = field(default_factory=frozenset)

    @staticmethod
    def empty() -> "MarketDataRequirements":
        return MarketDataRequirements()

    @staticmethod
    def of(*ids: MarketDataId) -> "MarketDataRequirements":
        """Classify ids into observable, derived and missing-mapping sets."""
        observables: set[MarketDataId] = set()
        non_observables: set[MarketDataId] = set()
        missing: set[MissingMappingId] = set()
        for market_data_id in ids:
            if isinstance(market_data_id, MissingMappingId):
                missing.add(market_data_id)
            elif market_data_id.observable:
                observables.add(market_data_id)
            else:
                non_observables.add(market_data_id)
        return MarketDataRequirements(frozenset(observables), frozenset(non_observables), frozenset(missing))

    @staticmethod
    def from_function(
        requirements: FunctionRequirements,
        mappings: MarketDataMappings,
        reporting_currency: Optional[Currency] = None,
    ) -> "MarketDataRequirements":
        """
        Map a function's keys to ids. When a reporting currency is given, an FX
        rate is required for every output currency that differs from it.
        """
        keys: set[MarketDataKey] = set(requirements.keys)
        if reporting_currency is not None:
            keys.update(
                FxRateKey.of(ccy, reporting_currency)
                for ccy in requirements.output_currencies
                if ccy != reporting_currency
            )
        result = MarketDataRequirements.of(*(mappings.id_for(k) for k in keys))
        return MarketDataRequirements(
            result.observables,
            result.non_observables,
            result.missing_mappings,
            requirements.output_currencies,
        )

    def combined_with(self, other: "MarketDataRequirements") -> "MarketDataRequirements":
        return MarketDataRequirements(
            self.observables | other.observables,
            self.non_observables | other.non_observables,
            self.missing_mappings | other.missing_mappings,
            self.output_currencies | other.output_currencies,
        )

    def __or__(self, other: "MarketDataRequirements") -> "MarketDataRequirements":
        return self.combined_with(other)

    def all_ids(self) -> frozenset[MarketDataId]:
        return self.observables | self.non_observables | self.missing_mappings

    def is_empty(self) -> bool:
        return not self.all_ids()
