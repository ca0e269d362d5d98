"""
Market-data configuration: the definitions builders need beyond the data itself.

`MarketDataConfig` is an immutable registry of named configuration objects,
looked up by (type, name), or as the single default of a type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, TypeVar

from calculation.currency import Currency, CurrencyPair
from calculation.errors import MissingMarketDataError

C = TypeVar("C")


@dataclass(frozen=True)
class CurveNode:
    """A pillar of a curve; its zero rate (continuously compounded) is the quote `ticker`."""

    time: float
    ticker: str


@dataclass(frozen=True)
class CurveDefinition:
    name: str
    currency: Currency
    nodes: tuple[CurveNode, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))
        if not self.nodes:
            raise ValueError(f"Curve {self.name} has no nodes")
        times = [n.time for n in self.nodes]
        for i in range(1, len(times)):
            if times[i] <= times[i - 1]:
                raise ValueError(f"Curve {self.name}: node times must be strictly increasing")


@dataclass(frozen=True)
class CurveGroupDefinition:
    """Curves built together; at most one discount curve per currency."""

    name: str
    curves: tuple[CurveDefinition, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "curves", tuple(self.curves))
        currencies = [c.currency for c in self.curves]
        if len(set(currencies)) != len(currencies):
            raise ValueError(f"Curve group {self.name} has more than one curve for a currency")

    def curve_for(self, currency: Currency) -> Optional[CurveDefinition]:
        return next((c for c in self.curves if c.currency == currency), None)


@dataclass(frozen=True)
class FxRateConfig:
    """Which currency pairs are quoted directly, and under which ticker."""

    quotes: Mapping[CurrencyPair, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "quotes", MappingProxyType(dict(self.quotes)))

    def quote_for(self, base: Currency, counter: Currency) -> Optional[tuple[CurrencyPair, str]]:
        """The quoted pair (in either orientation) and its ticker, or None."""
        for pair in (CurrencyPair(base, counter), CurrencyPair(counter, base)):
            ticker = self.quotes.get(pair)
            if ticker is not None:
                return pair, ticker
        return None

    def is_quoted(self, base: Currency, counter: Currency) -> bool:
        return self.quote_for(base, counter) is not None


class MarketDataConfig:
    """Immutable registry of configuration objects keyed by (type, name)."""

    def __init__(self, configs: Optional[Mapping[tuple[type, str], Any]] = None) -> None:
        self._configs = MappingProxyType(dict(configs or {}))

    @staticmethod
    def empty() -> "MarketDataConfig":
        return MarketDataConfig()

    @staticmethod
    def of(**named: Any) -> "MarketDataConfig":
        """Build from name=config keyword arguments."""
        return MarketDataConfig({(type(v), k): v for k, v in named.items()})

    def with_config(self, name: str, value: Any) -> "MarketDataConfig":
        """Return a new config with the entry added or replaced."""
        configs = dict(self._configs)
        configs[(type(value), name)] = value
        return MarketDataConfig(configs)

    def find(self, config_type: type[C], name: str) -> Optional[C]:
        return self._configs.get((config_type, name))

    def get(self, config_type: type[C], name: str) -> C:
        value = self.find(config_type, name)
        if value is None:
            raise MissingMarketDataError(
                f"No configuration found of type {config_type.__name__} with name {name}"
            )
        return value

    def find_default(self, config_type: type[C]) -> Optional[C]:
        """The only config of this type, None if there is none. Raises if ambiguous."""
        matches = [v for (t, _), v in self._configs.items() if t is config_type]
        if len(matches) > 1:
            raise ValueError(
                f"Multiple configurations of type {config_type.__name__}; look one up by name"
            )
        return matches[0] if matches else None
