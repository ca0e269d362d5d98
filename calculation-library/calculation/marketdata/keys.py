"""
Market-data keys: what a calculation function asks for, independent of feed.

`MarketDataMappings` turns a key into the id that is actually looked up.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from calculation.currency import Currency, CurrencyPair


class MarketDataKey:
    value_type: ClassVar[str]


@dataclass(frozen=True)
class DiscountCurveKey(MarketDataKey):
    value_type: ClassVar[str] = "DiscountCurve"

    currency: Currency

    def __str__(self) -> str:
        return f"DiscountCurveKey({self.currency})"


@dataclass(frozen=True)
class FxRateKey(MarketDataKey):
    """FX rate for a pair; (A, B) and (B, A) are the same key."""

    value_type: ClassVar[str] = "FxRate"

    pair: CurrencyPair

    def __post_init__(self) -> None:
        object.__setattr__(self, "pair", self.pair.to_conventional())

    @staticmethod
    def of(base: "str | Currency", counter: "str | Currency") -> "FxRateKey":
        return FxRateKey(CurrencyPair.of(base, counter))

    def __str__(self) -> str:
        return f"FxRateKey({self.pair})"


@dataclass(frozen=True)
class QuoteKey(MarketDataKey):
    value_type: ClassVar[str] = "Quote"

    ticker: str

    def __str__(self) -> str:
        return f"QuoteKey({self.ticker})"
