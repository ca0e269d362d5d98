"""
Currency value types: Currency, CurrencyPair, CurrencyAmount and FxRate.

Currency metadata (minor units, triangulation currency) and the market
convention pair ordering come from `calculation.refdata`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from calculation.refdata import ReferenceData, default_reference_data

if TYPE_CHECKING:
    from calculation.interfaces import FxRateProvider

_CODE_RE = re.compile(r"^[A-Z]{3}$")
_PAIR_RE = re.compile(r"^([A-Za-z]{3})/?([A-Za-z]{3})$")


@dataclass(frozen=True, order=True)
class Currency:
    """ISO-4217 currency, identified by its three-letter code."""

    code: str

    def __post_init__(self) -> None:
        if not _CODE_RE.match(self.code):
            raise ValueError(f"Invalid currency code: {self.code!r}")

    @staticmethod
    def of(code: "str | Currency") -> "Currency":
        if isinstance(code, Currency):
            return code
        return Currency(code.strip().upper())

    @property
    def minor_unit_digits(self) -> int:
        return default_reference_data().currency_info(self.code).minor_unit_digits

    @property
    def triangulation_currency(self) -> "Currency":
        return Currency(default_reference_data().currency_info(self.code).triangulation_currency)

    def __str__(self) -> str:
        return self.code


USD = Currency("USD")
EUR = Currency("EUR")
GBP = Currency("GBP")
JPY = Currency("JPY")
CHF = Currency("CHF")
AUD = Currency("AUD")
CAD = Currency("CAD")


@dataclass(frozen=True)
class CurrencyPair:
    """Ordered pair of currencies, e.g. EUR/USD (base EUR, counter USD)."""

    base: Currency
    counter: Currency

    @staticmethod
    def of(base: "str | Currency", counter: "str | Currency") -> "CurrencyPair":
        return CurrencyPair(Currency.of(base), Currency.of(counter))

    @staticmethod
    def parse(text: str) -> "CurrencyPair":
        """Parse 'EUR/USD' or 'EURUSD'."""
        match = _PAIR_RE.match(text.strip())
        if not match:
            raise ValueError(f"Invalid currency pair: {text!r}")
        return CurrencyPair.of(match.group(1), match.group(2))

    def inverse(self) -> "CurrencyPair":
        return CurrencyPair(self.counter, self.base)

    def is_identity(self) -> bool:
        return self.base == self.counter

    def to_conventional(self, refdata: Optional[ReferenceData] = None) -> "CurrencyPair":
        """
        Return the market convention orientation of this pair.

        Explicit pair table first, then the priority ordering (higher priority
        currency is the base, a listed currency beats an unlisted one), then
        lexicographic order of the codes. The answer never depends on which
        orientation the pair was built in.
        """
        if self.is_identity():
            return self
        rd = refdata or default_reference_data()
        base, counter = self.base.code, self.counter.code
        if rd.is_conventional_pair(base, counter):
            return self
        if rd.is_conventional_pair(counter, base):
            return self.inverse()
        base_priority = rd.priority(base)
        counter_priority = rd.priority(counter)
        if base_priority is not None and counter_priority is not None:
            base_first = base_priority < counter_priority
        elif base_priority is not None or counter_priority is not None:
            base_first = base_priority is not None
        else:
            base_first = base < counter
        return self if base_first else self.inverse()

    def is_conventional(self, refdata: Optional[ReferenceData] = None) -> bool:
        return self.to_conventional(refdata) == self

    def __str__(self) -> str:
        return f"{self.base}/{self.counter}"


@dataclass(frozen=True)
class CurrencyAmount:
    """A monetary amount in one currency. Convertible to another currency via FX."""

    currency: Currency
    amount: float

    @staticmethod
    def of(currency: "str | Currency", amount: float) -> "CurrencyAmount":
        return CurrencyAmount(Currency.of(currency), float(amount))

    def plus(self, other: "CurrencyAmount") -> "CurrencyAmount":
        if other.currency != self.currency:
            raise ValueError(f"Cannot add {other.currency} to {self.currency}")
        return CurrencyAmount(self.currency, self.amount + other.amount)

    def minus(self, other: "CurrencyAmount") -> "CurrencyAmount":
        return self.plus(other.negated())

    def negated(self) -> "CurrencyAmount":
        return CurrencyAmount(self.currency, -self.amount)

    def convert_with(self, result_currency: Currency, fx: "FxRateProvider") -> "CurrencyAmount":
        if result_currency == self.currency:
            return self
        rate = fx.fx_rate(self.currency, result_currency)
        return CurrencyAmount(result_currency, self.amount * rate)

    def __str__(self) -> str:
        return f"{self.currency} {self.amount}"


@dataclass(frozen=True)
class FxRate:
    """Price of one unit of `pair.base` in `pair.counter`."""

    pair: CurrencyPair
    rate: float

    def __post_init__(self) -> None:
        if not self.rate > 0:
            raise ValueError(f"FX rate must be positive, got {self.rate} for {self.pair}")
        if self.pair.is_identity() and self.rate != 1.0:
            raise ValueError(f"Identity pair {self.pair} must have rate 1, got {self.rate}")

    @staticmethod
    def of(base: "str | Currency", counter: "str | Currency", rate: float) -> "FxRate":
        return FxRate(CurrencyPair.of(base, counter), float(rate))

    def inverse(self) -> "FxRate":
        return FxRate(self.pair.inverse(), 1.0 / self.rate)

    def fx_rate(self, base: Currency, counter: Currency) -> float:
        """Rate for base/counter, inverting if this rate is quoted the other way round."""
        if base == counter:
            return 1.0
        if base == self.pair.base and counter == self.pair.counter:
            return self.rate
        if base == self.pair.counter and counter == self.pair.base:
            return 1.0 / self.rate
        raise ValueError(f"No rate for {base}/{counter} in FX rate {self.pair}")

    def cross_rate(self, other: "FxRate") -> "FxRate":
        """
        Derive A/B from A/C (this) and C/B (other), in either orientation.
        The two rates must share exactly one currency.
        """
        shared = {self.pair.base, self.pair.counter} & {other.pair.base, other.pair.counter}
        if len(shared) != 1 or self.pair.is_identity() or other.pair.is_identity():
            raise ValueError(f"Cannot cross {self.pair} with {other.pair}")
        common = shared.pop()
        a = self.pair.counter if self.pair.base == common else self.pair.base
        b = other.pair.counter if other.pair.base == common else other.pair.base
        return FxRate(CurrencyPair(a, b), self.fx_rate(a, common) * other.fx_rate(common, b))

    def __str__(self) -> str:
        return f"{self.pair} {self.rate}"
