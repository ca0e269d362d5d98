"""GraphQL types for the calculation API."""

from __future__ import annotations

from typing import Optional

import strawberry
from strawberry.scalars import JSON


# --- Input types (request payloads) ---


@strawberry.input
class QuoteInput:
    """Observable quote: one value shared by all scenarios, or one value per scenario."""

    ticker: str
    value: Optional[float] = None
    values: Optional[list[float]] = None


@strawberry.input
class FxQuoteInput:
    """Directly quoted currency pair (e.g. EUR/USD) and the ticker holding its rate."""

    pair: str
    ticker: str


@strawberry.input
class CurveNodeInput:
    """Curve pillar (year fraction); its continuously compounded zero rate is the quote `ticker`."""

    time: float
    ticker: str


@strawberry.input
class CurveInput:
    name: str
    currency: str
    nodes: list[CurveNodeInput]


@strawberry.input
class CurveGroupInput:
    """Discount curves built together, at most one per currency."""

    name: str
    curves: list[CurveInput]


@strawberry.input
class MarketDataInput:
    """Supplied market data and the definitions needed to derive the rest."""

    quotes: list[QuoteInput]
    fx_quotes: Optional[list[FxQuoteInput]] = None
    curve_group: Optional[CurveGroupInput] = None


@strawberry.input
class QuoteShiftInput:
    """One shift per scenario applied to the tickers; shift_type ABSOLUTE or RELATIVE."""

    tickers: list[str]
    shifts: list[float]
    shift_type: str = "ABSOLUTE"


@strawberry.input
class ZeroCouponBondInput:
    """Zero-coupon bond: single cashflow at maturity."""

    currency: str
    maturity: float
    notional: float


@strawberry.input
class FixedFloatSwapInput:
    """Fixed-float interest rate swap (receive float, pay fixed)."""

    currency: str
    notional: float
    fixed_rate: float
    pay_times: list[float]
    t0: float = 0.0


@strawberry.input
class FXForwardInput:
    """FX forward: notional in the base currency, strike in counter per base. Uses CIP (both discount curves)."""

    pair: str
    maturity: float
    notional_base: float
    strike: float


@strawberry.input
class TradeInput:
    """Exactly one product must be set."""

    zero_coupon_bond: Optional[ZeroCouponBondInput] = None
    swap: Optional[FixedFloatSwapInput] = None
    fx_forward: Optional[FXForwardInput] = None


# --- Output types (response payloads) ---


@strawberry.type
class CellResult:
    """Result of one measure for one trade: per-scenario values, or the failure."""

    row: int
    column: int
    measure: str
    success: bool
    currency: Optional[str] = None
    values: Optional[list[float]] = None
    explain: Optional[list[JSON]] = None
    reason: Optional[str] = None
    message: Optional[str] = None


@strawberry.type
class MarketDataFailure:
    """Market data that could not be sourced or built."""

    id: str
    reason: str
    message: str


@strawberry.type
class CalculationResult:
    scenario_count: int
    cells: list[CellResult]
    market_data_failures: list[MarketDataFailure]
