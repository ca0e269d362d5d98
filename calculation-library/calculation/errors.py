"""
Exception taxonomy for the calculation engine.

Every error carries the `FailureReason` it maps to, so the engine can turn a
raised exception into a failed cell (see `Result.from_exception`) without a
lookup table. They subclass ValueError, matching how the pricing code has
always signalled bad inputs.
"""

from __future__ import annotations

from calculation.result import FailureReason


class CalculationError(ValueError):
    reason: FailureReason = FailureReason.CALCULATION_FAILED


class MissingMarketDataError(CalculationError):
    """A requested piece of market data has no source, mapping or value."""

    reason = FailureReason.MISSING_DATA


class UnsupportedMeasureError(CalculationError):
    """No function group provides the measure for the target's type."""

    reason = FailureReason.UNSUPPORTED_MEASURE

    def __init__(self, target_type: str, measure: object) -> None:
        super().__init__(
            f"Unsupported measure {measure} for target type {target_type}"
        )
        self.target_type = target_type
        self.measure = measure


class MarketDataBuildError(CalculationError):
    """A market-data function could not build a derived value."""

    reason = FailureReason.BUILD_FAILED


class NoRatePathError(MarketDataBuildError):
    """No direct quote or single-hop triangulation links two currencies."""


class DependencyCycleError(MarketDataBuildError):
    """Market-data requirements depend on each other in a cycle."""


class ScenarioMismatchError(CalculationError):
    """A per-scenario collection has the wrong number of entries."""

    reason = FailureReason.SCENARIO_MISMATCH

    def __init__(self, message: str, observed: int, expected: int) -> None:
        super().__init__(message)
        self.observed = observed
        self.expected = expected


class ConversionUnavailableError(MissingMarketDataError):
    """No FX rate data at all for a currency pair needed by a conversion."""

    reason = FailureReason.CONVERSION_UNAVAILABLE
