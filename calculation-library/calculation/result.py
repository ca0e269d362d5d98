"""
Success/failure wrapper returned for every (target, measure) cell.

A failing cell carries a `Failure` (reason + message) instead of raising, so
one broken calculation never takes its siblings down with it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class FailureReason(Enum):
    """Why a calculation or a piece of market data could not be produced."""

    MISSING_DATA = "MISSING_DATA"
    UNSUPPORTED_MEASURE = "UNSUPPORTED_MEASURE"
    BUILD_FAILED = "BUILD_FAILED"
    SCENARIO_MISMATCH = "SCENARIO_MISMATCH"
    CONVERSION_UNAVAILABLE = "CONVERSION_UNAVAILABLE"
    CALCULATION_FAILED = "CALCULATION_FAILED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class Failure:
    reason: FailureReason
    message: str

    def __str__(self) -> str:
        return f"{self.reason.value}: {self.message}"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a value or a `Failure`, never both."""

    _value: Optional[T] = None
    failure: Optional[Failure] = None

    @staticmethod
    def success(value: T) -> "Result[T]":
        return Result(_value=value)

    @staticmethod
    def failed(reason: FailureReason, message: str) -> "Result[Any]":
        return Result(failure=Failure(reason, message))

    @staticmethod
    def from_exception(exc: Exception) -> "Result[Any]":
        """Failure for an exception; `CalculationError`s keep their own reason."""
        reason = getattr(exc, "reason", FailureReason.CALCULATION_FAILED)
        if not isinstance(reason, FailureReason):
            reason = FailureReason.CALCULATION_FAILED
        return Result.failed(reason, str(exc) or type(exc).__name__)

    @staticmethod
    def of(fn: Callable[[], T]) -> "Result[T]":
        """Call fn and capture its value, or the exception it raised, as a Result."""
        try:
            return Result.success(fn())
        except Exception as exc:  # noqa: BLE001
            return Result.from_exception(exc)

    @property
    def is_success(self) -> bool:
        return self.failure is None

    @property
    def is_failure(self) -> bool:
        return self.failure is not None

    @property
    def value(self) -> T:
        """Return the value. Raises ValueError if this is a failure."""
        if self.failure is not None:
            raise ValueError(f"Result is a failure: {self.failure}")
        return self._value  # type: ignore[return-value]

    def map(self, fn: Callable[[T], Any]) -> "Result[Any]":
        """Apply fn to the value of a success; failures pass through unchanged."""
        if self.failure is not None:
            return self
        return Result.of(lambda: fn(self._value))  # type: ignore[arg-type]
