"""Measures: what is calculated for a target (PV, PV01, ...)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Measure:
    name: str

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Measure name must not be empty")

    @staticmethod
    def of(name: str) -> "Measure":
        return _STANDARD.get(name.upper(), Measure(name))

    def __str__(self) -> str:
        return self.name


PRESENT_VALUE = Measure("PRESENT_VALUE")
EXPLAIN_PRESENT_VALUE = Measure("EXPLAIN_PRESENT_VALUE")
PV01 = Measure("PV01")
PAR_RATE = Measure("PAR_RATE")
NOTIONAL = Measure("NOTIONAL")
FX_DELTA = Measure("FX_DELTA")

_STANDARD = {
    m.name: m
    for m in (PRESENT_VALUE, EXPLAIN_PRESENT_VALUE, PV01, PAR_RATE, NOTIONAL, FX_DELTA)
}
