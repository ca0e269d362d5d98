"""Pricer implementations used by the calculation functions."""

from calculation.pricers.base import BasePricer
from calculation.pricers.bond_pricer import BondPricer
from calculation.pricers.fx_pricer import FXPricer
from calculation.pricers.swap_pricer import SwapPricer

__all__ = [
    "BasePricer",
    "BondPricer",
    "FXPricer",
    "SwapPricer",
]
