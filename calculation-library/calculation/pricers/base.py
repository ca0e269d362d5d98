"""Base pricer abstract class for product pricing implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from calculation.currency import Currency, CurrencyAmount
from calculation.rates import RatesProvider


class BasePricer(ABC):
    """Abstract base class for product pricers.

    Subclasses implement present_value() and explain_present_value() for one
    product type. Sensitivities are computed here by bump-and-reprice, so a
    new pricer gets them for free.
    """

    @abstractmethod
    def present_value(self, product: Any, rates: RatesProvider) -> CurrencyAmount:
        """Compute present value, in the product's settlement currency."""
        ...

    @abstractmethod
    def explain_present_value(self, product: Any, rates: RatesProvider) -> dict[str, Any]:
        """Breakdown of the present value calculation."""
        ...

    def present_value_sensitivity(
        self, product: Any, rates: RatesProvider, currency: Currency, bump_bp: float = 1.0
    ) -> CurrencyAmount:
        """PV(bumped) - PV(base) for a parallel shift of one currency's discount curve."""
        bump = bump_bp / 10000.0
        curve = rates.discount_curve(currency)
        bumped_rates = rates.with_curve(currency, curve.bumped(bump))
        return self.present_value(product, bumped_rates).minus(self.present_value(product, rates))
