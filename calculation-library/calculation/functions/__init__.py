"""Calculation functions, function groups and the pricing rules that dispatch to them."""

from calculation.functions.base import CalculationFunction, PerScenarioFunction
from calculation.functions.bond import bond_function_group
from calculation.functions.fx import fx_forward_function_group
from calculation.functions.groups import FunctionGroup, FunctionGroupBuilder
from calculation.functions.rules import PricingRules, target_type_of
from calculation.functions.swap import swap_function_group


def create_default_rules() -> PricingRules:
    """Rules for every built-in product."""
    return PricingRules.of(
        bond_function_group(),
        swap_function_group(),
        fx_forward_function_group(),
    )


__all__ = [
    "CalculationFunction",
    "PerScenarioFunction",
    "FunctionGroup",
    "FunctionGroupBuilder",
    "PricingRules",
    "target_type_of",
    "bond_function_group",
    "swap_function_group",
    "fx_forward_function_group",
    "create_default_rules",
]
