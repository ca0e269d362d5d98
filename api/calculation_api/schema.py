"""GraphQL schema: scenario calculation queries."""

from datetime import date
from typing import Optional

import strawberry

from calculation_api.services import calculate, supported_measures
from calculation_api.types import CalculationResult, MarketDataInput, QuoteShiftInput, TradeInput

API_VERSION = "0.1.0"


@strawberry.type
class Query:
    @strawberry.field
    def version(self) -> str:
        return API_VERSION

    @strawberry.field
    def measures(self) -> list[str]:
        """Measures configured for at least one product."""
        return supported_measures()

    @strawberry.field
    def calculate(
        self,
        trades: list[TradeInput],
        measures: list[str],
        market_data: MarketDataInput,
        valuation_date: date,
        scenario_count: int = 1,
        reporting_currency: Optional[str] = None,
        shifts: Optional[list[QuoteShiftInput]] = None,
    ) -> CalculationResult:
        """
        Calculate every measure for every trade across the scenarios.
        Failing cells come back with success false; invalid input is a GraphQL error.
        """
        return calculate(
            trades=trades,
            measures=measures,
            market_data=market_data,
            valuation_date=valuation_date,
            scenario_count=scenario_count,
            reporting_currency=reporting_currency,
            shifts=shifts,
        )


schema = strawberry.Schema(query=Query)
