"""Service layer: convert GraphQL inputs to calculation library objects and run the engine."""

from __future__ import annotations

import logging
import os
from datetime import date
from functools import lru_cache
from typing import Any, Optional

from calculation.currency import Currency, CurrencyAmount, CurrencyPair
from calculation.engine import CalculationEngine, CalculationRequest, CalculationResults, create_default_engine
from calculation.functions import create_default_rules
from calculation.marketdata import (
    CurveDefinition,
    CurveGroupDefinition,
    CurveNode,
    FxRateConfig,
    MarketDataBuilder,
    MarketDataConfig,
    MarketDataMappings,
    QuoteId,
    QuoteShifts,
    ScenarioDefinition,
    ScenarioMarketDataEnvironment,
    ShiftType,
)
from calculation.measures import Measure
from calculation.products import FXForward, FixedFloatSwap, ZeroCouponBond
from calculation.result import Result
from calculation.scenario_results import ScenarioResult
from calculation.settings import EngineSettings

from calculation_api.quotes import RedisQuoteSource
from calculation_api.types import (
    CalculationResult,
    CellResult,
    CurveGroupInput,
    MarketDataFailure,
    MarketDataInput,
    QuoteShiftInput,
    TradeInput,
)

LOGGER = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_engine() -> CalculationEngine:
    """
    Engine shared by every request, configured from the environment. With
    REDIS_URL set, quotes missing from a request are read from Redis.
    """
    settings = EngineSettings.from_env()
    if not os.environ.get("REDIS_URL"):
        return create_default_engine(settings)
    builder = MarketDataBuilder(observable_source=RedisQuoteSource(), max_workers=settings.max_build_workers)
    return CalculationEngine(rules=create_default_rules(), builder=builder, max_workers=settings.max_workers)


def supported_measures() -> list[str]:
    rules = get_engine().rules
    names = {
        m.name
        for target_type in rules.target_types
        for group in rules.groups_for(target_type)
        for m in group.configured_measures
    }
    return sorted(names)


def _trade_from_input(index: int, trade: TradeInput) -> Any:
    """Build a product from a TradeInput; exactly one product field must be set."""
    chosen = [p for p in (trade.zero_coupon_bond, trade.swap, trade.fx_forward) if p is not None]
    if len(chosen) != 1:
        raise ValueError(f"trades[{index}] must set exactly one of zeroCouponBond, swap, fxForward")
    if trade.zero_coupon_bond is not None:
        bond = trade.zero_coupon_bond
        if bond.maturity < 0:
            raise ValueError(f"trades[{index}].zeroCouponBond.maturity must be >= 0")
        return ZeroCouponBond(currency=Currency.of(bond.currency), maturity=bond.maturity, notional=bond.notional)
    if trade.swap is not None:
        swap = trade.swap
        if not swap.pay_times:
            raise ValueError(f"trades[{index}].swap.payTimes must not be empty")
        return FixedFloatSwap(
            currency=Currency.of(swap.currency),
            notional=swap.notional,
            fixed_rate=swap.fixed_rate,
            pay_times=list(swap.pay_times),
            t0=swap.t0,
        )
    forward = trade.fx_forward
    assert forward is not None
    if forward.maturity < 0:
        raise ValueError(f"trades[{index}].fxForward.maturity must be >= 0")
    return FXForward(
        pair=CurrencyPair.parse(forward.pair),
        maturity=forward.maturity,
        notional_base=forward.notional_base,
        strike=forward.strike,
    )


def _curve_group_from_input(group: CurveGroupInput) -> CurveGroupDefinition:
    if not group.curves:
        raise ValueError("marketData.curveGroup.curves must not be empty")
    return CurveGroupDefinition(
        name=group.name,
        curves=tuple(
            CurveDefinition(
                name=c.name,
                currency=Currency.of(c.currency),
                nodes=tuple(CurveNode(n.time, n.ticker) for n in c.nodes),
            )
            for c in group.curves
        ),
    )


def market_data_from_input(
    m: MarketDataInput, valuation_date: date, scenario_count: int
) -> tuple[ScenarioMarketDataEnvironment, MarketDataConfig, MarketDataMappings]:
    """Supplied environment, config and mappings from GraphQL MarketDataInput."""
    if scenario_count < 1:
        raise ValueError("scenarioCount must be >= 1")
    builder = ScenarioMarketDataEnvironment.builder(scenario_count, valuation_date)
    for quote in m.quotes:
        if (quote.value is None) == (quote.values is None):
            raise ValueError(f"quote {quote.ticker} must set exactly one of value, values")
        if quote.value is not None:
            builder.add_value(QuoteId(quote.ticker), quote.value)
        else:
            builder.add_values(QuoteId(quote.ticker), quote.values or [])

    config = MarketDataConfig.empty()
    mappings = MarketDataMappings()
    if m.fx_quotes:
        fx = FxRateConfig({CurrencyPair.parse(q.pair): q.ticker for q in m.fx_quotes})
        config = config.with_config("fx", fx)
    if m.curve_group is not None:
        definition = _curve_group_from_input(m.curve_group)
        config = config.with_config(definition.name, definition)
        mappings = MarketDataMappings.of(curve_group=definition.name)
    return builder.build(), config, mappings


def _scenarios_from_input(shifts: Optional[list[QuoteShiftInput]]) -> Optional[ScenarioDefinition]:
    if not shifts:
        return None
    return ScenarioDefinition([
        QuoteShifts(tuple(s.tickers), tuple(s.shifts), ShiftType(s.shift_type.upper())) for s in shifts
    ])


def _cell_from_result(row: int, column: int, measure: Measure, result: Result[ScenarioResult]) -> CellResult:
    if result.failure is not None:
        return CellResult(
            row=row,
            column=column,
            measure=measure.name,
            success=False,
            reason=result.failure.reason.value,
            message=result.failure.message,
        )
    items = list(result.value)
    cell = CellResult(row=row, column=column, measure=measure.name, success=True)
    if items and all(isinstance(v, CurrencyAmount) for v in items):
        cell.currency = items[0].currency.code
        cell.values = [v.amount for v in items]
    elif all(isinstance(v, dict) for v in items):
        cell.explain = items
    else:
        cell.values = [float(v) for v in items]
    return cell


def _to_output(results: CalculationResults) -> CalculationResult:
    cells = [
        _cell_from_result(row, column, measure, results.get(row, column))
        for row in range(results.row_count)
        for column, measure in enumerate(results.measures)
    ]
    environment = results.market_data
    failures = []
    for market_data_id in sorted(environment.failed_ids(), key=str):
        failure = environment.failure(market_data_id)
        assert failure is not None
        failures.append(MarketDataFailure(id=str(market_data_id), reason=failure.reason.value, message=failure.message))
    return CalculationResult(
        scenario_count=environment.scenario_count,
        cells=cells,
        market_data_failures=failures,
    )


def calculate(
    trades: list[TradeInput],
    measures: list[str],
    market_data: MarketDataInput,
    valuation_date: date,
    scenario_count: int = 1,
    reporting_currency: Optional[str] = None,
    shifts: Optional[list[QuoteShiftInput]] = None,
) -> CalculationResult:
    """Run one calculation request; per-cell failures are returned, not raised."""
    if not trades:
        raise ValueError("trades must not be empty")
    targets = [_trade_from_input(i, t) for i, t in enumerate(trades)]
    environment, config, mappings = market_data_from_input(market_data, valuation_date, scenario_count)
    request = CalculationRequest(
        targets=targets,
        measures=[Measure.of(name) for name in measures],
        market_data=environment,
        config=config,
        mappings=mappings,
        reporting_currency=Currency.of(reporting_currency) if reporting_currency else None,
        scenarios=_scenarios_from_input(shifts),
    )
    results = get_engine().calculate(request)
    LOGGER.info(
        "Calculated %d trades x %d measures, %d failed cells",
        results.row_count, results.column_count, len(results.failures()),
    )
    return _to_output(results)
