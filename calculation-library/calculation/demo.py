"""Demo: USD/EUR curves from quotes, three rate scenarios, PV and risk for a bond, swap and FX forward."""

from datetime import date

from calculation.currency import EUR, USD, CurrencyPair
from calculation.engine import CalculationRequest, create_default_engine
from calculation.marketdata import (
    CurveDefinition,
    CurveGroupDefinition,
    CurveNode,
    FxRateConfig,
    MarketDataConfig,
    MarketDataMappings,
    QuoteId,
    QuoteShifts,
    ScenarioDefinition,
    ScenarioMarketDataEnvironment,
    ShiftType,
)
from calculation.measures import FX_DELTA, PAR_RATE, PRESENT_VALUE, PV01
from calculation.products import FXForward, FixedFloatSwap, ZeroCouponBond


def main() -> None:
    # Quoted zero rates per pillar, and the EURUSD spot
    pillars = [0.5, 1.0, 2.0, 5.0, 10.0]
    usd_rates = [0.045, 0.043, 0.040, 0.038, 0.037]
    eur_rates = [0.040, 0.038, 0.036, 0.034, 0.033]  # Lower than USD for typical EURUSD fwd pts

    builder = ScenarioMarketDataEnvironment.builder(1, date(2026, 1, 2))
    for t, r in zip(pillars, usd_rates):
        builder.add_value(QuoteId(f"USD_{t}Y"), r)
    for t, r in zip(pillars, eur_rates):
        builder.add_value(QuoteId(f"EUR_{t}Y"), r)
    builder.add_value(QuoteId("EURUSD"), 1.08)

    curve_group = CurveGroupDefinition(
        name="DEMO",
        curves=(
            CurveDefinition("USD_DISC", USD, tuple(CurveNode(t, f"USD_{t}Y") for t in pillars)),
            CurveDefinition("EUR_DISC", EUR, tuple(CurveNode(t, f"EUR_{t}Y") for t in pillars)),
        ),
    )
    config = MarketDataConfig.of(
        DEMO=curve_group,
        fx=FxRateConfig({CurrencyPair(EUR, USD): "EURUSD"}),
    )

    # Base, -50bp and +50bp on every USD node
    scenarios = ScenarioDefinition([
        QuoteShifts(tuple(f"USD_{t}Y" for t in pillars), (0.0, -0.005, 0.005), ShiftType.ABSOLUTE),
    ])

    zcb = ZeroCouponBond(currency=USD, maturity=2.0, notional=1_000_000)
    swap = FixedFloatSwap(currency=USD, notional=10_000_000, fixed_rate=0.04, pay_times=[0.5, 1.0, 1.5, 2.0])
    fxfwd = FXForward(pair=CurrencyPair(EUR, USD), maturity=1.0, notional_base=5_000_000, strike=1.085)

    request = CalculationRequest(
        targets=[zcb, swap, fxfwd],
        measures=[PRESENT_VALUE, PV01, PAR_RATE, FX_DELTA],
        market_data=builder.build(),
        config=config,
        mappings=MarketDataMappings.of(curve_group="DEMO"),
        reporting_currency=USD,
        scenarios=scenarios,
    )
    results = create_default_engine().calculate(request)

    print("=== Scenario Calculation Demo ===\n")
    print("Scenarios: base, USD -50bp, USD +50bp; reporting currency USD\n")
    for row, target in enumerate(results.targets):
        print(f"{row + 1}) {type(target).__name__}")
        for col, measure in enumerate(results.measures):
            result = results.get(row, col)
            if result.is_failure:
                print(f"   {measure.name:<14} {result.failure}")
                continue
            values = ", ".join(
                f"{getattr(v, 'amount', v):,.6f}" if measure == PAR_RATE else f"{getattr(v, 'amount', v):,.2f}"
                for v in result.value
            )
            print(f"   {measure.name:<14} [{values}]")
        print()
    print("Done.")


if __name__ == "__main__":
    main()
