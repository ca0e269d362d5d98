"""Calculation library: scenario market data, calculation functions, pricers and the engine."""

from calculation.currency import CurrencyAmount, Currency, CurrencyPair, FxRate
from calculation.curves import CurveGroup, ZeroRateCurve
from calculation.engine import (
    CalculationEngine,
    CalculationRequest,
    CalculationResults,
    create_default_engine,
)
from calculation.errors import (
    CalculationError,
    ConversionUnavailableError,
    DependencyCycleError,
    MarketDataBuildError,
    MissingMarketDataError,
    NoRatePathError,
    ScenarioMismatchError,
    UnsupportedMeasureError,
)
from calculation.functions import FunctionGroup, PricingRules, create_default_rules
from calculation.interfaces import Curve, CurrencyConvertible, FxConvertible, ObservableSource, Pricer, Target
from calculation.measures import (
    EXPLAIN_PRESENT_VALUE,
    FX_DELTA,
    NOTIONAL,
    PAR_RATE,
    PRESENT_VALUE,
    PV01,
    Measure,
)
from calculation.products import FXForward, FixedFloatSwap, ZeroCouponBond
from calculation.rates import RatesProvider
from calculation.result import Failure, FailureReason, Result
from calculation.scenario_results import (
    CurrencyValuesArray,
    DefaultScenarioResult,
    FxConvertibleList,
    ScenarioResult,
    to_scenario_result,
)
from calculation.settings import EngineSettings

__all__ = [
    "Currency",
    "CurrencyAmount",
    "CurrencyPair",
    "FxRate",
    "CurveGroup",
    "ZeroRateCurve",
    "CalculationEngine",
    "CalculationRequest",
    "CalculationResults",
    "create_default_engine",
    "CalculationError",
    "ConversionUnavailableError",
    "DependencyCycleError",
    "MarketDataBuildError",
    "MissingMarketDataError",
    "NoRatePathError",
    "ScenarioMismatchError",
    "UnsupportedMeasureError",
    "FunctionGroup",
    "PricingRules",
    "create_default_rules",
    "Curve",
    "CurrencyConvertible",
    "FxConvertible",
    "ObservableSource",
    "Pricer",
    "Target",
    "Measure",
    "PRESENT_VALUE",
    "EXPLAIN_PRESENT_VALUE",
    "PV01",
    "PAR_RATE",
    "NOTIONAL",
    "FX_DELTA",
    "FXForward",
    "FixedFloatSwap",
    "ZeroCouponBond",
    "RatesProvider",
    "Failure",
    "FailureReason",
    "Result",
    "CurrencyValuesArray",
    "DefaultScenarioResult",
    "FxConvertibleList",
    "ScenarioResult",
    "to_scenario_result",
    "EngineSettings",
]
