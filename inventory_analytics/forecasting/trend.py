"""
Linear-trend demand forecasting.

Model
-----
Ordinary least squares over index positions ``x = 0..n-1`` against the
observed demand ``y``::

    slope     = (n·Σxy − Σx·Σy) / (n·Σx² − (Σx)²)
    intercept = (Σy − slope·Σx) / n

The forecast is the fitted line evaluated at ``x = n + horizon_days − 1``,
i.e. the *last* day of the horizon, not a sum over the horizon.  Negative
projections are floored at zero before rounding.

Confidence
----------
``R² = 1 − ssRes / ssTot`` scaled to a percentage and clamped to [0, 100].
A constant series has ``ssTot = 0``: R² is undefined there, so confidence is
100 when the line fits exactly (``ssRes = 0``) and 0 otherwise.

Trend
-----
    slope >  0.1 → increasing
    slope < −0.1 → decreasing
    otherwise    → stable

Degenerate input (empty series, or a single point where the denominator is
zero) returns ``{prediction: 0, confidence: 0, trend: stable}``.  So do
series large enough that the fit or the projection overflows.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from inventory_analytics.config import TrendConfig
from inventory_analytics.models.forecast import RegressionResult
from inventory_analytics.taxonomy.labels import Trend
from inventory_analytics.utils.stats import clamp, is_zero, mean, round_half_up

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = TrendConfig()

TIMEFRAME_DAYS: dict[str, int] = {
    "week":    7,
    "month":   30,
    "quarter": 90,
}


@dataclass(frozen=True)
class LinearFit:
    """Least-squares line through ``(i, series[i])``.

    Attributes:
        slope:     Change in demand per period.
        intercept: Fitted value at ``x = 0``.
        ss_res:    Residual sum of squares.
        ss_tot:    Total sum of squares around the mean.
        n:         Number of observations fitted.
    """

    slope:     float
    intercept: float
    ss_res:    float
    ss_tot:    float
    n:         int

    def value_at(self, x: float) -> float:
        return self.slope * x + self.intercept

    @property
    def confidence(self) -> float:
        """R² as a percentage clamped to [0, 100]."""
        if is_zero(self.ss_tot):
            return 100.0 if is_zero(self.ss_res) else 0.0
        r_squared = 1.0 - self.ss_res / self.ss_tot
        return clamp(r_squared * 100.0, 0.0, 100.0)


def fit_linear_trend(series: Sequence[float]) -> Optional[LinearFit]:
    """Fit an OLS line over index positions.

    Returns:
        ``LinearFit``, or ``None`` when the series has fewer than two points
        (the slope denominator is zero) or the sums overflow to a non-finite
        value.
    """
    n = len(series)
    if n == 0:
        return None

    ys = [float(v) for v in series]
    sum_x = n * (n - 1) / 2.0
    sum_xx = (n - 1) * n * (2 * n - 1) / 6.0
    sum_y = sum(ys)
    sum_xy = sum(i * y for i, y in enumerate(ys))

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        return None

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n

    y_mean = sum_y / n
    residuals = [y - (slope * i + intercept) for i, y in enumerate(ys)]
    ss_res = sum(r * r for r in residuals)
    ss_tot = sum((y - y_mean) * (y - y_mean) for y in ys)

    if not all(math.isfinite(v) for v in (slope, intercept, ss_res, ss_tot)):
        return None

    return LinearFit(slope=slope, intercept=intercept, ss_res=ss_res, ss_tot=ss_tot, n=n)


def classify_trend(slope: float, config: Optional[TrendConfig] = None) -> Trend:
    cfg = config or _DEFAULT_CONFIG
    if slope > cfg.increasing_slope:
        return Trend.INCREASING
    if slope < cfg.decreasing_slope:
        return Trend.DECREASING
    return Trend.STABLE


def predict_demand(
    series: Sequence[float],
    horizon_days: int = 7,
    config: Optional[TrendConfig] = None,
) -> RegressionResult:
    """Project demand to the last day of ``horizon_days`` via a linear trend.

    Args:
        series:       Chronological non-negative demand, one value per period.
        horizon_days: Forecast horizon (>= 1).
        config:       Trend thresholds; defaults to the fixed ±0.1 slopes.

    Returns:
        ``RegressionResult``; the degenerate ``{0, 0, stable}`` result when
        fewer than two observations are available.
    """
    fit = fit_linear_trend(series)
    if fit is None:
        logger.debug("predict_demand: %d observation(s), returning degenerate result", len(series))
        return RegressionResult(prediction=0, confidence=0.0, trend=Trend.STABLE)

    future_x = fit.n + horizon_days - 1
    projected = fit.value_at(future_x)
    if not math.isfinite(projected):
        logger.debug("predict_demand: projection at x=%d overflowed, returning degenerate result", future_x)
        return RegressionResult(prediction=0, confidence=0.0, trend=Trend.STABLE)
    prediction = round_half_up(max(0.0, projected))
    trend = classify_trend(fit.slope, config)

    logger.debug(
        "predict_demand: n=%d slope=%.4f intercept=%.4f x=%d -> %d (%s)",
        fit.n, fit.slope, fit.intercept, future_x, prediction, trend,
    )
    return RegressionResult(prediction=prediction, confidence=fit.confidence, trend=trend)


def fallback_demand_estimate(
    series: Sequence[float],
    stock_level: float = 0.0,
    config: Optional[TrendConfig] = None,
) -> RegressionResult:
    """Moving-average estimate for when a trend fit is not trusted.

    Averages the last ``fallback_window`` observations.  With no history at
    all, assumes a tenth of the current stock sells per period.  Confidence is
    a fixed low value and the trend is always ``stable``.
    """
    cfg = config or _DEFAULT_CONFIG
    recent = list(series)[-cfg.fallback_window:]
    if recent:
        estimate = mean(recent)
    else:
        estimate = stock_level * cfg.fallback_stock_fraction
    if not math.isfinite(estimate):
        logger.debug("fallback_demand_estimate: non-finite estimate, returning degenerate result")
        return RegressionResult(prediction=0, confidence=0.0, trend=Trend.STABLE)

    return RegressionResult(
        prediction=round_half_up(max(0.0, estimate)),
        confidence=cfg.fallback_confidence,
        trend=Trend.STABLE,
    )


def horizon_for_timeframe(timeframe: str) -> int:
    """Map ``"week"`` / ``"month"`` / ``"quarter"`` to a horizon in days.

    Raises:
        ValueError: For any other timeframe name.
    """
    try:
        return TIMEFRAME_DAYS[timeframe.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown timeframe '{timeframe}'. Expected one of {sorted(TIMEFRAME_DAYS)}."
        ) from None
