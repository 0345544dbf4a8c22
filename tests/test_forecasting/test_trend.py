"""
Tests for inventory_analytics/forecasting/trend.py.

What we test
------------
predict_demand():
  - Empty and single-point series return the degenerate {0, 0, stable}.
  - Perfect linear series: exact slope/intercept, confidence 100.
  - Constant series: confidence 100, stable.
  - Projection uses x = n + horizon − 1 (last day of the horizon).
  - Negative projections floor at zero.
  - Noisy series: R²-derived confidence.
  - Halves round up, not to even.
  - Inputs whose sums or projection overflow return the degenerate result.
  - Identical inputs give identical outputs.

fit_linear_trend() / classify_trend():
  - None below two points; slope thresholds are strict.

fallback_demand_estimate() / horizon_for_timeframe().
"""

from __future__ import annotations

import math

import pytest

from inventory_analytics.config import TrendConfig
from inventory_analytics.forecasting.trend import (
    classify_trend,
    fallback_demand_estimate,
    fit_linear_trend,
    horizon_for_timeframe,
    predict_demand,
)
from inventory_analytics.taxonomy.labels import Trend


# ── Degenerate input ───────────────────────────────────────────────────────────

def test_empty_series_returns_degenerate_result() -> None:
    r = predict_demand([])
    assert r.prediction == 0
    assert r.confidence == 0.0
    assert r.trend == Trend.STABLE


def test_single_point_returns_degenerate_result() -> None:
    """n = 1 makes the slope denominator zero, so no fit is attempted."""
    r = predict_demand([42.0], horizon_days=3)
    assert (r.prediction, r.confidence, r.trend) == (0, 0.0, Trend.STABLE)


def test_fit_linear_trend_none_below_two_points() -> None:
    assert fit_linear_trend([]) is None
    assert fit_linear_trend([7.0]) is None


# ── Exact fits ────────────────────────────────────────────────────────────────

def test_perfect_increasing_line() -> None:
    fit = fit_linear_trend([10, 20, 30, 40, 50])
    assert fit is not None
    assert fit.slope == pytest.approx(10.0)
    assert fit.intercept == pytest.approx(10.0)

    r = predict_demand([10, 20, 30, 40, 50], 7)
    # 10 · (5 + 7 − 1) + 10
    assert r.prediction == 120
    assert r.confidence == pytest.approx(100.0)
    assert r.trend == Trend.INCREASING


def test_constant_series_is_a_perfect_flat_fit() -> None:
    r = predict_demand([5, 5, 5, 5, 5], 7)
    assert r.prediction == 5
    assert r.confidence == pytest.approx(100.0)
    assert r.trend == Trend.STABLE


def test_all_zero_series() -> None:
    r = predict_demand([0, 0, 0, 0])
    assert r.prediction == 0
    assert r.confidence == pytest.approx(100.0)
    assert r.trend == Trend.STABLE


def test_decreasing_line_floors_prediction_at_zero() -> None:
    # slope −10, intercept 50; x = 11 → −60
    r = predict_demand([50, 40, 30, 20, 10], 7)
    assert r.prediction == 0
    assert r.trend == Trend.DECREASING
    assert r.confidence == pytest.approx(100.0)


# ── Evaluation point ──────────────────────────────────────────────────────────

@pytest.mark.parametrize("horizon,expected", [(1, 4), (3, 6), (10, 13)])
def test_projection_is_last_day_of_horizon(horizon: int, expected: int) -> None:
    """y = x on [0, 1, 2, 3]; the projection is evaluated at n + horizon − 1."""
    assert predict_demand([0, 1, 2, 3], horizon).prediction == expected


def test_default_horizon_is_seven_days() -> None:
    assert predict_demand([0, 1, 2, 3]).prediction == 10


# ── Goodness of fit ───────────────────────────────────────────────────────────

def test_noisy_series_confidence_is_r_squared() -> None:
    # slope 0.8, intercept 1.3, ssRes 1.8, ssTot 5.0 → R² 0.64
    fit = fit_linear_trend([1, 3, 2, 4])
    assert fit is not None
    assert fit.slope == pytest.approx(0.8)
    assert fit.intercept == pytest.approx(1.3)
    assert fit.ss_res == pytest.approx(1.8)
    assert fit.ss_tot == pytest.approx(5.0)

    r = predict_demand([1, 3, 2, 4], 7)
    assert r.confidence == pytest.approx(64.0)
    # 0.8 · 10 + 1.3 = 9.3
    assert r.prediction == 9
    assert r.trend == Trend.INCREASING


def test_confidence_always_within_bounds() -> None:
    for series in ([3, 9, 1, 7, 2, 8], [100, 0, 100, 0], [1, 2], [0.5, 0.25, 0.75]):
        r = predict_demand(series)
        assert 0.0 <= r.confidence <= 100.0
        assert math.isfinite(r.confidence)


def test_zigzag_with_no_trend_has_zero_confidence() -> None:
    # Symmetric series: slope 0, so the line explains nothing.
    r = predict_demand([0, 10, 10, 0])
    assert r.confidence == pytest.approx(0.0)
    assert r.trend == Trend.STABLE


# ── Rounding ──────────────────────────────────────────────────────────────────

def test_half_values_round_up() -> None:
    """Flat 2.5 projects 2.5; Python's round() would give 2."""
    assert predict_demand([2.5, 2.5]).prediction == 3


# ── Extreme magnitudes ────────────────────────────────────────────────────────

def test_overflowing_fit_returns_degenerate_result() -> None:
    assert fit_linear_trend([0.0, 1e308]) is None
    r = predict_demand([0.0, 1e308])
    assert r.prediction == 0
    assert r.confidence == 0.0
    assert r.trend == Trend.STABLE


def test_overflowing_projection_returns_degenerate_result() -> None:
    # slope 1e150 fits fine; at x ~ 1e160 the line overflows
    assert fit_linear_trend([0.0, 1e150, 2e150]) is not None
    r = predict_demand([0.0, 1e150, 2e150], horizon_days=10**160)
    assert r.prediction == 0
    assert r.confidence == 0.0


def test_overflowing_fallback_mean_returns_degenerate_result() -> None:
    r = fallback_demand_estimate([1e308] * 7)
    assert r.prediction == 0
    assert r.trend == Trend.STABLE


# ── Trend classification ──────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "slope,expected",
    [
        (0.11, Trend.INCREASING),
        (0.1, Trend.STABLE),
        (0.0, Trend.STABLE),
        (-0.1, Trend.STABLE),
        (-0.11, Trend.DECREASING),
    ],
)
def test_classify_trend_thresholds_are_strict(slope: float, expected: Trend) -> None:
    assert classify_trend(slope) == expected


def test_classify_trend_respects_config() -> None:
    cfg = TrendConfig(increasing_slope=1.0, decreasing_slope=-1.0)
    assert classify_trend(0.5, cfg) == Trend.STABLE
    assert classify_trend(1.5, cfg) == Trend.INCREASING


# ── Determinism ───────────────────────────────────────────────────────────────

def test_identical_inputs_give_identical_outputs() -> None:
    series = [12, 15, 11, 19, 22, 18, 25]
    assert predict_demand(series, 14) == predict_demand(series, 14)


def test_input_series_is_not_mutated() -> None:
    series = [3.0, 1.0, 2.0]
    predict_demand(series)
    assert series == [3.0, 1.0, 2.0]


# ── Fallback estimate ─────────────────────────────────────────────────────────

def test_fallback_uses_stock_when_no_history() -> None:
    r = fallback_demand_estimate([], stock_level=50)
    assert r.prediction == 5
    assert r.confidence == pytest.approx(40.0)
    assert r.trend == Trend.STABLE


def test_fallback_averages_last_seven_observations() -> None:
    series = [1000.0] * 5 + [10, 10, 10, 20, 20, 20, 20]
    # last seven: 3·10 + 4·20 = 110 → 15.71 → 16
    assert fallback_demand_estimate(series).prediction == 16


def test_fallback_short_history_averages_everything() -> None:
    assert fallback_demand_estimate([4, 6]).prediction == 5


# ── Timeframes ────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("name,days", [("week", 7), ("month", 30), ("quarter", 90), ("Month", 30)])
def test_horizon_for_timeframe(name: str, days: int) -> None:
    assert horizon_for_timeframe(name) == days


def test_unknown_timeframe_raises() -> None:
    with pytest.raises(ValueError, match="Unknown timeframe"):
        horizon_for_timeframe("fortnight")
