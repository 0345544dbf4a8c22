"""
Tests for inventory_analytics/monitoring/anomaly.py.

What we test
------------
detect_anomalies():
  - Series no longer than the window produce nothing.
  - Flat series (zero-variance windows) produce nothing.
  - A jump away from a flat window is a high-severity spike/drop.
  - z just above 2 triggers, z just below 2 does not.
  - Severity buckets at 2.5 and 3.
  - Output is in ascending index order; ``expected`` is the window mean.
  - Window size comes from config.
  - Windows whose mean or spread overflows are skipped, not raised on.

iter_anomalies() / classify_severity().
"""

from __future__ import annotations

import statistics
import types

import pytest

from inventory_analytics.config import AnomalyConfig
from inventory_analytics.monitoring.anomaly import (
    classify_severity,
    detect_anomalies,
    iter_anomalies,
)
from inventory_analytics.taxonomy.labels import AnomalyKind, AnomalySeverity

# mean 10, population std sqrt(6/7)
_WINDOW = [9.0, 11.0, 9.0, 11.0, 9.0, 11.0, 10.0]
_MEAN = 10.0
_STD = statistics.pstdev(_WINDOW)


def _series_ending_at(z: float) -> list[float]:
    """The reference window followed by one point ``z`` deviations away."""
    return _WINDOW + [_MEAN + z * _STD]


# ── Short and flat input ──────────────────────────────────────────────────────

@pytest.mark.parametrize("n", [0, 1, 6, 7])
def test_too_short_for_window_yields_nothing(n: int) -> None:
    assert detect_anomalies([100.0 * i for i in range(n)]) == []


def test_identical_values_yield_nothing() -> None:
    assert detect_anomalies([4.0] * 10) == []


def test_jump_after_flat_window_is_high_spike() -> None:
    result = detect_anomalies([1, 1, 1, 1, 1, 1, 1, 100])
    assert len(result) == 1
    a = result[0]
    assert a.index == 7
    assert a.kind == AnomalyKind.SPIKE
    assert a.severity == AnomalySeverity.HIGH
    assert a.value == pytest.approx(100.0)
    assert a.expected == pytest.approx(1.0)


def test_fall_after_flat_window_is_high_drop() -> None:
    result = detect_anomalies([5, 5, 5, 5, 5, 5, 5, 0])
    assert [(a.index, a.kind, a.severity) for a in result] == [
        (7, AnomalyKind.DROP, AnomalySeverity.HIGH)
    ]


# ── Threshold ─────────────────────────────────────────────────────────────────

def test_z_above_threshold_triggers() -> None:
    result = detect_anomalies(_series_ending_at(2.1))
    assert len(result) == 1
    assert result[0].severity == AnomalySeverity.LOW
    assert result[0].expected == pytest.approx(_MEAN)


def test_z_below_threshold_does_not_trigger() -> None:
    assert detect_anomalies(_series_ending_at(1.9)) == []


def test_negative_deviation_is_a_drop() -> None:
    result = detect_anomalies(_series_ending_at(-2.6))
    assert len(result) == 1
    assert result[0].kind == AnomalyKind.DROP
    assert result[0].severity == AnomalySeverity.MEDIUM


@pytest.mark.parametrize(
    "z,severity",
    [
        (2.2, AnomalySeverity.LOW),
        (2.6, AnomalySeverity.MEDIUM),
        (2.9, AnomalySeverity.MEDIUM),
        (3.5, AnomalySeverity.HIGH),
    ],
)
def test_severity_buckets(z: float, severity: AnomalySeverity) -> None:
    result = detect_anomalies(_series_ending_at(z))
    assert [a.severity for a in result] == [severity]


@pytest.mark.parametrize(
    "z,severity",
    [
        (2.5, AnomalySeverity.LOW),
        (2.51, AnomalySeverity.MEDIUM),
        (3.0, AnomalySeverity.MEDIUM),
        (3.01, AnomalySeverity.HIGH),
        (float("inf"), AnomalySeverity.HIGH),
    ],
)
def test_classify_severity_edges(z: float, severity: AnomalySeverity) -> None:
    assert classify_severity(z) == severity


# ── Ordering ──────────────────────────────────────────────────────────────────

def test_multiple_anomalies_in_index_order() -> None:
    base = [10.0, 11.0, 9.0, 10.0, 11.0, 9.0, 10.0]
    series = base + [40.0] + base + [60.0]
    result = detect_anomalies(series)
    assert [a.index for a in result] == [7, 15]
    assert all(a.kind == AnomalyKind.SPIKE for a in result)
    assert all(a.severity == AnomalySeverity.HIGH for a in result)


def test_identical_inputs_give_identical_outputs() -> None:
    series = [3, 4, 3, 5, 4, 3, 4, 19, 4, 3, 0, 4]
    assert detect_anomalies(series) == detect_anomalies(series)


def test_overflowing_window_is_skipped() -> None:
    assert detect_anomalies([1e308] * 7 + [0.0]) == []
    assert detect_anomalies([0.0] * 6 + [1e308, 5.0]) == []


# ── Config and streaming ──────────────────────────────────────────────────────

def test_custom_window() -> None:
    cfg = AnomalyConfig(window=3)
    result = detect_anomalies([2, 2, 2, 50], config=cfg)
    assert [a.index for a in result] == [3]
    # too short for the default window of 7
    assert detect_anomalies([2, 2, 2, 50]) == []


def test_iter_anomalies_is_lazy() -> None:
    gen = iter_anomalies([1, 1, 1, 1, 1, 1, 1, 100, 1])
    assert isinstance(gen, types.GeneratorType)
    first = next(gen)
    assert first.index == 7
