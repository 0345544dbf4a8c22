"""
Rolling z-score anomaly detection for demand series.

For every index ``i >= window`` the trailing window ``series[i-window:i]``
supplies a mean and a population standard deviation (divide by ``window``,
not ``window - 1``)::

    z = |series[i] − mean| / std

Points with ``z > 2`` are flagged:

    z > 3.0   → high
    z > 2.5   → medium
    otherwise → low

``kind`` is ``spike`` when the point is above the window mean, ``drop``
otherwise; ``expected`` is the window mean.

Flat windows
------------
When the window has zero spread no z-score can be computed.  A point equal
to the window mean is skipped.  A point that differs from a perfectly flat
window is an unbounded deviation and is flagged ``high`` without dividing.

Windows whose mean or spread overflows to a non-finite value are skipped.
Series shorter than the window produce no anomalies.  Output is in ascending
index order.
"""

from __future__ import annotations

import logging
import math
from typing import Iterator, Optional, Sequence

from inventory_analytics.config import AnomalyConfig
from inventory_analytics.models.forecast import Anomaly
from inventory_analytics.taxonomy.labels import AnomalyKind, AnomalySeverity
from inventory_analytics.utils.stats import is_zero, mean, population_std

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = AnomalyConfig()


def classify_severity(z: float, config: Optional[AnomalyConfig] = None) -> AnomalySeverity:
    cfg = config or _DEFAULT_CONFIG
    if z > cfg.z_high:
        return AnomalySeverity.HIGH
    if z > cfg.z_medium:
        return AnomalySeverity.MEDIUM
    return AnomalySeverity.LOW


def _z_score(value: float, window_mean: float, window_std: float) -> Optional[float]:
    """Absolute z-score, ``inf`` for a deviation from a flat window, ``None`` if unscorable."""
    if not (math.isfinite(window_mean) and math.isfinite(window_std)):
        return None
    deviation = abs(value - window_mean)
    if is_zero(window_std):
        return None if is_zero(deviation) else math.inf
    return deviation / window_std


def iter_anomalies(
    series: Sequence[float],
    config: Optional[AnomalyConfig] = None,
) -> Iterator[Anomaly]:
    """Yield anomalies in a single forward pass over ``series``."""
    cfg = config or _DEFAULT_CONFIG
    w = cfg.window
    if len(series) < w:
        return

    for i in range(w, len(series)):
        window = series[i - w:i]
        window_mean = mean(window)
        current = float(series[i])

        z = _z_score(current, window_mean, population_std(window))
        if z is None or z <= cfg.z_threshold:
            continue

        yield Anomaly(
            index=i,
            value=current,
            expected=window_mean,
            severity=classify_severity(z, cfg),
            kind=AnomalyKind.SPIKE if current > window_mean else AnomalyKind.DROP,
        )


def detect_anomalies(
    series: Sequence[float],
    config: Optional[AnomalyConfig] = None,
) -> list[Anomaly]:
    """Scan ``series`` with a trailing window and return flagged points.

    Args:
        series: Chronological demand values.
        config: Window size and z thresholds (defaults: 7, 2.0 / 2.5 / 3.0).

    Returns:
        Anomalies in ascending index order; empty when the series is shorter
        than the window.
    """
    anomalies = list(iter_anomalies(series, config))
    logger.debug("detect_anomalies: scanned %d points, flagged %d", len(series), len(anomalies))
    return anomalies
