"""
Forecast and anomaly output models.

``RegressionResult`` is the outcome of fitting a linear trend to a demand
series and projecting it to the end of a forecast horizon.

``Anomaly`` is one point of a series that lies unusually far from the mean of
its trailing window.

Both models are frozen and validate the engine's output invariants: every
number is finite and every confidence lies in [0, 100].
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, field_validator

from inventory_analytics.taxonomy.labels import AnomalyKind, AnomalySeverity, Trend


class RegressionResult(BaseModel):
    """Projected demand at the last day of a forecast horizon.

    Attributes:
        prediction: Projected units, rounded, never negative.
        confidence: R²-derived fit quality as a percentage (not a probability).
        trend: Direction of the fitted slope.
    """

    model_config = ConfigDict(frozen=True)

    prediction: int
    confidence: float
    trend: Trend

    @field_validator("prediction")
    @classmethod
    def validate_prediction(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"prediction must be non-negative, got {v}.")
        return v

    @field_validator("confidence")
    @classmethod
    def validate_confidence(cls, v: float) -> float:
        if not math.isfinite(v) or not 0.0 <= v <= 100.0:
            raise ValueError(f"confidence must be in [0, 100], got {v}.")
        return v


class Anomaly(BaseModel):
    """A statistically unusual observation.

    Attributes:
        index: Position of the point in the scanned series.
        value: Observed value at ``index``.
        expected: Mean of the trailing window preceding ``index``.
        severity: z-score bucket.
        kind: ``spike`` when above the window mean, ``drop`` when below.
    """

    model_config = ConfigDict(frozen=True)

    index: int
    value: float
    expected: float
    severity: AnomalySeverity
    kind: AnomalyKind

    @field_validator("index")
    @classmethod
    def validate_index(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"index must be non-negative, got {v}.")
        return v

    @field_validator("value", "expected")
    @classmethod
    def validate_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError(f"value must be finite, got {v}.")
        return v
