"""
Label vocabularies for analytics outputs.

Every categorical field the engine emits is one of these ``StrEnum`` values,
so results serialise as plain lowercase strings:

  - ``Trend``              — direction of a fitted demand trend.
  - ``AnomalySeverity``    — how far outside its trailing window a point lies.
  - ``AnomalyKind``        — above (spike) or below (drop) the window mean.
  - ``RecommendationKind`` — what an inventory action does.
  - ``Priority``           — urgency of an inventory action, with ``rank``.
  - ``PricingStrategy``    — which signal dominated a dynamic price.

This module has NO imports from any other ``inventory_analytics`` package.
"""

from enum import StrEnum


class Trend(StrEnum):
    """Qualitative direction derived from the regression slope."""

    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class AnomalySeverity(StrEnum):
    """Severity bucket of a flagged point, by z-score."""

    LOW = "low"
    """2 < z <= 2.5"""

    MEDIUM = "medium"
    """2.5 < z <= 3"""

    HIGH = "high"
    """z > 3"""


class AnomalyKind(StrEnum):
    SPIKE = "spike"
    DROP = "drop"


class RecommendationKind(StrEnum):
    """Kind of inventory action."""

    RESTOCK = "restock"
    REDUCE = "reduce"
    OPTIMIZE = "optimize"


class Priority(StrEnum):
    """Urgency of an inventory action.

    ``rank`` orders priorities for sorting: critical (4) > high (3) >
    medium (2) > low (1).
    """

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK: dict[Priority, int] = {
    Priority.CRITICAL: 4,
    Priority.HIGH:     3,
    Priority.MEDIUM:   2,
    Priority.LOW:      1,
}


class PricingStrategy(StrEnum):
    """Dominant driver behind a dynamic-pricing recommendation."""

    DEMAND_BASED = "demand_based"
    EXPIRY_BASED = "expiry_based"
    HYBRID = "hybrid"
    COMPETITIVE = "competitive"
