"""
Recommendation ranker: evaluates every snapshot and orders the combined
action list by urgency.

Ordering contract
-----------------
Primary key: ``priority.rank`` descending (critical 4 → low 1).
Ties keep their input order: snapshot order first, then rule order within
a snapshot.  ``sorted()`` is stable and the key is the rank alone.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, Optional

from inventory_analytics.config import RecommendationConfig
from inventory_analytics.models.inventory import InventorySnapshot, Recommendation
from inventory_analytics.recommendations.rules import evaluate_snapshot

logger = logging.getLogger(__name__)


def rank_recommendations(recommendations: Iterable[Recommendation]) -> list[Recommendation]:
    """Stable sort by priority rank, highest first."""
    return sorted(recommendations, key=lambda r: -r.priority.rank)


def generate_inventory_recommendations(
    snapshots: Iterable[InventorySnapshot],
    config: Optional[RecommendationConfig] = None,
) -> list[Recommendation]:
    """Produce the priority-ordered action list for a batch of snapshots.

    Args:
        snapshots: Inventory snapshots in caller order.
        config:    Rule thresholds.

    Returns:
        All recommendations, critical first; equal priorities in input order.
    """
    collected: list[Recommendation] = []
    n_snapshots = 0
    for snapshot in snapshots:
        n_snapshots += 1
        collected.extend(evaluate_snapshot(snapshot, config))

    ranked = rank_recommendations(collected)
    if logger.isEnabledFor(logging.DEBUG):
        by_priority = Counter(r.priority.value for r in ranked)
        logger.debug(
            "generate_inventory_recommendations: %d snapshot(s) -> %d action(s) %s",
            n_snapshots, len(ranked), dict(by_priority),
        )
    return ranked
