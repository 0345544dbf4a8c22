"""
Threshold rules that turn one inventory snapshot into zero or more actions.

Rules (``min`` / ``max`` default to 10 / 1000 when unset or zero)
------------------------------------------------------------------
    1. CRITICAL restock : stock <= 0.5 · min           → order 3 · min now
    2. HIGH restock     : else stock <= min            → order 2 · min
    3. MEDIUM reduce    : stock > 0.8 · max            → promote or bundle
    4. LOW optimize     : price < 50 and stock > 2·min → raise price 5–10%

Rules 1/2 are mutually exclusive.  Rules 3 and 4 are evaluated independently
of the restock rules; with sane thresholds a restock and an overstock cannot
fire together because one needs low stock and the other high stock.

Output order within a snapshot follows the rule order above; cross-snapshot
ordering is the ranker's job.
"""

from __future__ import annotations

from typing import Optional

from inventory_analytics.config import RecommendationConfig
from inventory_analytics.models.inventory import InventorySnapshot, Recommendation
from inventory_analytics.taxonomy.labels import Priority, RecommendationKind

_DEFAULT_CONFIG = RecommendationConfig()


def _fmt_units(units: float) -> str:
    return str(int(units)) if float(units).is_integer() else f"{units:g}"


def evaluate_snapshot(
    snapshot: InventorySnapshot,
    config: Optional[RecommendationConfig] = None,
) -> list[Recommendation]:
    """Apply every rule to one snapshot.

    Args:
        snapshot: Current stock position of a product.
        config:   Rule thresholds.

    Returns:
        Recommendations in rule order (possibly empty).
    """
    cfg = config or _DEFAULT_CONFIG
    stock = snapshot.stock_level
    min_level = snapshot.min_stock_level or cfg.default_min_stock
    max_level = snapshot.max_stock_level or cfg.default_max_stock
    label = snapshot.label

    recs: list[Recommendation] = []

    # ── Low stock ─────────────────────────────────────────────────────────────
    if stock <= min_level * cfg.critical_ratio:
        recs.append(Recommendation(
            product_id=snapshot.id,
            kind=RecommendationKind.RESTOCK,
            priority=Priority.CRITICAL,
            message=f"Critical stock shortage for {label}",
            action=f"Order {_fmt_units(min_level * cfg.critical_order_multiple)} units immediately",
            impact="Prevent stockout and lost sales",
        ))
    elif stock <= min_level:
        recs.append(Recommendation(
            product_id=snapshot.id,
            kind=RecommendationKind.RESTOCK,
            priority=Priority.HIGH,
            message=f"Low stock warning for {label}",
            action=f"Order {_fmt_units(min_level * cfg.restock_order_multiple)} units",
            impact="Maintain service levels",
        ))

    # ── Overstock ─────────────────────────────────────────────────────────────
    if stock > max_level * cfg.overstock_ratio:
        recs.append(Recommendation(
            product_id=snapshot.id,
            kind=RecommendationKind.REDUCE,
            priority=Priority.MEDIUM,
            message=f"Excess inventory for {label}",
            action="Consider promotional pricing or bundle offers",
            impact="Free up warehouse space and improve cash flow",
        ))

    # ── Price headroom ────────────────────────────────────────────────────────
    if snapshot.price < cfg.optimize_price_below and stock > min_level * cfg.optimize_stock_multiple:
        recs.append(Recommendation(
            product_id=snapshot.id,
            kind=RecommendationKind.OPTIMIZE,
            priority=Priority.LOW,
            message=f"Price optimization opportunity for {label}",
            action="Consider 5-10% price increase",
            impact="Improve profit margins",
        ))

    return recs
