"""
Shared pytest fixtures for the inventory analytics test suite.

Provides:
  - ``make_sales``: factory building daily ``SaleRecord`` lists.
  - Sample snapshot / product factories used by several test modules.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Callable, Sequence

import pytest

from inventory_analytics.models.inventory import InventorySnapshot, PricedProduct, SaleRecord

REFERENCE_DAY = date(2026, 3, 15)


@pytest.fixture
def reference_day() -> date:
    return REFERENCE_DAY


@pytest.fixture
def make_sales() -> Callable[..., list[SaleRecord]]:
    """Build one ``SaleRecord`` per quantity, on consecutive days ending at ``end``."""

    def _make(quantities: Sequence[float], end: date = REFERENCE_DAY) -> list[SaleRecord]:
        start = end - timedelta(days=len(quantities) - 1)
        return [
            SaleRecord(sold_on=start + timedelta(days=i), quantity=q)
            for i, q in enumerate(quantities)
        ]

    return _make


@pytest.fixture
def mixed_snapshots() -> list[InventorySnapshot]:
    """A batch that triggers every rule at least once, in a scrambled order."""
    return [
        # price headroom only → low
        InventorySnapshot(id="p-opt-1", name="Pens", stock_level=50, price=4.5),
        # high restock
        InventorySnapshot(id="p-high", name="Paper", stock_level=8, min_stock_level=10, price=60.0),
        # overstock → medium, plus price headroom → low
        InventorySnapshot(id="p-over", name="Clips", stock_level=900, price=2.0),
        # critical restock
        InventorySnapshot(id="p-crit-1", name="Toner", stock_level=2, min_stock_level=10, price=80.0),
        # second low, after p-over's low in input order
        InventorySnapshot(id="p-opt-2", name="Tape", stock_level=40, price=3.0),
        # second critical
        InventorySnapshot(id="p-crit-2", name="Ink", stock_level=0, min_stock_level=4, price=120.0),
    ]


@pytest.fixture
def sample_product() -> PricedProduct:
    return PricedProduct(id="sku-1", name="Oat milk", price=100.0, cost=40.0, stock_level=50)
