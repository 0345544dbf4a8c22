"""
Inventory input models and the ``Recommendation`` output model.

Input models (``InventorySnapshot``, ``PricedProduct``, ``SaleRecord``)
validate their domain preconditions at construction time: negative stock or
a non-positive price raise ``pydantic.ValidationError``.  This is where
upstream validation happens; the analytics functions that consume these
objects never re-check them.

``min_stock_level`` / ``max_stock_level`` stay ``None`` when the catalog does
not set them; the recommendation rules substitute the configured defaults.
"""

from __future__ import annotations

import math
from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from inventory_analytics.taxonomy.labels import Priority, RecommendationKind


def _coerce_id(v: Any) -> Any:
    # Catalog ids arrive as ints from CSV/JSON and as strings from the API.
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v


class InventorySnapshot(BaseModel):
    """Current stock position of one product.

    Attributes:
        id: Product identifier.
        name: Display name used in recommendation messages; falls back to ``id``.
        stock_level: Units on hand.
        min_stock_level: Reorder threshold, or ``None`` for the default.
        max_stock_level: Capacity ceiling, or ``None`` for the default.
        price: Current unit price.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: Optional[str] = None
    stock_level: int
    min_stock_level: Optional[int] = None
    max_stock_level: Optional[int] = None
    price: float

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return _coerce_id(v)

    @field_validator("stock_level", "min_stock_level", "max_stock_level")
    @classmethod
    def validate_non_negative(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError(f"stock levels must be non-negative, got {v}.")
        return v

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"price must be positive, got {v}.")
        return v

    @property
    def label(self) -> str:
        return self.name or self.id


class SaleRecord(BaseModel):
    """Units of one product sold on one day."""

    model_config = ConfigDict(frozen=True)

    sold_on: date
    quantity: float

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: float) -> float:
        if not math.isfinite(v) or v < 0:
            raise ValueError(f"quantity must be non-negative, got {v}.")
        return v


class PricedProduct(BaseModel):
    """Catalog view of a product for dynamic pricing.

    Attributes:
        id: Product identifier.
        name: Optional display name.
        price: Current unit price.
        cost: Unit cost; when set, no price below ``cost * min_cost_markup``
            is ever recommended.
        stock_level: Units on hand.
        expiry_date: Best-before date for perishables, else ``None``.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: Optional[str] = None
    price: float
    cost: Optional[float] = None
    stock_level: int = 0
    expiry_date: Optional[date] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return _coerce_id(v)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"price must be positive, got {v}.")
        return v

    @field_validator("cost")
    @classmethod
    def validate_cost(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError(f"cost must be non-negative, got {v}.")
        return v

    @field_validator("stock_level")
    @classmethod
    def validate_stock(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"stock_level must be non-negative, got {v}.")
        return v


class Recommendation(BaseModel):
    """An inventory action for one product.

    Attributes:
        product_id: Snapshot id this action applies to.
        kind: restock, reduce, or optimize.
        priority: Urgency; lists are ordered by ``priority.rank``.
        message: Headline naming the product.
        action: Concrete next step.
        impact: Expected business effect.
    """

    model_config = ConfigDict(frozen=True)

    product_id: str
    kind: RecommendationKind
    priority: Priority
    message: str
    action: str
    impact: str

    @field_validator("message", "action")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("message and action must not be empty.")
        return v.strip()
