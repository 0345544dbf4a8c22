"""
Stock-level price optimizer with a fixed-elasticity demand projection.

Buckets (by units on hand)
--------------------------
    stock <  10   scarce    factor in [1.05, 1.10)   confidence 75
    stock > 100   excess    factor in [0.90, 0.95)   confidence 70
    otherwise     balanced  factor in [0.98, 1.02)   confidence 65

The factor's position inside its band comes from a uniform random draw, so
the contract is the interval, not a single value.  Pass a seeded
``random.Random`` (or any object with a ``random()`` method returning a float
in [0, 1)) to make the output reproducible.

Demand projection
-----------------
    price_change_ratio  = (optimized − current) / current
    demand_change_ratio = elasticity · price_change_ratio      (elasticity = −1.2)
    expected_demand     = round(max(0, demand · (1 + demand_change_ratio)))

Prices are rounded to cents.  A sub-cent price whose rounded value would be
0.00 keeps its unrounded value instead, so the result stays positive and
inside its band.  At the other extreme the price saturates at the largest
finite float.
"""

from __future__ import annotations

import logging
import random
import sys
from typing import Optional, Protocol

from inventory_analytics.config import PriceBand, PricingConfig
from inventory_analytics.models.pricing import PriceRecommendation
from inventory_analytics.utils.stats import clamp, round_half_up

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = PricingConfig()


class RandomSource(Protocol):
    """Anything that can produce a uniform float in [0, 1)."""

    def random(self) -> float: ...


def select_price_band(stock_level: float, config: Optional[PricingConfig] = None) -> PriceBand:
    """Return the price band that applies to ``stock_level``."""
    cfg = config or _DEFAULT_CONFIG
    if stock_level < cfg.scarce_below:
        return cfg.scarce
    if stock_level > cfg.excess_above:
        return cfg.excess
    return cfg.balanced


def draw_factor(band: PriceBand, rng: RandomSource) -> float:
    """Draw a price factor uniformly from ``[band.low, band.high)``."""
    return band.low + (band.high - band.low) * rng.random()


def project_demand(
    current_price: float,
    new_price: float,
    current_demand: float,
    elasticity: float,
) -> int:
    """Project demand at ``new_price`` with a constant price elasticity.

    The projection saturates at the largest finite float rather than
    overflowing for extreme demand.
    """
    price_change_ratio = (new_price - current_price) / current_price
    demand_change_ratio = elasticity * price_change_ratio
    projected = current_demand * (1.0 + demand_change_ratio)
    return round_half_up(clamp(projected, 0.0, sys.float_info.max))


def optimize_price(
    current_price: float,
    current_demand: float,
    stock_level: float,
    rng: Optional[RandomSource] = None,
    config: Optional[PricingConfig] = None,
) -> PriceRecommendation:
    """Suggest a price from the stock bucket and project the resulting demand.

    Args:
        current_price:  Current unit price (> 0).
        current_demand: Current demand in units (>= 0).
        stock_level:    Units on hand (>= 0).
        rng:            Uniform random source; a fresh ``random.Random()`` if omitted.
        config:         Bucket boundaries, bands and elasticity.

    Returns:
        ``PriceRecommendation`` with the price rounded to cents (unrounded
        when the rounded value would be zero).
    """
    cfg = config or _DEFAULT_CONFIG
    source: RandomSource = rng if rng is not None else random.Random()

    band = select_price_band(stock_level, cfg)
    factor = draw_factor(band, source)
    optimized_price = min(round(current_price * factor, 2), sys.float_info.max)
    if optimized_price <= 0.0:
        optimized_price = current_price * factor
    expected_demand = project_demand(current_price, optimized_price, current_demand, cfg.elasticity)

    logger.debug(
        "optimize_price: stock=%s band=[%.2f, %.2f) factor=%.4f price %.2f -> %.2f",
        stock_level, band.low, band.high, factor, current_price, optimized_price,
    )
    return PriceRecommendation(
        optimized_price=optimized_price,
        confidence=band.confidence,
        expected_demand=expected_demand,
        reasoning=band.reasoning,
    )
