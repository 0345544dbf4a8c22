"""
Market signals feeding the dynamic pricer.

Every signal is a pure function of the product, its sales history and (where
calendar position matters) an explicit ``today``.  Signals fall back to a
neutral value when the history is too short to say anything:

  Signal              Min records  Neutral  Range
  ------------------  -----------  -------  ------------------------
  demand_score             5         0.5    0–1  (weighted blend below)
    trend_signal           3         0.5    0–1
    seasonality_signal    30         0.5    0–1
    velocity_signal        7         0.5    0–1
    stockout_risk          7         0.5    0.3 / 0.5 / 0.7 / 0.9
  expiry_urgency           —         0.0    0–1
  competition_factor       —         1.0    0.9 – 1.1 multiplier
  seasonality_factor      90         1.0    0.9 – 1.15 multiplier

Demand score weights: trend 0.40, seasonality 0.25, velocity 0.20,
stock-out risk 0.15.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Iterable, Optional, Sequence

from inventory_analytics.forecasting.trend import fit_linear_trend
from inventory_analytics.models.inventory import PricedProduct, SaleRecord
from inventory_analytics.utils.stats import clamp, mean, population_std

NEUTRAL_SCORE = 0.5

_DEMAND_WEIGHTS: dict[str, float] = {
    "trend":       0.40,
    "seasonality": 0.25,
    "velocity":    0.20,
    "stockout":    0.15,
}

# (max days until expiry, urgency); first match wins
_EXPIRY_URGENCY: tuple[tuple[int, float], ...] = (
    (0,  1.0),
    (3,  0.9),
    (7,  0.7),
    (14, 0.5),
    (30, 0.3),
)
_EXPIRY_FAR = 0.1

# (max days of supply, risk); first match wins
_STOCKOUT_RISK: tuple[tuple[float, float], ...] = (
    (3.0,  0.9),
    (7.0,  0.7),
    (14.0, 0.5),
)
_STOCKOUT_LOW = 0.3


def _chronological(sales: Iterable[SaleRecord]) -> list[SaleRecord]:
    return sorted(sales, key=lambda s: s.sold_on)


def _newest_first(sales: Iterable[SaleRecord]) -> list[SaleRecord]:
    return sorted(sales, key=lambda s: s.sold_on, reverse=True)


# ── Demand components ─────────────────────────────────────────────────────────


def trend_signal(sales: Sequence[SaleRecord]) -> float:
    """Normalised OLS slope of quantity over time, mapped to 0–1.

    The slope is scaled by ``max(1, latest_quantity / 10)`` and clamped to
    [−1, 1] before mapping, so 0.5 means flat.
    """
    if len(sales) < 3:
        return NEUTRAL_SCORE
    ordered = _chronological(sales)
    fit = fit_linear_trend([s.quantity for s in ordered])
    if fit is None:
        return NEUTRAL_SCORE
    max_expected_slope = max(1.0, ordered[-1].quantity / 10.0)
    normalized = clamp(fit.slope / max_expected_slope, -1.0, 1.0)
    return (normalized + 1.0) / 2.0


def seasonality_signal(sales: Sequence[SaleRecord]) -> float:
    """Spread of daily totals: ``min(1, 2 · coefficient of variation)``."""
    if len(sales) < 30:
        return NEUTRAL_SCORE
    daily: dict[date, float] = defaultdict(float)
    for s in sales:
        daily[s.sold_on] += s.quantity
    totals = list(daily.values())
    avg = mean(totals)
    if avg <= 0:
        return NEUTRAL_SCORE
    return min(1.0, population_std(totals) / avg * 2.0)


def velocity_signal(sales: Sequence[SaleRecord]) -> float:
    """Momentum of the 7 most recent records against the 7 before them."""
    if len(sales) < 7:
        return NEUTRAL_SCORE
    recent_first = _newest_first(sales)
    last_7 = sum(s.quantity for s in recent_first[:7])
    previous_7 = sum(s.quantity for s in recent_first[7:14])
    if previous_7 == 0:
        return 0.8 if last_7 > 0 else 0.2
    growth = (last_7 - previous_7) / previous_7
    return clamp((growth + 1.0) / 2.0, 0.0, 1.0)


def average_recent_sales(sales: Sequence[SaleRecord], records: int = 7) -> float:
    """Mean quantity over the ``records`` most recent sale records."""
    recent = _newest_first(sales)[:records]
    return mean([s.quantity for s in recent])


def stockout_risk(stock_level: float, sales: Sequence[SaleRecord]) -> float:
    """Risk of running out, bucketed by days of supply at the recent sales rate."""
    if len(sales) < 7:
        return NEUTRAL_SCORE
    daily_rate = average_recent_sales(sales, 7)
    if daily_rate <= 0:
        return _STOCKOUT_LOW
    days_of_supply = stock_level / daily_rate
    for max_days, risk in _STOCKOUT_RISK:
        if days_of_supply <= max_days:
            return risk
    return _STOCKOUT_LOW


def demand_score(product: PricedProduct, sales: Sequence[SaleRecord]) -> float:
    """Weighted blend of the four demand components, clamped to [0, 1]."""
    if len(sales) < 5:
        return NEUTRAL_SCORE
    score = (
        trend_signal(sales)                           * _DEMAND_WEIGHTS["trend"]
        + seasonality_signal(sales)                   * _DEMAND_WEIGHTS["seasonality"]
        + velocity_signal(sales)                      * _DEMAND_WEIGHTS["velocity"]
        + stockout_risk(product.stock_level, sales)   * _DEMAND_WEIGHTS["stockout"]
    )
    return clamp(score, 0.0, 1.0)


# ── Price modifiers ───────────────────────────────────────────────────────────


def expiry_urgency(expiry_date: Optional[date], today: date) -> float:
    """0 for non-perishables; rises to 1.0 as the expiry date arrives."""
    if expiry_date is None:
        return 0.0
    days_left = (expiry_date - today).days
    for max_days, urgency in _EXPIRY_URGENCY:
        if days_left <= max_days:
            return urgency
    return _EXPIRY_FAR


def competition_factor(price: float, competitors: Iterable[PricedProduct]) -> float:
    """Multiplier nudging the price toward the competitor average."""
    competitor_prices = [p.price for p in competitors if p.price > 0]
    if not competitor_prices:
        return 1.0
    ratio = price / mean(competitor_prices)
    if ratio > 1.2:
        return 0.9
    if ratio > 1.1:
        return 0.95
    if ratio < 0.8:
        return 1.1
    if ratio < 0.9:
        return 1.05
    return 1.0


def seasonality_factor(sales: Sequence[SaleRecord], today: date) -> float:
    """Multiplier from the current calendar month's share of all sales.

    Sales are bucketed by calendar month across years and compared with the
    average month (total / 12).
    """
    if len(sales) < 90:
        return 1.0
    monthly: dict[int, float] = defaultdict(float)
    for s in sales:
        monthly[s.sold_on.month] += s.quantity
    yearly_average = sum(monthly.values()) / 12.0
    if yearly_average == 0:
        return 1.0
    ratio = monthly.get(today.month, 0.0) / yearly_average
    if ratio > 1.5:
        return 1.15
    if ratio > 1.2:
        return 1.08
    if ratio < 0.7:
        return 0.9
    if ratio < 0.85:
        return 0.95
    return 1.0
