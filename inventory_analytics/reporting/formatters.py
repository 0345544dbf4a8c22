"""
ASCII terminal formatters for CLI output.

All formatters accept result models and return plain multi-line strings
suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).
"""

from __future__ import annotations

from typing import Sequence

from inventory_analytics.models.forecast import Anomaly, RegressionResult
from inventory_analytics.models.inventory import Recommendation
from inventory_analytics.models.pricing import DynamicPricingResult, PriceRecommendation


def format_demand_forecast(result: RegressionResult, horizon_days: int, n_obs: int) -> str:
    """Summarise a trend forecast in a few aligned lines."""
    lines = [
        "",
        "=== Demand Forecast ===",
        f"  Observations:  {n_obs}",
        f"  Horizon:       {horizon_days}d",
        f"  Prediction:    {result.prediction} units",
        f"  Confidence:    {result.confidence:.1f}%",
        f"  Trend:         {result.trend.value}",
    ]
    return "\n".join(lines)


def format_price_recommendation(result: PriceRecommendation, current_price: float) -> str:
    change_pct = (result.optimized_price - current_price) / current_price * 100.0
    lines = [
        "",
        "=== Price Optimization ===",
        f"  Current price:    {current_price:.2f}",
        f"  Optimized price:  {result.optimized_price:.2f} ({change_pct:+.1f}%)",
        f"  Expected demand:  {result.expected_demand} units",
        f"  Confidence:       {result.confidence:.0f}%",
        f"  Reasoning:        {result.reasoning}",
    ]
    return "\n".join(lines)


def format_anomaly_table(anomalies: Sequence[Anomaly], n_obs: int) -> str:
    """Format flagged points as a table in index order::

         Index       Value    Expected  Severity   Kind
        ------------------------------------------------
            12       140.0        41.3      high  spike
    """
    lines: list[str] = ["", "=== Demand Anomalies ===", f"  Observations: {n_obs}"]

    if not anomalies:
        lines.append("")
        lines.append("  (no anomalies detected)")
        return "\n".join(lines)

    header = f"    {'Index':>5}  {'Value':>10}  {'Expected':>10}  {'Severity':>8}  {'Kind':>5}"
    lines.append("")
    lines.append(header)
    lines.append("    " + "-" * (len(header) - 4))
    for a in anomalies:
        lines.append(
            f"    {a.index:>5}  {a.value:>10.1f}  {a.expected:>10.1f}  "
            f"{a.severity.value:>8}  {a.kind.value:>5}"
        )
    lines.append("")
    lines.append(f"  {len(anomalies)} anomaly(ies) flagged.")
    return "\n".join(lines)


def format_recommendation_table(recommendations: Sequence[Recommendation]) -> str:
    """Format the ranked action list, one row per recommendation."""
    lines: list[str] = ["", "=== Inventory Recommendations ==="]

    if not recommendations:
        lines.append("")
        lines.append("  (no actions needed)")
        return "\n".join(lines)

    header = f"    {'#':>3}  {'Priority':<8}  {'Kind':<8}  {'Product':<12}  Action"
    lines.append("")
    lines.append(header)
    lines.append("    " + "-" * 72)
    for rank, rec in enumerate(recommendations, start=1):
        product = rec.product_id if len(rec.product_id) <= 12 else rec.product_id[:11] + "~"
        lines.append(
            f"    {rank:>3}  {rec.priority.value:<8}  {rec.kind.value:<8}  "
            f"{product:<12}  {rec.action}"
        )
        lines.append(f"    {'':>3}  {'':<8}  {'':<8}  {'':<12}  {rec.message}; {rec.impact}")
    return "\n".join(lines)


def format_dynamic_pricing(result: DynamicPricingResult) -> str:
    factors = ", ".join(result.factors) or "none"
    m = result.metadata
    lines = [
        "",
        "=== Dynamic Pricing ===",
        f"  Product:            {result.product_id}",
        f"  Current price:      {result.current_price:.2f}",
        f"  Recommended price:  {result.recommended_price:.2f} "
        f"({result.change_percentage:+.1f}%)",
        f"  Strategy:           {result.strategy.value}",
        f"  Confidence:         {result.confidence:.0f}%",
        f"  Factors:            {factors}",
        f"  Demand score:       {m.demand_score:.3f}",
        f"  Expiry urgency:     {m.expiry_urgency:.2f}",
        f"  Competition:        x{m.competition_factor:.2f}",
        f"  Seasonality:        x{m.seasonality_factor:.2f}",
        "",
        f"  {result.explanation}",
    ]
    return "\n".join(lines)
