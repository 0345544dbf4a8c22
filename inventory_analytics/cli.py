"""
Inventory analytics — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load and validate input files.
  4. Run one analytics function.
  5. Report result to stdout (ASCII table, or JSON with ``--json``).

Install and run::

    pip install -e .
    inventory-analytics --help
    inventory-analytics validate-config
    inventory-analytics predict-demand --series sales.json --timeframe month
    inventory-analytics optimize-price --price 24.99 --demand 40 --stock 6 --seed 7
    inventory-analytics detect-anomalies --series sales.csv
    inventory-analytics recommend --snapshots inventory.csv
    inventory-analytics dynamic-price --product milk.json --sales milk_sales.csv
"""

from __future__ import annotations

import json
import random
from datetime import date
from pathlib import Path
from typing import Any, Optional

import typer

app = typer.Typer(
    name="inventory-analytics",
    help="Demand forecasts, price suggestions, anomaly flags and inventory actions.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from inventory_analytics.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from inventory_analytics.utils.logging import configure_logging
    configure_logging(config.logging)


def _load_or_exit(loader, path_str: str) -> Any:
    """Run a file loader, turning loader errors into a clean CLI exit."""
    try:
        return loader(Path(path_str))
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, default=str))


_CONFIG_OPTION = typer.Option(None, "--config", help="Path to TOML config file.")
_JSON_OPTION = typer.Option(False, "--json", help="Emit machine-readable JSON.")


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Default horizon:  {config.trend.default_horizon_days}d")
    typer.echo(f"  Trend slopes:     {config.trend.decreasing_slope} / {config.trend.increasing_slope}")
    typer.echo(f"  Price elasticity: {config.pricing.elasticity}")
    typer.echo(f"  Anomaly window:   {config.anomaly.window} (z > {config.anomaly.z_threshold})")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Seed:             {config.seed}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        _echo_json(config.model_dump())

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("predict-demand")
def predict_demand_cmd(
    series_file: str = typer.Option(
        ..., "--series", "-s", help="Demand series (.json array or .csv with 'quantity')."
    ),
    horizon: Optional[int] = typer.Option(
        None, "--horizon", min=1, help="Forecast horizon in days (default from config)."
    ),
    timeframe: Optional[str] = typer.Option(
        None, "--timeframe", help="week / month / quarter; overrides --horizon."
    ),
    fallback: bool = typer.Option(
        False, "--fallback", help="Use the moving-average estimate instead of a trend fit."
    ),
    stock: float = typer.Option(
        0.0, "--stock", min=0, help="Units on hand; seeds --fallback when the series is empty."
    ),
    config_path: Optional[str] = _CONFIG_OPTION,
    as_json: bool = _JSON_OPTION,
) -> None:
    """Fit a linear trend to a demand series and project it forward.

    The projection is the trend line evaluated at the last day of the horizon.
    """
    from inventory_analytics.forecasting.trend import (
        fallback_demand_estimate,
        horizon_for_timeframe,
        predict_demand,
    )
    from inventory_analytics.ingestion.loader import load_series
    from inventory_analytics.reporting.formatters import format_demand_forecast

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    horizon_days = horizon or config.trend.default_horizon_days
    if timeframe:
        try:
            horizon_days = horizon_for_timeframe(timeframe)
        except ValueError as exc:
            typer.echo(f"[ERROR] {exc}", err=True)
            raise typer.Exit(code=1)

    series = _load_or_exit(load_series, series_file)

    if fallback:
        result = fallback_demand_estimate(series, stock_level=stock, config=config.trend)
    else:
        result = predict_demand(series, horizon_days=horizon_days, config=config.trend)

    if as_json:
        _echo_json({"horizon_days": horizon_days, **result.model_dump(mode="json")})
    else:
        typer.echo(format_demand_forecast(result, horizon_days, len(series)))


@app.command("optimize-price")
def optimize_price_cmd(
    price: float = typer.Option(..., "--price", help="Current unit price (> 0)."),
    demand: float = typer.Option(..., "--demand", min=0, help="Current demand in units."),
    stock: float = typer.Option(..., "--stock", min=0, help="Units on hand."),
    seed: Optional[int] = typer.Option(
        None, "--seed", help="Seed for the price factor draw (default from config)."
    ),
    config_path: Optional[str] = _CONFIG_OPTION,
    as_json: bool = _JSON_OPTION,
) -> None:
    """Suggest a price from the stock level and project the resulting demand.

    Without a seed the factor is drawn at random within the stock bucket's band.
    """
    from inventory_analytics.pricing.optimizer import optimize_price
    from inventory_analytics.reporting.formatters import format_price_recommendation

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    if price <= 0:
        typer.echo(f"[ERROR] --price must be positive, got {price}.", err=True)
        raise typer.Exit(code=1)

    effective_seed = seed if seed is not None else config.seed
    rng = random.Random(effective_seed) if effective_seed is not None else None

    result = optimize_price(price, demand, stock, rng=rng, config=config.pricing)

    if as_json:
        _echo_json(result.model_dump(mode="json"))
    else:
        typer.echo(format_price_recommendation(result, price))


@app.command("detect-anomalies")
def detect_anomalies_cmd(
    series_file: str = typer.Option(
        ..., "--series", "-s", help="Demand series (.json array or .csv with 'quantity')."
    ),
    config_path: Optional[str] = _CONFIG_OPTION,
    as_json: bool = _JSON_OPTION,
) -> None:
    """Flag points that deviate sharply from their trailing window."""
    from inventory_analytics.ingestion.loader import load_series
    from inventory_analytics.monitoring.anomaly import detect_anomalies
    from inventory_analytics.reporting.formatters import format_anomaly_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    series = _load_or_exit(load_series, series_file)
    anomalies = detect_anomalies(series, config=config.anomaly)

    if as_json:
        _echo_json([a.model_dump(mode="json") for a in anomalies])
    else:
        typer.echo(format_anomaly_table(anomalies, len(series)))


@app.command("recommend")
def recommend_cmd(
    snapshots_file: str = typer.Option(
        ..., "--snapshots", help="Inventory snapshots (.json array or .csv)."
    ),
    config_path: Optional[str] = _CONFIG_OPTION,
    as_json: bool = _JSON_OPTION,
) -> None:
    """Produce the priority-ordered inventory action list.

    \b
    Priorities: critical > high > medium > low.
    Equal priorities keep the order of the input file.
    """
    from inventory_analytics.ingestion.loader import load_snapshots
    from inventory_analytics.recommendations.ranker import generate_inventory_recommendations
    from inventory_analytics.reporting.formatters import format_recommendation_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    snapshots = _load_or_exit(load_snapshots, snapshots_file)
    recommendations = generate_inventory_recommendations(snapshots, config=config.recommendations)

    if as_json:
        _echo_json([r.model_dump(mode="json") for r in recommendations])
    else:
        typer.echo(format_recommendation_table(recommendations))


@app.command("dynamic-price")
def dynamic_price_cmd(
    product_file: str = typer.Option(
        ..., "--product", help="Product JSON object (id, price, cost, stock_level, expiry_date)."
    ),
    sales_file: Optional[str] = typer.Option(
        None, "--sales", help="Sale records (.json or .csv with sold_on, quantity)."
    ),
    competitors_file: Optional[str] = typer.Option(
        None, "--competitors", help="JSON array of competing products."
    ),
    today_str: Optional[str] = typer.Option(
        None, "--today", help="Reference date YYYY-MM-DD (default: today)."
    ),
    config_path: Optional[str] = _CONFIG_OPTION,
    as_json: bool = _JSON_OPTION,
) -> None:
    """Recommend a price from demand, expiry, competition and seasonality."""
    from inventory_analytics.ingestion.loader import load_products, load_sales
    from inventory_analytics.pricing.dynamic import calculate_dynamic_pricing
    from inventory_analytics.reporting.formatters import format_dynamic_pricing

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    today: Optional[date] = None
    if today_str:
        try:
            today = date.fromisoformat(today_str)
        except ValueError:
            typer.echo(f"[ERROR] Invalid --today '{today_str}'. Expected YYYY-MM-DD.", err=True)
            raise typer.Exit(code=1)

    products = _load_or_exit(load_products, product_file)
    if len(products) != 1:
        typer.echo(
            f"[ERROR] --product must contain exactly one product, got {len(products)}.", err=True
        )
        raise typer.Exit(code=1)

    sales = _load_or_exit(load_sales, sales_file) if sales_file else []
    competitors = _load_or_exit(load_products, competitors_file) if competitors_file else []

    result = calculate_dynamic_pricing(
        products[0],
        sales,
        similar_products=competitors,
        today=today,
        config=config.dynamic_pricing,
    )

    if as_json:
        _echo_json(result.model_dump(mode="json"))
    else:
        typer.echo(format_dynamic_pricing(result))


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
