"""
Tests for inventory_analytics/cli.py (via typer's CliRunner).

What we test
------------
  - validate-config succeeds on the committed defaults, fails on a missing file.
  - predict-demand: JSON output, --timeframe, --fallback.
  - optimize-price: band respected, seeded runs identical, bad price exits 1.
  - optimize-price with a sub-cent price returns a positive result.
  - detect-anomalies / recommend / dynamic-price JSON payloads.
  - Loader errors surface as ``[ERROR]`` with exit code 1.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from inventory_analytics.cli import app

runner = CliRunner()

_ENV = {"INVENTORY_ANALYTICS_LOG_LEVEL": "ERROR"}


def _invoke(*args: str):
    return runner.invoke(app, list(args), env=_ENV)


def _json(result) -> object:
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Commands reconfigure the root logger against the runner's streams."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def series_file(tmp_path: Path) -> Path:
    p = tmp_path / "series.json"
    p.write_text(json.dumps([10, 20, 30, 40, 50]), encoding="utf-8")
    return p


# ── validate-config ───────────────────────────────────────────────────────────

def test_validate_config_defaults() -> None:
    result = _invoke("validate-config")
    assert result.exit_code == 0, result.output
    assert "[OK] Config valid." in result.output


def test_validate_config_missing_file(tmp_path: Path) -> None:
    result = _invoke("validate-config", "--config", str(tmp_path / "absent.toml"))
    assert result.exit_code == 1
    assert "[ERROR]" in result.output


# ── predict-demand ────────────────────────────────────────────────────────────

def test_predict_demand_json(series_file: Path) -> None:
    payload = _json(_invoke("predict-demand", "--series", str(series_file), "--json"))
    assert payload == {
        "horizon_days": 7,
        "prediction": 120,
        "confidence": 100.0,
        "trend": "increasing",
    }


def test_predict_demand_timeframe(series_file: Path) -> None:
    payload = _json(_invoke(
        "predict-demand", "--series", str(series_file), "--timeframe", "month", "--json"
    ))
    assert payload["horizon_days"] == 30
    # 10 · (5 + 30 − 1) + 10
    assert payload["prediction"] == 350


def test_predict_demand_unknown_timeframe(series_file: Path) -> None:
    result = _invoke("predict-demand", "--series", str(series_file), "--timeframe", "decade")
    assert result.exit_code == 1
    assert "Unknown timeframe" in result.output


def test_predict_demand_fallback_on_empty_series(tmp_path: Path) -> None:
    p = tmp_path / "empty.json"
    p.write_text("[]", encoding="utf-8")
    payload = _json(_invoke(
        "predict-demand", "--series", str(p), "--fallback", "--stock", "50", "--json"
    ))
    assert payload["prediction"] == 5
    assert payload["confidence"] == 40.0


def test_predict_demand_table(series_file: Path) -> None:
    result = _invoke("predict-demand", "--series", str(series_file))
    assert result.exit_code == 0
    assert "=== Demand Forecast ===" in result.output


def test_predict_demand_missing_file(tmp_path: Path) -> None:
    result = _invoke("predict-demand", "--series", str(tmp_path / "nope.json"))
    assert result.exit_code == 1
    assert "[ERROR]" in result.output


# ── optimize-price ────────────────────────────────────────────────────────────

def test_optimize_price_scarce_band() -> None:
    payload = _json(_invoke(
        "optimize-price", "--price", "100", "--demand", "50", "--stock", "5", "--json"
    ))
    assert 105.0 <= payload["optimized_price"] <= 110.0
    assert payload["confidence"] == 75.0


def test_optimize_price_seeded_runs_match() -> None:
    args = ("optimize-price", "--price", "100", "--demand", "50", "--stock", "150",
            "--seed", "7", "--json")
    first = _json(_invoke(*args))
    second = _json(_invoke(*args))
    assert first == second
    assert 90.0 <= first["optimized_price"] <= 95.0


def test_optimize_price_sub_cent_price() -> None:
    payload = _json(_invoke(
        "optimize-price", "--price", "0.004", "--demand", "10", "--stock", "150",
        "--seed", "1", "--json",
    ))
    assert 0.0 < payload["optimized_price"] < 0.004


def test_optimize_price_rejects_non_positive_price() -> None:
    result = _invoke("optimize-price", "--price", "0", "--demand", "5", "--stock", "5")
    assert result.exit_code == 1
    assert "--price must be positive" in result.output


# ── detect-anomalies ──────────────────────────────────────────────────────────

def test_detect_anomalies_json(tmp_path: Path) -> None:
    p = tmp_path / "series.csv"
    p.write_text("quantity\n" + "\n".join(["1"] * 7 + ["100"]) + "\n", encoding="utf-8")
    payload = _json(_invoke("detect-anomalies", "--series", str(p), "--json"))
    assert payload == [
        {"index": 7, "value": 100.0, "expected": 1.0, "severity": "high", "kind": "spike"}
    ]


def test_detect_anomalies_none(tmp_path: Path) -> None:
    p = tmp_path / "flat.json"
    p.write_text(json.dumps([3] * 10), encoding="utf-8")
    result = _invoke("detect-anomalies", "--series", str(p))
    assert result.exit_code == 0
    assert "(no anomalies detected)" in result.output


# ── recommend ─────────────────────────────────────────────────────────────────

def test_recommend_json(tmp_path: Path) -> None:
    p = tmp_path / "inventory.csv"
    p.write_text(
        "id,name,stock_level,min_stock_level,max_stock_level,price\n"
        "pens,Pens,50,,,4.5\n"
        "paper,Paper,8,10,,60\n"
        "toner,Toner,2,10,,80\n",
        encoding="utf-8",
    )
    payload = _json(_invoke("recommend", "--snapshots", str(p), "--json"))
    assert [(r["product_id"], r["priority"]) for r in payload] == [
        ("toner", "critical"),
        ("paper", "high"),
        ("pens", "low"),
    ]
    assert payload[0]["action"] == "Order 30 units immediately"


def test_recommend_invalid_row(tmp_path: Path) -> None:
    p = tmp_path / "inventory.csv"
    p.write_text("id,stock_level,price\na,-1,3\n", encoding="utf-8")
    result = _invoke("recommend", "--snapshots", str(p))
    assert result.exit_code == 1
    assert "failed validation" in result.output


# ── dynamic-price ─────────────────────────────────────────────────────────────

def test_dynamic_price_json(tmp_path: Path) -> None:
    product = tmp_path / "milk.json"
    product.write_text(json.dumps({
        "id": "milk", "price": 100.0, "cost": 40.0, "stock_level": 50,
        "expiry_date": "2026-03-17",
    }), encoding="utf-8")
    payload = _json(_invoke(
        "dynamic-price", "--product", str(product), "--today", "2026-03-15", "--json"
    ))
    assert payload["strategy"] == "expiry_based"
    assert payload["recommended_price"] == pytest.approx(73.5)
    assert payload["factors"] == ["medium_demand", "urgent_expiry"]


def test_dynamic_price_bad_today(tmp_path: Path) -> None:
    product = tmp_path / "milk.json"
    product.write_text(json.dumps({"id": "milk", "price": 1.0}), encoding="utf-8")
    result = _invoke("dynamic-price", "--product", str(product), "--today", "15/03/2026")
    assert result.exit_code == 1
    assert "Invalid --today" in result.output


def test_dynamic_price_requires_single_product(tmp_path: Path) -> None:
    product = tmp_path / "many.json"
    product.write_text(json.dumps([{"id": "a", "price": 1.0}, {"id": "b", "price": 2.0}]),
                       encoding="utf-8")
    result = _invoke("dynamic-price", "--product", str(product))
    assert result.exit_code == 1
    assert "exactly one product" in result.output
