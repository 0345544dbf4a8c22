"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local secrets and env overrides (gitignored)
  4. Environment variables        — ``INVENTORY_ANALYTICS_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

Every section carries defaults equal to the engine's fixed constants, so the
analytics functions can be called with ``config=None`` and behave exactly as
documented.  The CLI always passes an ``AppConfig`` section explicitly.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class TrendConfig(BaseModel):
    """Linear-trend demand forecast settings."""

    model_config = ConfigDict(frozen=True)

    default_horizon_days: int = 7
    increasing_slope: float = 0.1
    decreasing_slope: float = -0.1
    fallback_window: int = 7
    fallback_confidence: float = 40.0
    fallback_stock_fraction: float = 0.1

    @field_validator("default_horizon_days", "fallback_window")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"must be >= 1, got {v}.")
        return v

    @model_validator(mode="after")
    def validate_slope_order(self) -> "TrendConfig":
        if self.decreasing_slope > self.increasing_slope:
            raise ValueError(
                f"decreasing_slope ({self.decreasing_slope}) must be <= "
                f"increasing_slope ({self.increasing_slope})."
            )
        return self


class PriceBand(BaseModel):
    """Half-open factor interval ``[low, high)`` plus its reasoning tag."""

    model_config = ConfigDict(frozen=True)

    low: float
    high: float
    confidence: float
    reasoning: str

    @model_validator(mode="after")
    def validate_interval(self) -> "PriceBand":
        if not 0.0 < self.low < self.high:
            raise ValueError(
                f"price band requires 0 < low < high, got [{self.low}, {self.high})."
            )
        if not 0.0 <= self.confidence <= 100.0:
            raise ValueError(f"band confidence must be in [0, 100], got {self.confidence}.")
        return self


class PricingConfig(BaseModel):
    """Stock-bucket price optimizer settings."""

    model_config = ConfigDict(frozen=True)

    scarce_below: int = 10
    excess_above: int = 100
    elasticity: float = -1.2
    scarce: PriceBand = PriceBand(
        low=1.05, high=1.10, confidence=75.0, reasoning="low stock, raise price"
    )
    excess: PriceBand = PriceBand(
        low=0.90, high=0.95, confidence=70.0,
        reasoning="high stock, lower price to increase turnover",
    )
    balanced: PriceBand = PriceBand(
        low=0.98, high=1.02, confidence=65.0, reasoning="balanced stock, minor adjustment"
    )

    @model_validator(mode="after")
    def validate_buckets(self) -> "PricingConfig":
        if self.scarce_below > self.excess_above:
            raise ValueError(
                f"scarce_below ({self.scarce_below}) must be <= "
                f"excess_above ({self.excess_above})."
            )
        return self


class AnomalyConfig(BaseModel):
    """Rolling z-score anomaly detector settings."""

    model_config = ConfigDict(frozen=True)

    window: int = 7
    z_threshold: float = 2.0
    z_medium: float = 2.5
    z_high: float = 3.0

    @field_validator("window")
    @classmethod
    def validate_window(cls, v: int) -> int:
        if v < 2:
            raise ValueError(f"window must be >= 2, got {v}.")
        return v

    @model_validator(mode="after")
    def validate_thresholds(self) -> "AnomalyConfig":
        if not 0.0 < self.z_threshold <= self.z_medium <= self.z_high:
            raise ValueError(
                "z thresholds must satisfy 0 < z_threshold <= z_medium <= z_high, "
                f"got {self.z_threshold}, {self.z_medium}, {self.z_high}."
            )
        return self


class RecommendationConfig(BaseModel):
    """Inventory action rule thresholds."""

    model_config = ConfigDict(frozen=True)

    default_min_stock: int = 10
    default_max_stock: int = 1000
    critical_ratio: float = 0.5
    critical_order_multiple: int = 3
    restock_order_multiple: int = 2
    overstock_ratio: float = 0.8
    optimize_price_below: float = 50.0
    optimize_stock_multiple: float = 2.0


class DynamicPricingConfig(BaseModel):
    """Multi-factor dynamic pricing bounds."""

    model_config = ConfigDict(frozen=True)

    max_price_multiple: float = 2.0
    min_cost_markup: float = 1.1
    max_confidence: float = 95.0

    @field_validator("max_price_multiple", "min_cost_markup")
    @classmethod
    def validate_multiple(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"must be > 0, got {v}.")
        return v


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration.

    ``seed`` seeds the price optimizer's random source when set; ``None``
    leaves the factor draw non-deterministic.
    """

    model_config = ConfigDict(frozen=True)

    trend: TrendConfig = TrendConfig()
    pricing: PricingConfig = PricingConfig()
    anomaly: AnomalyConfig = AnomalyConfig()
    recommendations: RecommendationConfig = RecommendationConfig()
    dynamic_pricing: DynamicPricingConfig = DynamicPricingConfig()
    logging: LoggingConfig = LoggingConfig()
    seed: Optional[int] = None
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``; when that default file is
            absent the built-in defaults are used.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If an explicitly given ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    raw: dict[str, Any] = {}
    if config_path is None:
        config_path = root / "config" / "default.toml"
        if config_path.exists():
            raw = _read_toml(config_path)
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                "Pass --config with an existing TOML file or omit it for defaults."
            )
        raw = _read_toml(config_path)

    # Also merge local.toml if present (gitignored local overrides)
    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        raw = _deep_merge(raw, _read_toml(local_config_path))

    # 3. Apply INVENTORY_ANALYTICS_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply INVENTORY_ANALYTICS_* env vars to the raw config dict.

    Supported overrides:
      INVENTORY_ANALYTICS_LOG_LEVEL  → raw["logging"]["level"]
      INVENTORY_ANALYTICS_DEBUG      → raw["debug"]
      INVENTORY_ANALYTICS_SEED       → raw["seed"]
    """
    if log_level := os.environ.get("INVENTORY_ANALYTICS_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("INVENTORY_ANALYTICS_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    if seed := os.environ.get("INVENTORY_ANALYTICS_SEED"):
        raw["seed"] = int(seed)

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    # Flatten top-level keys that may be nested under [project]
    project = raw.pop("project", {})

    return AppConfig(
        trend=TrendConfig(**raw.get("trend", {})),
        pricing=PricingConfig(**raw.get("pricing", {})),
        anomaly=AnomalyConfig(**raw.get("anomaly", {})),
        recommendations=RecommendationConfig(**raw.get("recommendations", {})),
        dynamic_pricing=DynamicPricingConfig(**raw.get("dynamic_pricing", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        seed=raw.get("seed", project.get("seed")),
        debug=raw.get("debug", project.get("debug", False)),
    )
