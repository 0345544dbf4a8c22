"""
File loaders for CLI inputs.

Supported formats (detected by extension)
-----------------------------------------
Demand series
  .json → array of numbers, e.g. ``[12, 15, 9, 20]``
  .csv  → header row with a ``quantity`` column; one row per period

Inventory snapshots
  .json → array of objects matching ``InventorySnapshot``
  .csv  → required columns: id, stock_level, price
          optional columns: name, min_stock_level, max_stock_level
          (empty string → None)

Sale records
  .json → array of ``{"sold_on": "YYYY-MM-DD", "quantity": n}`` objects
  .csv  → required columns: sold_on, quantity

Products
  .json → one object or an array of objects matching ``PricedProduct``

All rows are validated before any are returned.  If **any** row fails, a
single ``ValueError`` lists the first 10 failures.
"""

from __future__ import annotations

import csv
import json
import logging
import math
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from inventory_analytics.models.inventory import InventorySnapshot, PricedProduct, SaleRecord

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

SNAPSHOT_CSV_COLUMNS = frozenset({"id", "stock_level", "price"})
SALES_CSV_COLUMNS = frozenset({"sold_on", "quantity"})
SERIES_CSV_COLUMNS = frozenset({"quantity"})

_MAX_ERRORS_SHOWN = 10


# ── Public loaders ────────────────────────────────────────────────────────────


def load_series(path: Path) -> list[float]:
    """Load a chronological demand series.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: On an unsupported extension or any non-numeric / negative value.
    """
    fmt = _check_path(path)
    if fmt == ".json":
        raw = _read_json(path)
        if not isinstance(raw, list):
            raise ValueError(f"JSON series file must contain an array: {path}")
        values: list[Any] = raw
        first_line = 0
    else:
        values = [row.get("quantity", "") for row in _read_csv(path, SERIES_CSV_COLUMNS)]
        first_line = 2  # 1-based, skip header row

    series: list[float] = []
    errors: list[tuple[int, str]] = []
    for i, v in enumerate(values):
        try:
            series.append(_parse_quantity(v))
        except ValueError as exc:
            errors.append((i + first_line, str(exc)))
    _raise_if_errors(errors, path, label="value")

    if not series:
        logger.warning("Demand series is empty: %s", path)
    logger.info("Loaded %d observation(s) from %s", len(series), path.name)
    return series


def load_snapshots(path: Path) -> list[InventorySnapshot]:
    """Load inventory snapshots from a JSON or CSV file."""
    return _load_records(path, InventorySnapshot, SNAPSHOT_CSV_COLUMNS, _snapshot_from_csv)


def load_sales(path: Path) -> list[SaleRecord]:
    """Load sale records from a JSON or CSV file."""
    return _load_records(path, SaleRecord, SALES_CSV_COLUMNS, _sale_from_csv)


def load_products(path: Path) -> list[PricedProduct]:
    """Load one or more products from a JSON file.

    A single JSON object is accepted and returned as a one-element list.
    """
    fmt = _check_path(path)
    if fmt != ".json":
        raise ValueError(f"Products must be given as a .json file, got '{fmt}'.")
    raw = _read_json(path)
    if isinstance(raw, dict):
        raw = [raw]
    if not isinstance(raw, list):
        raise ValueError(f"JSON products file must contain an object or an array: {path}")
    return _validate_all(raw, PricedProduct, path, first_line=0)


# ── Private helpers ────────────────────────────────────────────────────────────


def _check_path(path: Path) -> str:
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    fmt = path.suffix.lower()
    if fmt not in (".json", ".csv"):
        raise ValueError(f"Unsupported file format '{fmt}'. Use .json or .csv.")
    return fmt


def _read_json(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise ValueError(f"JSON parse error in {path.name}: {exc}") from exc


def _read_csv(path: Path, required: frozenset[str]) -> list[dict[str, str]]:
    with open(path, encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)

        if reader.fieldnames is None:
            raise ValueError(f"CSV file is empty or has no header row: {path}")

        actual_cols = {c.strip() for c in reader.fieldnames}
        missing = required - actual_cols
        if missing:
            raise ValueError(
                f"CSV missing required columns: {sorted(missing)}\n"
                f"Found columns: {sorted(actual_cols)}"
            )

        return [
            {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}
            for row in reader
        ]


def _load_records(
    path: Path,
    model: type[M],
    csv_columns: frozenset[str],
    from_csv: Callable[[dict[str, str]], dict[str, Any]],
) -> list[M]:
    fmt = _check_path(path)
    if fmt == ".json":
        raw = _read_json(path)
        if not isinstance(raw, list):
            raise ValueError(f"JSON file must contain an array: {path}")
        return _validate_all(raw, model, path, first_line=0)

    rows = _read_csv(path, csv_columns)
    if not rows:
        logger.warning("CSV is empty (header only): %s", path)
        return []
    return _validate_all([from_csv(r) for r in rows], model, path, first_line=2)


def _validate_all(
    raw_items: list[Any],
    model: type[M],
    path: Path,
    first_line: int,
) -> list[M]:
    records: list[M] = []
    errors: list[tuple[int, str]] = []
    for i, raw in enumerate(raw_items):
        try:
            if not isinstance(raw, dict):
                raise ValueError(f"expected an object, got {type(raw).__name__}")
            records.append(model.model_validate(raw))
        except (ValueError, ValidationError) as exc:
            errors.append((i + first_line, str(exc)))
    _raise_if_errors(errors, path, label="row" if first_line else "item")

    logger.info("Parsed %d %s record(s) from %s", len(records), model.__name__, path.name)
    return records


def _raise_if_errors(errors: list[tuple[int, str]], path: Path, label: str) -> None:
    if not errors:
        return
    detail = "\n".join(f"  {label.title()} {ln}: {msg}" for ln, msg in errors[:_MAX_ERRORS_SHOWN])
    extra = len(errors) - _MAX_ERRORS_SHOWN
    suffix = f"\n  … and {extra} more" if extra > 0 else ""
    raise ValueError(f"{len(errors)} {label}(s) failed validation in {path.name}:\n{detail}{suffix}")


def _parse_quantity(v: Any) -> float:
    if isinstance(v, bool):
        raise ValueError(f"Invalid quantity: {v!r}")
    try:
        q = float(v)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid quantity: {v!r}") from None
    if not math.isfinite(q) or q < 0:
        raise ValueError(f"Quantity must be a non-negative number, got {v!r}")
    return q


def _opt(row: dict[str, str], key: str) -> Optional[str]:
    """Return an optional string field, or None if absent/empty."""
    v = row.get(key, "")
    return v if v else None


def _snapshot_from_csv(row: dict[str, str]) -> dict[str, Any]:
    return {
        "id": row.get("id", ""),
        "name": _opt(row, "name"),
        "stock_level": row.get("stock_level", ""),
        "min_stock_level": _opt(row, "min_stock_level"),
        "max_stock_level": _opt(row, "max_stock_level"),
        "price": row.get("price", ""),
    }


def _sale_from_csv(row: dict[str, str]) -> dict[str, Any]:
    return {"sold_on": row.get("sold_on", ""), "quantity": row.get("quantity", "")}
