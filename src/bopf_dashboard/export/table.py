"""Flat CSV export of the merged series.

Output schema (one row per series row, missing values as empty fields):
  date (YYYY-MM-DD), actual, predicted, lower, upper, kenya_usd, india_usd
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any

import pandas as pd

from bopf_dashboard.series.merge import SERIES_COLUMNS, VALUE_COLUMNS

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ["date", "actual", "predicted", "lower", "upper", "kenya_usd", "india_usd"]
_TO_EXPORT = dict(zip(SERIES_COLUMNS, EXPORT_COLUMNS))
_FROM_EXPORT = {v: k for k, v in _TO_EXPORT.items()}


def to_csv(series: pd.DataFrame) -> str:
    out = series[SERIES_COLUMNS].copy()
    out["date"] = [pd.Timestamp(d).date().isoformat() for d in out["date"]]
    out = out.rename(columns=_TO_EXPORT)
    return out.to_csv(index=False, na_rep="", lineterminator="\n")


def write_csv(series: pd.DataFrame, output_path: str | Path) -> Path:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_csv(series), encoding="utf-8")
    logger.info(f"Saved {len(series)} series rows to {path}")
    return path


def parse_csv(text: str) -> pd.DataFrame:
    """Parse an exported table back into the merged-series schema."""
    df = pd.read_csv(io.StringIO(text), dtype={"date": str})
    missing = [c for c in EXPORT_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Export table missing required columns: {missing}")

    df = df[EXPORT_COLUMNS].rename(columns=_FROM_EXPORT)
    df["date"] = pd.to_datetime(df["date"], format="%Y-%m-%d").dt.date
    for col in VALUE_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="raise").astype("float64")
    return df


def read_csv(source: str | Path) -> pd.DataFrame:
    """Read an exported table from a file path, or from the CSV text itself."""
    if isinstance(source, str) and "\n" in source:
        return parse_csv(source)
    return parse_csv(Path(source).read_text(encoding="utf-8"))


def to_records(series: pd.DataFrame) -> list[dict[str, Any]]:
    """Rows as dicts with ``None`` for missing values."""
    records = []
    for row in series[SERIES_COLUMNS].itertuples(index=False):
        rec = row._asdict()
        for col in VALUE_COLUMNS:
            if pd.isna(rec[col]):
                rec[col] = None
            else:
                rec[col] = float(rec[col])
        records.append(rec)
    return records
