from __future__ import annotations

import logging
from typing import Optional, Sequence

import pandas as pd

from bopf_dashboard.connectors.schema import ForecastPoint, HistoryPoint

logger = logging.getLogger(__name__)

SERIES_COLUMNS = ["date", "actual", "predicted", "lower", "upper", "kenya", "india"]
VALUE_COLUMNS = SERIES_COLUMNS[1:]


def empty_series() -> pd.DataFrame:
    return _frame([])


def merge_series(
    history: Sequence[HistoryPoint], forecast: Optional[ForecastPoint]
) -> pd.DataFrame:
    """Return the chart series: history rows as received, then the forecast row.

    Columns: date, actual, predicted, lower, upper, kenya, india.

    Safety:
      - No reordering, interpolation or gap filling; history is trusted to be
        date-ascending. Violations are logged, not repaired.
      - Only the forecast row carries predicted/lower/upper, and it never
        carries actual or competitor prices.
    """

    rows = [
        {
            "date": p.date,
            "actual": p.price_lkr,
            "predicted": None,
            "lower": None,
            "upper": None,
            "kenya": p.kenya_usd,
            "india": p.india_usd,
        }
        for p in history
    ]

    if forecast is not None:
        rows.append(
            {
                "date": forecast.date,
                "actual": None,
                "predicted": forecast.price_lkr,
                "lower": forecast.lower,
                "upper": forecast.upper,
                "kenya": None,
                "india": None,
            }
        )

    df = _frame(rows)
    _warn_on_date_order(df)
    return df


def _frame(rows: list[dict]) -> pd.DataFrame:
    df = pd.DataFrame(rows, columns=SERIES_COLUMNS)
    for col in VALUE_COLUMNS:
        df[col] = df[col].astype("float64")
    return df


def _warn_on_date_order(df: pd.DataFrame) -> None:
    if len(df.index) < 2:
        return
    dates = pd.to_datetime(df["date"])
    if dates.duplicated().any():
        dupes = dates[dates.duplicated()].dt.date.unique().tolist()
        logger.warning(f"Merged series has duplicate dates: e.g. {dupes[:3]}")
    if not dates.is_monotonic_increasing:
        logger.warning("Merged series dates are not ascending; rows kept in received order")


def actual_values(series: pd.DataFrame) -> list[float]:
    """Actual-bearing rows only, in series order."""
    if series.empty:
        return []
    return series["actual"].dropna().astype(float).tolist()
