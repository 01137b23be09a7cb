# Adds temporal keys: calendar date, year, month and the year-month time bucket

import pandas as pd


def add_time_bucket(df: pd.DataFrame, date_col: str = "occurred_on") -> pd.DataFrame:
    """Add year, month and 'YYYY-MM' time_bucket columns derived from date_col."""
    df = df.copy()
    df[date_col] = pd.to_datetime(df[date_col])
    dt = df[date_col].dt

    df["year"] = dt.year.astype("int64")
    df["month"] = dt.month.astype("int64")
    df["time_bucket"] = dt.strftime("%Y-%m")
    return df


def month_range(start: str, end: str) -> list:
    """All 'YYYY-MM' buckets from start to end inclusive, chronological."""
    periods = pd.period_range(start=start, end=end, freq="M")
    return [p.strftime("%Y-%m") for p in periods]


__all__ = ["add_time_bucket", "month_range"]
