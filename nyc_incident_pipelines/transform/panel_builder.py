"""Builds dense borough panels from sparse incident counts.

1. Daily occurrence panel  (every date × every borough, occurred flag)
2. Monthly count panel     (every time bucket × every borough, zero-filled)

Both panels are long/tidy tables. Missing combinations in the sparse counts
become explicit zero / False rows, never absent rows.
"""

from typing import Iterable, Optional
import pandas as pd
from rich.console import Console

from config import BOROUGHS
from nyc_incident_pipelines.transform.temporal import month_range
from nyc_incident_pipelines.utils.logging import log_step

console = Console()

DAILY_COLUMNS = ["date", "borough", "incident_count", "occurred"]
MONTHLY_COLUMNS = ["time_bucket", "borough", "incident_count"]


def borough_axis(df: pd.DataFrame, boroughs: Optional[Iterable[str]] = None) -> list:
    """Canonical boroughs plus any extra borough observed in the data, sorted."""
    if boroughs is not None:
        return sorted(set(boroughs))
    observed = set(df["borough"].dropna().unique()) if "borough" in df.columns else set()
    return sorted(set(BOROUGHS) | observed)


def _dense_grid(first_axis: pd.Index, boroughs: list) -> pd.DataFrame:
    return pd.MultiIndex.from_product(
        [first_axis, boroughs], names=[first_axis.name, "borough"]
    ).to_frame(index=False)


# -------------------------------------------------------------
# DAILY OCCURRENCE PANEL
# -------------------------------------------------------------

def build_daily_occurrence(
    df: pd.DataFrame,
    boroughs: Optional[Iterable[str]] = None,
    start=None,
    end=None,
) -> pd.DataFrame:
    """
    Dense (date × borough) table with incident_count and occurred = count >= 1.

    The date axis spans [start, end] inclusive, defaulting to the earliest and
    latest occurred_on in df. Incidents outside the range are ignored.
    """
    console.print("[cyan]Building daily occurrence panel...[/cyan]")

    dates = pd.to_datetime(df["occurred_on"]).dt.normalize()
    start = pd.Timestamp(start).normalize() if start is not None else dates.min()
    end = pd.Timestamp(end).normalize() if end is not None else dates.max()
    axis = borough_axis(df, boroughs)

    if pd.isna(start) or pd.isna(end) or start > end:
        empty = pd.DataFrame({
            "date": pd.Series(dtype="datetime64[ns]"),
            "borough": pd.Series(dtype=object),
            "incident_count": pd.Series(dtype="int64"),
            "occurred": pd.Series(dtype=bool),
        })
        log_step("Daily occurrence panel", empty, note="empty date range")
        return empty

    all_days = pd.date_range(start=start, end=end, freq="D", name="date")
    grid = _dense_grid(all_days, axis)

    on_axis = df["borough"].isin(axis)
    excluded = int((~on_axis).sum())
    if excluded:
        console.print(f"[yellow]Excluded {excluded:,} incidents without a panel borough.[/yellow]")

    in_range = dates.between(start, end) & on_axis
    sparse = (
        pd.DataFrame({"date": dates[in_range], "borough": df.loc[in_range, "borough"]})
        .groupby(["date", "borough"])
        .size()
        .reset_index(name="incident_count")
    )

    panel = grid.merge(sparse, on=["date", "borough"], how="left")
    panel["incident_count"] = panel["incident_count"].fillna(0).astype("int64")
    panel["occurred"] = panel["incident_count"] >= 1

    panel = panel.sort_values(["date", "borough"]).reset_index(drop=True)[DAILY_COLUMNS]

    console.print(
        f"[green]Daily panel → {len(all_days):,} days × {len(axis)} boroughs = {len(panel):,} rows "
        f"({int(panel['occurred'].sum()):,} with ≥1 incident)[/green]"
    )
    log_step("Daily occurrence panel", panel, note=f"{excluded} excluded (no panel borough)" if excluded else None)
    return panel


# -------------------------------------------------------------
# MONTHLY COUNT PANEL
# -------------------------------------------------------------

def build_monthly_panel(
    counts: pd.DataFrame,
    boroughs: Optional[Iterable[str]] = None,
) -> pd.DataFrame:
    """Zero-filled (time_bucket × borough) counts covering every month in range."""
    if counts.empty:
        return pd.DataFrame(columns=MONTHLY_COLUMNS)

    buckets = month_range(counts["time_bucket"].min(), counts["time_bucket"].max())
    axis = borough_axis(counts, boroughs)
    grid = _dense_grid(pd.Index(buckets, name="time_bucket"), axis)

    on_axis = counts["borough"].isin(axis)
    excluded = int(counts.loc[~on_axis, "incident_count"].sum())
    if excluded:
        console.print(f"[yellow]Excluded {excluded:,} incidents without a panel borough.[/yellow]")

    panel = grid.merge(counts.loc[on_axis, MONTHLY_COLUMNS], on=["time_bucket", "borough"], how="left")
    panel["incident_count"] = panel["incident_count"].fillna(0).astype("int64")
    panel = panel.sort_values(["time_bucket", "borough"]).reset_index(drop=True)

    log_step("Monthly count panel", panel, note=f"{excluded} excluded (no panel borough)" if excluded else None)
    return panel


__all__ = ["DAILY_COLUMNS", "borough_axis", "build_daily_occurrence", "build_monthly_panel"]
