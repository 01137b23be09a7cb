# Validation checks for the borough panels and the rate table


import numpy as np
import pandas as pd
from rich.console import Console

from config import RATE_BASE

console = Console()


def validate_daily_panel(df: pd.DataFrame) -> None:
    """
    Check that the daily panel is a complete date × borough grid:
    every pair exactly once, row count = dates × boroughs.
    """
    required_cols = ["date", "borough", "incident_count", "occurred"]
    missing = [c for c in required_cols if c not in df.columns]
    if missing:
        console.print(f"[bold red]Daily panel schema validation failed.[/bold red]")
        raise ValueError(f"Daily panel missing columns: {missing}")

    duplicates = int(df.duplicated(subset=["date", "borough"]).sum())
    if duplicates:
        raise ValueError(f"Daily panel has {duplicates:,} duplicated (date, borough) rows.")

    n_dates = df["date"].nunique()
    n_boroughs = df["borough"].nunique()
    if len(df) != n_dates * n_boroughs:
        raise ValueError(
            f"Daily panel incomplete: {len(df):,} rows for {n_dates:,} dates × {n_boroughs} boroughs."
        )

    if n_dates:
        expected_days = (df["date"].max() - df["date"].min()).days + 1
        if expected_days != n_dates:
            raise ValueError(f"Daily panel has gaps: {n_dates:,} of {expected_days:,} days present.")

    if not (df["occurred"] == (df["incident_count"] >= 1)).all():
        raise ValueError("Daily panel 'occurred' flag disagrees with incident_count.")

    console.print(f"[green]Daily panel validated: {n_dates:,} days × {n_boroughs} boroughs.[/green]")


def validate_rates(df: pd.DataFrame) -> None:
    """Check positive population and rate_per_100k = count × 100000 / population."""
    if (df["population"] <= 0).any():
        raise ValueError("Rate table contains non-positive population.")

    expected = df["incident_count"] * RATE_BASE / df["population"]
    if not np.allclose(df["rate_per_100k"], expected):
        raise ValueError("rate_per_100k inconsistent with incident_count and population.")

    console.print("[green]Rate table validated.[/green]")


__all__ = ["validate_daily_panel", "validate_rates"]
