# Core data validation checks for the NYC incident pipeline

import pandas as pd
from rich.console import Console

from config import BOROUGHS, NYC_BOUNDS

console = Console()


def run_validation_checks(df: pd.DataFrame, step_name: str) -> None:
    """
    Key integrity checks (report only, never raise):
    - coordinate bounds (rough NYC box)
    - core completeness
    - borough names outside the canonical five
    """
    if df.empty:
        console.print(f"[bold yellow]WARNING: {step_name} - no rows to validate.[/bold yellow]")
        return

    if all(c in df.columns for c in ["latitude", "longitude"]):
        out_of_bounds = df[
            (df["latitude"] < NYC_BOUNDS["lat_min"])
            | (df["latitude"] > NYC_BOUNDS["lat_max"])
            | (df["longitude"] < NYC_BOUNDS["lon_min"])
            | (df["longitude"] > NYC_BOUNDS["lon_max"])
        ].shape[0]
        if out_of_bounds > 0:
            console.print(
                f"[bold yellow]WARNING: {step_name} - {out_of_bounds:,} rows outside expected NYC bounds.[/bold yellow]"
            )
        else:
            console.print(f"[green]PASS: {step_name} - coordinates within expected bounds.[/green]")

    core_cols = ["occurred_on", "borough"]
    for col in core_cols:
        if col in df.columns:
            missing_pct = df[col].isna().sum() / len(df)
            if missing_pct > 0.01:
                console.print(
                    f"[bold red]FAIL: {step_name} - '{col}' missing {missing_pct:.2%} (>1%).[/bold red]"
                )
            else:
                console.print(
                    f"[green]PASS: {step_name} - '{col}' completeness OK ({missing_pct:.2%} missing).[/green]"
                )

    if "borough" in df.columns:
        unknown = sorted(set(df["borough"].dropna().unique()) - set(BOROUGHS))
        if unknown:
            console.print(
                f"[bold yellow]WARNING: {step_name} - unexpected borough names: {unknown}[/bold yellow]"
            )
        else:
            console.print(f"[green]PASS: {step_name} - borough names canonical.[/green]")


__all__ = ["run_validation_checks"]
