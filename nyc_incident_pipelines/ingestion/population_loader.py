# Borough population reference table
from pathlib import Path
from typing import Optional, Union
import pandas as pd
from rich.console import Console

from config import POPULATION_YEAR
from nyc_incident_pipelines.errors import SourceUnavailableError
from nyc_incident_pipelines.transform.cleaning import (
    normalize_borough_key,
    resolve_column,
    standardize_column_name,
)
from nyc_incident_pipelines.utils.logging import log_step

console = Console()

BOROUGH_CANDIDATES = ["borough", "boro", "boro_name"]


def load_population(source: Union[str, Path], year: Optional[str] = POPULATION_YEAR) -> pd.DataFrame:
    """
    Load population per borough: columns borough, population (int64 > 0).

    The NYC table is wide (one column per decade); `year` selects the column.
    A table with a plain `population` column is used as-is.
    """
    console.print(f"[cyan]Reading population:[/cyan] {source}")
    try:
        raw = pd.read_csv(source, dtype=str)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        console.print(f"[bold red]Could not read population table:[/bold red] {source}")
        raise SourceUnavailableError("population", source, str(exc)) from exc

    raw.columns = [standardize_column_name(str(c)) for c in raw.columns]
    columns = list(raw.columns)

    value_candidates = ["population"]
    if year is not None:
        value_candidates.insert(0, standardize_column_name(str(year)))

    try:
        boro_col = resolve_column(columns, BOROUGH_CANDIDATES, "borough")
        value_col = resolve_column(columns, value_candidates, "population")
    except KeyError as exc:
        raise SourceUnavailableError("population", source, str(exc)) from exc

    values = raw[value_col].astype(str).str.replace(",", "", regex=False).str.strip()
    df = pd.DataFrame({
        "borough": normalize_borough_key(raw[boro_col]),
        "population": pd.to_numeric(values, errors="coerce"),
    })

    valid = df["borough"].notna() & df["population"].notna() & (df["population"] > 0)
    invalid = int((~valid).sum())
    if invalid:
        console.print(f"[yellow]Dropped {invalid:,} population rows without a positive count.[/yellow]")

    df = df.loc[valid].copy()
    df["population"] = df["population"].round().astype("int64")

    duplicates = df["borough"].duplicated(keep="first")
    if duplicates.any():
        console.print(f"[yellow]Duplicate population rows ignored:[/yellow] {sorted(df.loc[duplicates, 'borough'])}")
        df = df.loc[~duplicates]

    df = df.sort_values("borough").reset_index(drop=True)
    log_step(f"Loaded population ({value_col})", df)
    return df


__all__ = ["load_population"]
