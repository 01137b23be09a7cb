# Raw incident ingestion from the NYC Open Data incident feed
from pathlib import Path
from typing import Union
import pandas as pd

from rich.console import Console
from config import DATE_FORMAT
from nyc_incident_pipelines.errors import SourceUnavailableError
from nyc_incident_pipelines.transform.cleaning import coerce_incident_frame
from nyc_incident_pipelines.utils.logging import log_step

console = Console()

Source = Union[str, Path]


def read_incident_table(source: Source) -> pd.DataFrame:
    """Read the raw incident CSV (local path or URL) as untyped strings."""
    console.print(f"[cyan]Reading incidents:[/cyan] {source}")
    try:
        return pd.read_csv(source, dtype=str, keep_default_na=True)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        console.print(f"[bold red]Could not read incident feed:[/bold red] {source}")
        raise SourceUnavailableError("incidents", source, str(exc)) from exc


def load_incidents(source: Source, date_format: str = DATE_FORMAT) -> pd.DataFrame:
    """
    Load the incident feed into typed records:
    occurred_on, borough, latitude, longitude (+ malformed-row tags).
    """
    raw = read_incident_table(source)
    try:
        df = coerce_incident_frame(raw, date_format=date_format)
    except KeyError as exc:
        raise SourceUnavailableError("incidents", source, str(exc)) from exc

    bad_dates = int(df["_bad_date"].sum())
    bad_coords = int(df["_bad_coords"].sum())
    if bad_dates or bad_coords:
        console.print(
            f"[yellow]Malformed rows:[/yellow] {bad_dates:,} unparseable dates, "
            f"{bad_coords:,} invalid coordinates"
        )

    log_step("Loaded incidents", df)
    return df


__all__ = ["read_incident_table", "load_incidents"]
