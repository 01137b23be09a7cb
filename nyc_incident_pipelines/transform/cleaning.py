# Core cleaning transformations applied to raw incident rows
import re
from dataclasses import dataclass
from typing import Any, List, Tuple
import numpy as np
import pandas as pd
from rich.console import Console

from config import DATE_FORMAT
from nyc_incident_pipelines.transform.temporal import add_time_bucket
from nyc_incident_pipelines.utils.logging import log_step

console = Console()

DATE_CANDIDATES = ["occur_date", "occurred_on", "date", "cmplnt_fr_dt"]
BOROUGH_CANDIDATES = ["boro", "borough", "boro_nm"]
LAT_CANDIDATES = ["latitude", "lat"]
LON_CANDIDATES = ["longitude", "lon", "lng"]

INCIDENT_COLUMNS = ["occurred_on", "borough", "latitude", "longitude"]


@dataclass(frozen=True)
class CleaningReport:
    """Row accounting for one cleaning pass."""

    total_rows: int
    malformed_dates: int
    malformed_coordinates: int
    missing_date: int
    missing_coordinates: int
    kept_rows: int

    @property
    def dropped_rows(self) -> int:
        return self.total_rows - self.kept_rows


def standardize_column_name(col: str) -> str:
    """Convert arbitrary open-data column names into clean_snake_case."""
    col = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", col)
    col = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", col)
    col = col.lower()
    col = re.sub(r"[\s\-\.\,\(\)\[\]\{\}]+", "_", col)
    col = re.sub(r"[^\w]", "", col)
    col = re.sub(r"_+", "_", col).strip("_")
    return col


def resolve_column(columns: List[str], candidates: List[str], label: str) -> str:
    """Pick the first candidate present in columns."""
    found = next((c for c in candidates if c in columns), None)
    if found is None:
        raise KeyError(f"No {label} column found (expected one of {candidates}).")
    return found


def canonical_borough(value: Any) -> Any:
    if pd.isna(value):
        return np.nan
    key = " ".join(str(value).split()).upper()
    return key if key else np.nan


def normalize_borough_key(values: pd.Series) -> pd.Series:
    """Uppercase, trim and collapse inner whitespace of borough names."""
    return values.map(canonical_borough)


def _present(raw: pd.Series) -> pd.Series:
    return raw.notna() & raw.astype(str).str.strip().ne("")


def parse_occurrence_date(raw: pd.Series, fmt: str = DATE_FORMAT) -> Tuple[pd.Series, pd.Series]:
    """
    Parse dates with a fixed format.

    Returns the parsed (midnight-normalized) dates and a mask of rows whose
    non-empty value failed to parse.
    """
    text = raw.astype(str).str.strip()
    parsed = pd.to_datetime(text.where(_present(raw)), format=fmt, errors="coerce").dt.normalize()
    malformed = _present(raw) & parsed.isna()
    return parsed, malformed


def coerce_coordinate(raw: pd.Series, low: float, high: float) -> Tuple[pd.Series, pd.Series]:
    """Numeric coordinate with out-of-range or non-numeric values nulled, plus a malformed mask."""
    values = pd.to_numeric(raw, errors="coerce").astype("float64")
    out_of_range = values.notna() & ((values < low) | (values > high))
    values = values.mask(out_of_range)
    malformed = _present(raw) & values.isna()
    return values, malformed


def coerce_incident_frame(df: pd.DataFrame, date_format: str = DATE_FORMAT) -> pd.DataFrame:
    """
    Convert raw incident rows into the typed incident schema.

    Rows are never rejected here: unparseable dates and coordinates become
    nulls and are tagged in `_bad_date` / `_bad_coords` for the cleaner to count.
    """
    df = df.copy()
    df.columns = [standardize_column_name(str(c)) for c in df.columns]
    columns = list(df.columns)

    date_col = resolve_column(columns, DATE_CANDIDATES, "occurrence date")
    boro_col = resolve_column(columns, BOROUGH_CANDIDATES, "borough")
    lat_col = resolve_column(columns, LAT_CANDIDATES, "latitude")
    lon_col = resolve_column(columns, LON_CANDIDATES, "longitude")

    occurred_on, bad_date = parse_occurrence_date(df[date_col], date_format)
    latitude, bad_lat = coerce_coordinate(df[lat_col], -90.0, 90.0)
    longitude, bad_lon = coerce_coordinate(df[lon_col], -180.0, 180.0)

    out = pd.DataFrame({
        "occurred_on": occurred_on,
        "borough": normalize_borough_key(df[boro_col]),
        "latitude": latitude,
        "longitude": longitude,
        "_bad_date": bad_date.astype(bool),
        "_bad_coords": (bad_lat | bad_lon).astype(bool),
    })
    return out.reset_index(drop=True)


def clean_incidents(df: pd.DataFrame) -> Tuple[pd.DataFrame, CleaningReport]:
    """
    Keep only rows with a date and both coordinates, in input order,
    and derive the year-month time bucket.
    """
    df = df.copy()
    total_rows = len(df)

    bad_date = df["_bad_date"] if "_bad_date" in df.columns else pd.Series(False, index=df.index)
    bad_coords = df["_bad_coords"] if "_bad_coords" in df.columns else pd.Series(False, index=df.index)

    missing_date = df["occurred_on"].isna()
    missing_coords = df["latitude"].isna() | df["longitude"].isna()
    keep = ~(missing_date | missing_coords)

    cleaned = df.loc[keep].drop(columns=["_bad_date", "_bad_coords"], errors="ignore")
    cleaned = cleaned.reset_index(drop=True)
    cleaned = add_time_bucket(cleaned)

    report = CleaningReport(
        total_rows=total_rows,
        malformed_dates=int(bad_date.sum()),
        malformed_coordinates=int(bad_coords.sum()),
        missing_date=int(missing_date.sum()),
        missing_coordinates=int(missing_coords.sum()),
        kept_rows=len(cleaned),
    )

    if report.dropped_rows > 0:
        console.print(
            f"[yellow]Dropped {report.dropped_rows:,} of {total_rows:,} rows "
            f"(missing date: {report.missing_date:,}, missing coordinates: {report.missing_coordinates:,}, "
            f"malformed dates: {report.malformed_dates:,}, malformed coordinates: {report.malformed_coordinates:,})[/yellow]"
        )

    log_step("Cleaned incidents", cleaned, note=f"dropped {report.dropped_rows:,}")
    return cleaned, report


__all__ = [
    "CleaningReport",
    "INCIDENT_COLUMNS",
    "standardize_column_name",
    "resolve_column",
    "normalize_borough_key",
    "parse_occurrence_date",
    "coerce_coordinate",
    "coerce_incident_frame",
    "clean_incidents",
]
