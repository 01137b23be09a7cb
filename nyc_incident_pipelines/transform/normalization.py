# Per-capita normalization: join borough counts to population, rate per 100k

from dataclasses import dataclass
from typing import Tuple
import pandas as pd
from rich.console import Console

from config import RATE_BASE
from nyc_incident_pipelines.transform.cleaning import normalize_borough_key
from nyc_incident_pipelines.utils.logging import log_step

console = Console()

RATE_COLUMNS = ["borough", "incident_count", "population", "rate_per_100k"]


@dataclass(frozen=True)
class JoinMismatch:
    """Keys present on only one side of a join."""

    left_only: Tuple[str, ...] = ()
    right_only: Tuple[str, ...] = ()

    @property
    def is_clean(self) -> bool:
        return not self.left_only and not self.right_only


def find_join_mismatches(left: pd.DataFrame, right: pd.DataFrame, key: str = "borough") -> JoinMismatch:
    """Compare canonical keys of two tables."""
    left_keys = set(normalize_borough_key(left[key]).dropna())
    right_keys = set(normalize_borough_key(right[key]).dropna())
    return JoinMismatch(
        left_only=tuple(sorted(left_keys - right_keys)),
        right_only=tuple(sorted(right_keys - left_keys)),
    )


def report_join_mismatch(mismatch: JoinMismatch, left_name: str, right_name: str) -> None:
    if mismatch.left_only:
        console.print(
            f"[yellow]Join mismatch:[/yellow] {list(mismatch.left_only)} in {left_name} "
            f"but not in {right_name}; excluded."
        )
    if mismatch.right_only:
        console.print(
            f"[yellow]Join mismatch:[/yellow] {list(mismatch.right_only)} in {right_name} "
            f"but not in {left_name}; excluded."
        )


def rate_per_100k(count, population):
    """count × 100000 / population."""
    return count * RATE_BASE / population


def compute_rates(counts: pd.DataFrame, population: pd.DataFrame) -> pd.DataFrame:
    """
    Inner-join borough totals with population on the canonical borough key.
    Boroughs missing from either side are dropped and reported.
    """
    left = counts[["borough", "incident_count"]].copy()
    right = population[["borough", "population"]].copy()
    left["borough"] = normalize_borough_key(left["borough"])
    right["borough"] = normalize_borough_key(right["borough"])

    unusable = right["population"].isna() | (right["population"] <= 0)
    if unusable.any():
        console.print(
            f"[yellow]Population unknown or non-positive for {sorted(right.loc[unusable, 'borough'])}; "
            f"treated as missing.[/yellow]"
        )
        right = right.loc[~unusable]

    mismatch = find_join_mismatches(left, right)
    report_join_mismatch(mismatch, "incident counts", "population")

    rates = left.merge(right, on="borough", how="inner", validate="one_to_one")
    rates["incident_count"] = rates["incident_count"].astype("int64")
    rates["population"] = rates["population"].astype("int64")
    rates["rate_per_100k"] = rate_per_100k(
        rates["incident_count"].astype("float64"), rates["population"].astype("float64")
    )

    rates = rates.sort_values("borough").reset_index(drop=True)[RATE_COLUMNS]

    note = None if mismatch.is_clean else f"unmatched: {list(mismatch.left_only + mismatch.right_only)}"
    log_step("Rates per 100k", rates, note=note)
    return rates


__all__ = [
    "RATE_COLUMNS",
    "JoinMismatch",
    "find_join_mismatches",
    "report_join_mismatch",
    "rate_per_100k",
    "compute_rates",
    "normalize_borough_key",
]
