# Count incidents per borough and per (time bucket, borough)

import pandas as pd

from nyc_incident_pipelines.utils.logging import log_step


def count_by_borough(df: pd.DataFrame) -> pd.DataFrame:
    """One row per distinct borough: borough, incident_count (sorted by borough)."""
    counts = (
        df.groupby("borough", sort=True, dropna=False)
          .size()
          .reset_index(name="incident_count")
    )
    counts["incident_count"] = counts["incident_count"].astype("int64")

    log_step("Borough totals", counts)
    return counts


def count_by_time_bucket(df: pd.DataFrame) -> pd.DataFrame:
    """One row per observed (time_bucket, borough) pair, sorted by key."""
    if "time_bucket" not in df.columns:
        raise KeyError("'time_bucket' column missing; run clean_incidents first.")

    counts = (
        df.groupby(["time_bucket", "borough"], sort=True, dropna=False)
          .size()
          .reset_index(name="incident_count")
    )
    counts["incident_count"] = counts["incident_count"].astype("int64")

    log_step("Monthly borough counts", counts)
    return counts


__all__ = ["count_by_borough", "count_by_time_bucket"]
