"""
Transformation steps: cleaning, temporal keys, aggregation, dense panels,
per-capita normalization and geospatial enrichment.
"""

from .cleaning import CleaningReport, clean_incidents, normalize_borough_key
from .aggregation import count_by_borough, count_by_time_bucket
from .panel_builder import build_daily_occurrence, build_monthly_panel
from .normalization import JoinMismatch, compute_rates, find_join_mismatches
from .spatial import attach_rates, compute_centroids, to_gdf

__all__ = [
    "CleaningReport",
    "clean_incidents",
    "normalize_borough_key",
    "count_by_borough",
    "count_by_time_bucket",
    "build_daily_occurrence",
    "build_monthly_panel",
    "JoinMismatch",
    "compute_rates",
    "find_join_mismatches",
    "attach_rates",
    "compute_centroids",
    "to_gdf",
]
