# Geospatial enrichment: incident points, borough centroids, choropleth join

import pandas as pd
import geopandas as gpd
from rich.console import Console

from config import NY_STATE_PLANE, WGS84
from nyc_incident_pipelines.transform.cleaning import normalize_borough_key
from nyc_incident_pipelines.transform.normalization import find_join_mismatches, report_join_mismatch
from nyc_incident_pipelines.utils.logging import log_step

console = Console()


def to_gdf(df: pd.DataFrame, lon_col: str = "longitude", lat_col: str = "latitude") -> gpd.GeoDataFrame:
    """Convert a DataFrame into a GeoDataFrame."""
    for col in (lon_col, lat_col):
        if col not in df.columns:
            raise KeyError(f"Expected coordinate column '{col}' not found.")

    return gpd.GeoDataFrame(
        df.copy(),
        geometry=gpd.points_from_xy(df[lon_col], df[lat_col]),
        crs=WGS84,
    )


def compute_centroids(polygons: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """
    One label point per borough.

    The planar centroid is taken in the New York State Plane projection so the
    point does not depend on lon/lat distortion, then returned in EPSG:4326.
    """
    projected = polygons.to_crs(NY_STATE_PLANE)
    centroids = gpd.GeoDataFrame(
        {"borough": normalize_borough_key(polygons["borough"]).values},
        geometry=projected.geometry.centroid.values,
        crs=NY_STATE_PLANE,
    ).to_crs(WGS84)

    centroids["longitude"] = centroids.geometry.x
    centroids["latitude"] = centroids.geometry.y
    centroids = centroids.sort_values("borough").reset_index(drop=True)

    log_step("Borough centroids", centroids)
    return centroids


def attach_rates(polygons: gpd.GeoDataFrame, rates: pd.DataFrame) -> gpd.GeoDataFrame:
    """
    Inner-join borough polygons with the rate table for choropleth rendering.
    A borough without a rate is excluded rather than drawn as zero.
    """
    shapes = polygons[["borough", "geometry"]].copy()
    shapes["borough"] = normalize_borough_key(shapes["borough"])
    table = rates.copy()
    table["borough"] = normalize_borough_key(table["borough"])

    mismatch = find_join_mismatches(shapes, table)
    report_join_mismatch(mismatch, "borough polygons", "rate table")

    joined = shapes.merge(table, on="borough", how="inner", validate="one_to_one")
    joined = gpd.GeoDataFrame(joined, geometry="geometry", crs=polygons.crs)
    joined = joined.sort_values("borough").reset_index(drop=True)

    log_step("Choropleth table", joined)
    return joined


__all__ = ["to_gdf", "compute_centroids", "attach_rates"]
