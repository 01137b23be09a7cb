"""
Shared fixtures: a seeded synthetic incident feed, borough boxes and a
population table shaped like the NYC Open Data files.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import geopandas as gpd
import pytest
from shapely.geometry import box

from nyc_incident_pipelines.ingestion.ingestion_master import IncidentSources

BOROUGH_BOXES = {
    "Bronx": (-73.90, 40.82, -73.80, 40.90),
    "Brooklyn": (-74.00, 40.60, -73.90, 40.70),
    "Manhattan": (-74.00, 40.71, -73.93, 40.80),
    "Queens": (-73.89, 40.65, -73.75, 40.78),
    "Staten Island": (-74.20, 40.50, -74.08, 40.62),
}

DAILY_PROBABILITY = {
    "Bronx": 0.6,
    "Brooklyn": 0.7,
    "Manhattan": 0.45,
    "Queens": 0.4,
    "Staten Island": 0.15,
}

POPULATION_2020 = {
    "Bronx": 1472654,
    "Brooklyn": 2736074,
    "Manhattan": 1694251,
    "Queens": 2405464,
    "Staten Island": 495747,
}


def synthetic_incident_rows(days: int = 120, seed: int = 7) -> pd.DataFrame:
    """NYPD-style raw rows (string columns) with a few malformed records appended."""
    rng = np.random.default_rng(seed)
    start = pd.Timestamp("2021-01-01")
    rows = []
    key = 1000
    for offset in range(days):
        day = start + pd.Timedelta(days=offset)
        for boro, p in DAILY_PROBABILITY.items():
            if rng.random() >= p:
                continue
            xmin, ymin, xmax, ymax = BOROUGH_BOXES[boro]
            for _ in range(int(rng.integers(1, 3))):
                key += 1
                rows.append({
                    "INCIDENT_KEY": str(key),
                    "OCCUR_DATE": day.strftime("%m/%d/%Y"),
                    "BORO": boro.upper(),
                    "Latitude": f"{rng.uniform(ymin, ymax):.6f}",
                    "Longitude": f"{rng.uniform(xmin, xmax):.6f}",
                })

    rows += [
        {"INCIDENT_KEY": "1", "OCCUR_DATE": "02/30/2021", "BORO": "BRONX", "Latitude": "40.85", "Longitude": "-73.85"},
        {"INCIDENT_KEY": "2", "OCCUR_DATE": "01/05/2021", "BORO": "QUEENS", "Latitude": "", "Longitude": ""},
        {"INCIDENT_KEY": "3", "OCCUR_DATE": "01/06/2021", "BORO": "BROOKLYN", "Latitude": "abc", "Longitude": "-73.95"},
    ]
    return pd.DataFrame(rows)


@pytest.fixture
def raw_incidents() -> pd.DataFrame:
    return synthetic_incident_rows()


@pytest.fixture
def incidents_csv(tmp_path, raw_incidents):
    path = tmp_path / "incidents.csv"
    raw_incidents.to_csv(path, index=False)
    return path


@pytest.fixture
def borough_polygons() -> gpd.GeoDataFrame:
    return gpd.GeoDataFrame(
        {"boro_name": list(BOROUGH_BOXES)},
        geometry=[box(*bounds) for bounds in BOROUGH_BOXES.values()],
        crs="EPSG:4326",
    )


@pytest.fixture
def boroughs_geojson(tmp_path, borough_polygons):
    path = tmp_path / "boroughs.geojson"
    borough_polygons.to_file(path, driver="GeoJSON")
    return path


@pytest.fixture
def population_csv(tmp_path):
    """Wide decade table, thousands separators, padded names and a city total row."""
    rows = [{"Age Group": "Total Population", "Borough": "NYC Total", "2010": "8,175,133", "2020": "8,804,190"}]
    for boro, pop in POPULATION_2020.items():
        rows.append({"Age Group": "Total Population", "Borough": f"   {boro}", "2010": "1", "2020": f"{pop:,}"})
    path = tmp_path / "population.csv"
    pd.DataFrame(rows).to_csv(path, index=False)
    return path


@pytest.fixture
def sources(incidents_csv, boroughs_geojson, population_csv) -> IncidentSources:
    return IncidentSources(incidents=incidents_csv, boroughs=boroughs_geojson, population=population_csv)


@pytest.fixture
def clean_frame() -> pd.DataFrame:
    """Already-typed incidents from 2021-01-01 to 2021-02-10, most days silent."""
    return pd.DataFrame({
        "occurred_on": pd.to_datetime([
            "2021-01-01", "2021-01-01", "2021-01-02", "2021-01-02", "2021-01-05", "2021-02-10",
        ]),
        "borough": ["BRONX", "BRONX", "QUEENS", "MANHATTAN", "BRONX", "BROOKLYN"],
        "latitude": [40.85, 40.86, 40.70, 40.75, 40.84, 40.65],
        "longitude": [-73.85, -73.86, -73.80, -73.97, -73.84, -73.95],
        "time_bucket": ["2021-01", "2021-01", "2021-01", "2021-01", "2021-01", "2021-02"],
    })
