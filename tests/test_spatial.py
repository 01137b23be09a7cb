"""
Tests for incident points, borough centroids and the choropleth join.
"""

import pandas as pd
import pytest

from nyc_incident_pipelines.transform.spatial import attach_rates, compute_centroids, to_gdf


@pytest.fixture
def polygons(borough_polygons):
    shapes = borough_polygons.rename(columns={"boro_name": "borough"})
    shapes["borough"] = shapes["borough"].str.upper()
    return shapes


def test_to_gdf_builds_points(clean_frame):
    gdf = to_gdf(clean_frame)

    assert gdf.crs.to_epsg() == 4326
    assert len(gdf) == len(clean_frame)
    assert gdf.geometry.iloc[0].x == pytest.approx(-73.85)
    assert gdf.geometry.iloc[0].y == pytest.approx(40.85)


def test_to_gdf_requires_coordinates(clean_frame):
    with pytest.raises(KeyError):
        to_gdf(clean_frame.drop(columns=["latitude"]))


def test_centroids_one_per_borough_inside_polygon(polygons):
    centroids = compute_centroids(polygons)

    assert centroids["borough"].tolist() == sorted(polygons["borough"])
    assert centroids.crs.to_epsg() == 4326
    shapes = polygons.set_index("borough").geometry
    for row in centroids.itertuples():
        assert shapes[row.borough].contains(row.geometry)


def test_centroids_are_repeatable(polygons):
    first = compute_centroids(polygons)
    second = compute_centroids(polygons.iloc[::-1].reset_index(drop=True))

    pd.testing.assert_frame_equal(
        pd.DataFrame(first[["borough", "longitude", "latitude"]]),
        pd.DataFrame(second[["borough", "longitude", "latitude"]]),
    )


def test_attach_rates_excludes_boroughs_without_rate(polygons):
    rates = pd.DataFrame({
        "borough": ["bronx", "QUEENS "],
        "incident_count": [10, 5],
        "population": [100000, 50000],
        "rate_per_100k": [10.0, 10.0],
    })
    joined = attach_rates(polygons, rates)

    assert joined["borough"].tolist() == ["BRONX", "QUEENS"]
    assert joined.crs.to_epsg() == 4326
    assert joined.geometry.notna().all()
    assert joined["rate_per_100k"].tolist() == [10.0, 10.0]
