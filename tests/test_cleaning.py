"""
Tests for column standardization, typed coercion and the incident cleaner.
"""

import pandas as pd

from nyc_incident_pipelines.transform.cleaning import (
    clean_incidents,
    coerce_incident_frame,
    normalize_borough_key,
    parse_occurrence_date,
    standardize_column_name,
)


def test_standardize_column_name():
    assert standardize_column_name("OCCUR_DATE") == "occur_date"
    assert standardize_column_name("Latitude") == "latitude"
    assert standardize_column_name("BoroName") == "boro_name"
    assert standardize_column_name("Age Group") == "age_group"


def test_normalize_borough_key_uppercases_and_trims():
    keys = normalize_borough_key(pd.Series(["  staten   island ", "Bronx", None, "   "]))
    assert keys.iloc[0] == "STATEN ISLAND"
    assert keys.iloc[1] == "BRONX"
    assert pd.isna(keys.iloc[2])
    assert pd.isna(keys.iloc[3])


def test_parse_occurrence_date_flags_malformed_but_not_missing():
    parsed, malformed = parse_occurrence_date(pd.Series(["01/15/2021", "2021-01-15", None, "13/01/2021"]))

    assert parsed.iloc[0] == pd.Timestamp("2021-01-15")
    assert parsed.iloc[1:].isna().all()
    assert malformed.tolist() == [False, True, False, True]


def test_coerce_incident_frame_tags_bad_rows(raw_incidents):
    df = coerce_incident_frame(raw_incidents)

    assert list(df.columns[:4]) == ["occurred_on", "borough", "latitude", "longitude"]
    assert len(df) == len(raw_incidents)
    assert int(df["_bad_date"].sum()) == 1
    assert int(df["_bad_coords"].sum()) == 1
    assert pd.api.types.is_datetime64_any_dtype(df["occurred_on"])
    assert df["latitude"].dtype == "float64"


def test_coerce_nulls_out_of_range_coordinates():
    raw = pd.DataFrame({
        "OCCUR_DATE": ["01/01/2021", "01/02/2021"],
        "BORO": ["bronx", "queens"],
        "Latitude": ["140.5", "40.7"],
        "Longitude": ["-73.9", "-73.8"],
    })
    df = coerce_incident_frame(raw)

    assert pd.isna(df.loc[0, "latitude"])
    assert df["_bad_coords"].tolist() == [True, False]
    assert df["borough"].tolist() == ["BRONX", "QUEENS"]


def test_clean_incidents_filters_and_reports(raw_incidents):
    typed = coerce_incident_frame(raw_incidents)
    cleaned, report = clean_incidents(typed)

    assert len(cleaned) <= len(typed)
    assert cleaned[["occurred_on", "latitude", "longitude"]].notna().all().all()
    assert report.total_rows == len(typed)
    assert report.kept_rows == len(cleaned)
    assert report.dropped_rows == 3
    assert report.malformed_dates == 1
    assert report.malformed_coordinates == 1
    assert "_bad_date" not in cleaned.columns


def test_clean_incidents_preserves_order_and_adds_time_bucket():
    typed = pd.DataFrame({
        "occurred_on": pd.to_datetime(["2021-03-04", None, "2020-12-31", "2021-01-09"]),
        "borough": ["QUEENS", "BRONX", "BRONX", "MANHATTAN"],
        "latitude": [40.7, 40.8, None, 40.75],
        "longitude": [-73.8, -73.9, -73.9, -73.97],
    })
    cleaned, report = clean_incidents(typed)

    assert cleaned["borough"].tolist() == ["QUEENS", "MANHATTAN"]
    assert cleaned["time_bucket"].tolist() == ["2021-03", "2021-01"]
    assert cleaned["year"].tolist() == [2021, 2021]
    assert report.missing_date == 1
    assert report.missing_coordinates == 1
    assert report.malformed_dates == 0
