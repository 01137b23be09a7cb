"""
End-to-end tests: the full batch pass, its idempotence, exports and figures.
"""

import json
from unittest.mock import patch

import pandas as pd
import pytest

from nyc_incident_pipelines.pipeline import export_outputs, main, run_pipeline
from nyc_incident_pipelines.transform.spatial import to_gdf
from nyc_incident_pipelines.utils.logging import pipeline_log
from nyc_incident_pipelines.visualize.figures import plot_borough_bar, render_figures


@pytest.fixture
def outputs(sources):
    return run_pipeline(sources, seed=42, train_fraction=0.7)


def test_pipeline_row_accounting(outputs):
    report = outputs.cleaning

    assert report.dropped_rows == 3
    assert outputs.borough_counts["incident_count"].sum() == report.kept_rows
    assert len(outputs.incidents) == report.kept_rows


def test_pipeline_rates_match_population(outputs):
    rates = outputs.rates.set_index("borough")

    assert "NYC TOTAL" not in rates.index
    assert rates.loc["BRONX", "population"] == 1472654
    expected = rates.loc["BRONX", "incident_count"] * 100000 / 1472654
    assert rates.loc["BRONX", "rate_per_100k"] == pytest.approx(expected)
    assert outputs.join_mismatches["population"].right_only == ("NYC TOTAL",)


def test_pipeline_spatial_outputs(outputs):
    assert len(outputs.centroids) == 5
    assert outputs.choropleth["borough"].tolist() == outputs.rates["borough"].tolist()
    assert outputs.join_mismatches["polygons"].is_clean


def test_pipeline_classifier_partition(outputs):
    split = outputs.classifier.split
    assert len(split.train) + len(split.test) == len(outputs.daily_panel)
    assert outputs.classifier.confusion.total == len(split.test)


def test_pipeline_is_idempotent(sources, outputs):
    again = run_pipeline(sources, seed=42, train_fraction=0.7)

    pd.testing.assert_frame_equal(outputs.rates, again.rates)
    pd.testing.assert_frame_equal(outputs.daily_panel, again.daily_panel)
    assert outputs.classifier.confusion.as_dict() == again.classifier.confusion.as_dict()


def test_pipeline_resets_step_log(sources):
    run_pipeline(sources)
    first = len(pipeline_log)
    run_pipeline(sources)
    assert len(pipeline_log) == first


def test_export_outputs(outputs, tmp_path):
    written = export_outputs(outputs, tmp_path / "tables")

    names = {p.name for p in written}
    assert {"rates_per_100k.parquet", "daily_occurrence.parquet", "monthly_counts.parquet", "monthly_panel.parquet", "summary.json"} <= names

    summary = json.loads((tmp_path / "tables" / "summary.json").read_text())
    assert summary["cleaning"]["dropped_rows"] == 3
    assert summary["classifier"]["confusion"]["total"] == len(outputs.classifier.split.test)
    assert summary["classifier"]["converged"] is outputs.classifier.converged

    rates = pd.read_parquet(tmp_path / "tables" / "rates_per_100k.parquet")
    pd.testing.assert_frame_equal(rates, outputs.rates, check_dtype=False)


def test_render_figures(outputs, tmp_path):
    paths = render_figures(
        outputs.borough_counts,
        outputs.monthly_panel,
        to_gdf(outputs.incidents),
        outputs.polygons,
        outputs.choropleth,
        outputs.centroids,
        tmp_path / "figures",
    )

    assert set(paths) == {"borough_bar", "monthly_trend", "heatmap", "choropleth"}
    for path in paths.values():
        assert path.exists()
        assert path.stat().st_size > 0


def test_main_cli(sources, tmp_path):
    outputs = main([
        "--incidents", str(sources.incidents),
        "--boroughs", str(sources.boroughs),
        "--population", str(sources.population),
        "--output-dir", str(tmp_path / "out"),
        "--no-figures",
    ])

    assert (tmp_path / "out" / "summary.json").exists()
    assert len(outputs.rates) == 5


def test_export_keeps_sparse_and_dense_monthly_tables(outputs, tmp_path):
    export_outputs(outputs, tmp_path)

    sparse = pd.read_parquet(tmp_path / "monthly_counts.parquet")
    dense = pd.read_parquet(tmp_path / "monthly_panel.parquet")
    assert len(sparse) == len(outputs.monthly_counts)
    assert len(dense) == len(outputs.monthly_panel)
    assert sparse["incident_count"].sum() == outputs.cleaning.kept_rows


def test_borough_bar_labels_follow_bars(tmp_path, capsys):
    counts = pd.DataFrame({
        "borough": [None, "BRONX", "QUEENS"],
        "incident_count": [50, 12, 7],
    })

    with patch("nyc_incident_pipelines.visualize.figures._save", side_effect=lambda fig, path: fig) as save:
        fig = plot_borough_bar(counts, tmp_path / "bar.png")

    save.assert_called_once()
    ax = fig.axes[0]
    heights = [bar.get_height() for bar in ax.containers[0]]
    labels = [text.get_text() for text in ax.texts]
    assert heights == [12, 7]
    assert labels == ["12", "7"]
    assert "omits 50 incidents without a borough" in capsys.readouterr().out
