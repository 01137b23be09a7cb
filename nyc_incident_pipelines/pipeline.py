# End-to-end incident report pipeline with Rich console output
# To run: python -m nyc_incident_pipelines.pipeline --help

import argparse
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
import geopandas as gpd
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

from config import (
    DATE_FORMAT,
    FIGURES_DIR,
    OUTPUT_DIR,
    POPULATION_YEAR,
    RANDOM_SEED,
    REFERENCE_BOROUGH,
    TRAIN_FRACTION,
)
from nyc_incident_pipelines.ingestion.ingestion_master import IncidentSources, run_ingestion
from nyc_incident_pipelines.models.occurrence import OccurrenceModelResult, run_occurrence_classifier
from nyc_incident_pipelines.transform.aggregation import count_by_borough, count_by_time_bucket
from nyc_incident_pipelines.transform.cleaning import CleaningReport, clean_incidents
from nyc_incident_pipelines.transform.normalization import JoinMismatch, compute_rates, find_join_mismatches
from nyc_incident_pipelines.transform.panel_builder import build_daily_occurrence, build_monthly_panel
from nyc_incident_pipelines.transform.spatial import attach_rates, compute_centroids, to_gdf
from nyc_incident_pipelines.utils.logging import clear_pipeline_log, show_pipeline_table
from nyc_incident_pipelines.validate.core import run_validation_checks
from nyc_incident_pipelines.validate.panel_checks import validate_daily_panel, validate_rates
from nyc_incident_pipelines.visualize.figures import render_figures

console = Console()


@dataclass(frozen=True, eq=False)
class PipelineOutputs:
    cleaning: CleaningReport
    incidents: pd.DataFrame
    polygons: gpd.GeoDataFrame
    borough_counts: pd.DataFrame
    monthly_counts: pd.DataFrame
    monthly_panel: pd.DataFrame
    rates: pd.DataFrame
    centroids: gpd.GeoDataFrame
    choropleth: gpd.GeoDataFrame
    daily_panel: pd.DataFrame
    classifier: OccurrenceModelResult
    join_mismatches: Dict[str, JoinMismatch] = field(default_factory=dict)


def run_pipeline(
    sources: IncidentSources = IncidentSources(),
    seed: int = RANDOM_SEED,
    train_fraction: float = TRAIN_FRACTION,
    population_year: str = POPULATION_YEAR,
    reference: str = REFERENCE_BOROUGH,
    date_format: str = DATE_FORMAT,
) -> PipelineOutputs:
    """
    Single batch pass:
    load → clean → aggregate → normalize → enrich, and daily panel → classifier.
    Writes nothing.
    """
    clear_pipeline_log()

    ingested = run_ingestion(sources, population_year=population_year, date_format=date_format)
    polygons = ingested["boroughs"]
    population = ingested["population"]

    incidents, report = clean_incidents(ingested["incidents"])
    run_validation_checks(incidents, "After cleaning")

    borough_counts = count_by_borough(incidents)
    monthly_counts = count_by_time_bucket(incidents)
    monthly_panel = build_monthly_panel(monthly_counts)

    rates = compute_rates(borough_counts, population)
    validate_rates(rates)

    centroids = compute_centroids(polygons)
    choropleth = attach_rates(polygons, rates)

    daily_panel = build_daily_occurrence(incidents)
    validate_daily_panel(daily_panel)

    classifier = run_occurrence_classifier(
        daily_panel, train_fraction=train_fraction, seed=seed, reference=reference
    )

    return PipelineOutputs(
        cleaning=report,
        incidents=incidents,
        polygons=polygons,
        borough_counts=borough_counts,
        monthly_counts=monthly_counts,
        monthly_panel=monthly_panel,
        rates=rates,
        centroids=centroids,
        choropleth=choropleth,
        daily_panel=daily_panel,
        classifier=classifier,
        join_mismatches={
            "population": find_join_mismatches(borough_counts, population),
            "polygons": find_join_mismatches(polygons, rates),
        },
    )


def summary_dict(outputs: PipelineOutputs) -> dict:
    """JSON-safe run summary: row accounting, join mismatches, confusion matrix."""
    report = outputs.cleaning
    return {
        "cleaning": {
            "total_rows": report.total_rows,
            "kept_rows": report.kept_rows,
            "dropped_rows": report.dropped_rows,
            "missing_date": report.missing_date,
            "missing_coordinates": report.missing_coordinates,
            "malformed_dates": report.malformed_dates,
            "malformed_coordinates": report.malformed_coordinates,
        },
        "join_mismatches": {
            name: {"left_only": list(m.left_only), "right_only": list(m.right_only)}
            for name, m in outputs.join_mismatches.items()
        },
        "classifier": {
            "reference": outputs.classifier.reference,
            "converged": outputs.classifier.converged,
            "train_rows": len(outputs.classifier.split.train),
            "test_rows": len(outputs.classifier.split.test),
            "confusion": outputs.classifier.confusion.as_dict(),
        },
    }


def export_outputs(outputs: PipelineOutputs, out_dir: Path = OUTPUT_DIR) -> List[Path]:
    """Write the output tables (parquet) and the run summary (JSON)."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    tables = {
        "borough_counts": outputs.borough_counts,
        "monthly_counts": outputs.monthly_counts,
        "monthly_panel": outputs.monthly_panel,
        "rates_per_100k": outputs.rates,
        "daily_occurrence": outputs.daily_panel,
        "model_coefficients": outputs.classifier.coefficients,
    }
    written = []
    for name, df in tables.items():
        path = out_dir / f"{name}.parquet"
        df.to_parquet(path, index=False)
        written.append(path)

    for name, gdf in {"choropleth": outputs.choropleth, "centroids": outputs.centroids}.items():
        path = out_dir / f"{name}.parquet"
        gdf.to_parquet(path, index=False)
        written.append(path)

    summary_path = out_dir / "summary.json"
    summary_path.write_text(json.dumps(summary_dict(outputs), indent=2, sort_keys=True))
    written.append(summary_path)

    console.print(f"[green]Wrote {len(written)} files → {out_dir}[/green]")
    return written


def create_rates_table(rates: pd.DataFrame) -> Table:
    table = Table(title="📊 Incidents per 100k residents", box=box.ROUNDED, header_style="bold magenta")
    table.add_column("Borough", style="cyan", no_wrap=True)
    table.add_column("Incidents", justify="right", style="green")
    table.add_column("Population", justify="right", style="yellow")
    table.add_column("Rate / 100k", justify="right", style="bold")
    for row in rates.sort_values("rate_per_100k", ascending=False).itertuples():
        table.add_row(row.borough, f"{row.incident_count:,}", f"{row.population:,}", f"{row.rate_per_100k:.2f}")
    return table


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build borough-level incident rates, figures and the daily occurrence model."
    )
    defaults = IncidentSources()
    parser.add_argument("--incidents", default=str(defaults.incidents), help="Incident CSV path or URL")
    parser.add_argument("--boroughs", default=str(defaults.boroughs), help="Borough boundary file path or URL")
    parser.add_argument("--population", default=str(defaults.population), help="Population CSV path or URL")
    parser.add_argument("--population-year", default=POPULATION_YEAR)
    parser.add_argument("--seed", type=int, default=RANDOM_SEED)
    parser.add_argument("--train-fraction", type=float, default=TRAIN_FRACTION)
    parser.add_argument("--output-dir", type=Path, default=OUTPUT_DIR)
    parser.add_argument("--figures-dir", type=Path, default=FIGURES_DIR)
    parser.add_argument("--no-figures", action="store_true", help="Skip figure rendering")
    return parser


def main(argv: Optional[List[str]] = None) -> PipelineOutputs:
    args = build_parser().parse_args(argv)
    sources = IncidentSources(incidents=args.incidents, boroughs=args.boroughs, population=args.population)

    console.print(Panel("[bold cyan]NYC INCIDENT REPORT PIPELINE[/bold cyan]\n"
                        "Load → Clean → Aggregate → Normalize → Enrich → Classify",
                        border_style="bright_cyan", expand=False))
    try:
        with console.status("[bold yellow]Running pipeline...", spinner="dots"):
            outputs = run_pipeline(
                sources,
                seed=args.seed,
                train_fraction=args.train_fraction,
                population_year=args.population_year,
            )

        export_outputs(outputs, args.output_dir)

        if not args.no_figures:
            render_figures(
                outputs.borough_counts,
                outputs.monthly_panel,
                to_gdf(outputs.incidents),
                outputs.polygons,
                outputs.choropleth,
                outputs.centroids,
                args.figures_dir,
            )
    except Exception as e:
        console.print(Panel(f"[bold red] PIPELINE FAILED [/bold red]\n\n[red]Error:[/red] {str(e)}",
                            border_style="bright_red", title="[bold red]Error[/bold red]", expand=False))
        raise

    console.print(create_rates_table(outputs.rates))
    show_pipeline_table()
    console.print(Panel("[bold green] PIPELINE COMPLETED SUCCESSFULLY [/bold green]",
                        border_style="bright_green", expand=False))
    return outputs


if __name__ == "__main__":
    main()
