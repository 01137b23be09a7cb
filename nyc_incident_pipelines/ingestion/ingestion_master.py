# nyc_incident_pipelines/ingestion/ingestion_master.py
from dataclasses import dataclass
from pathlib import Path
from typing import Union
from rich.console import Console

from config import BOROUGHS_GEOJSON, INCIDENTS_CSV, POPULATION_CSV, POPULATION_YEAR, DATE_FORMAT
from .incident_loader import load_incidents
from .population_loader import load_population
from .shapefile_loader import load_borough_polygons

console = Console()


@dataclass(frozen=True)
class IncidentSources:
    """Locations (paths or URLs) of the three input feeds."""

    incidents: Union[str, Path] = INCIDENTS_CSV
    boroughs: Union[str, Path] = BOROUGHS_GEOJSON
    population: Union[str, Path] = POPULATION_CSV


def run_ingestion(
    sources: IncidentSources = IncidentSources(),
    population_year: str = POPULATION_YEAR,
    date_format: str = DATE_FORMAT,
) -> dict:
    console.print("\n[bold cyan]=== INGESTION START ===[/bold cyan]\n")

    incidents = load_incidents(sources.incidents, date_format=date_format)
    polygons = load_borough_polygons(sources.boroughs)
    population = load_population(sources.population, year=population_year)

    console.print("\n[green]✓ Ingestion completed successfully.[/green]\n")

    return {
        "incidents": incidents,
        "boroughs": polygons,
        "population": population,
    }


__all__ = ["IncidentSources", "run_ingestion"]
