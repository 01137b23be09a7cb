from .incident_loader import load_incidents
from .shapefile_loader import load_borough_polygons
from .population_loader import load_population
from .ingestion_master import IncidentSources, run_ingestion

__all__ = [
    "load_incidents",
    "load_borough_polygons",
    "load_population",
    "IncidentSources",
    "run_ingestion",
]
