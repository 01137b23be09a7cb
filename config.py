from pathlib import Path

# Project Root
PROJECT_ROOT = Path(__file__).resolve().parent

# Data Directory
DATA_DIR = PROJECT_ROOT / "data"

RAW_DIR = DATA_DIR / "raw"
EXTERNAL_DIR = DATA_DIR / "external"

# Default local snapshots
INCIDENTS_CSV = RAW_DIR / "nypd_shooting_incidents.csv"
BOROUGHS_GEOJSON = EXTERNAL_DIR / "borough_boundaries.geojson"
POPULATION_CSV = EXTERNAL_DIR / "nyc_population_by_borough.csv"

# Public NYC Open Data feeds for the same snapshots
INCIDENTS_URL = "https://data.cityofnewyork.us/api/views/833y-fsy8/rows.csv?accessType=DOWNLOAD"
BOROUGHS_URL = "https://data.cityofnewyork.us/api/geospatial/tqmj-j8zm?method=export&format=GeoJSON"
POPULATION_URL = "https://data.cityofnewyork.us/api/views/xywu-7bv9/rows.csv?accessType=DOWNLOAD"

# Reports
REPORTS_DIR = PROJECT_ROOT / "reports"
FIGURES_DIR = REPORTS_DIR / "figures"
OUTPUT_DIR = REPORTS_DIR / "tables"

# Boroughs (canonical keys: uppercase, trimmed)
BOROUGHS = ["BRONX", "BROOKLYN", "MANHATTAN", "QUEENS", "STATEN ISLAND"]
REFERENCE_BOROUGH = "BRONX"

# Parsing
DATE_FORMAT = "%m/%d/%Y"
POPULATION_YEAR = "2020"

# Modeling
RANDOM_SEED = 42
TRAIN_FRACTION = 0.7
OCCURRENCE_THRESHOLD = 0.5

# Coordinate reference systems
WGS84 = "EPSG:4326"
NY_STATE_PLANE = "EPSG:2263"  # feet

# Rough NYC bounding box (lat, lon)
NYC_BOUNDS = {
    "lat_min": 40.47,
    "lat_max": 40.93,
    "lon_min": -74.27,
    "lon_max": -73.68,
}

RATE_BASE = 100_000
