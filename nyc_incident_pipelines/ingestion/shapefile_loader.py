# Loading borough boundary polygons

from pathlib import Path
from typing import Union
import geopandas as gpd
from rich.console import Console

from config import WGS84
from nyc_incident_pipelines.errors import SourceUnavailableError
from nyc_incident_pipelines.transform.cleaning import normalize_borough_key, standardize_column_name

console = Console()

NAME_CANDIDATES = ["boro_name", "boroname", "borough", "boro_nm", "name"]


def load_shapefile(path: Union[str, Path], target_crs: str = WGS84) -> gpd.GeoDataFrame:
    """Load any vector file geopandas can read + enforce CRS."""
    if isinstance(path, Path) and not path.exists():
        raise SourceUnavailableError("boroughs", path, "file not found")

    console.print(f"[cyan]Loading boundaries:[/cyan] {path}")

    try:
        gdf = gpd.read_file(path)
    except Exception as exc:
        console.print(f"[bold red]Could not load boundaries:[/bold red] {path}")
        raise SourceUnavailableError("boroughs", path, str(exc)) from exc

    if gdf.crs is None:
        gdf = gdf.set_crs(WGS84)

    return gdf.to_crs(target_crs)


def load_borough_polygons(path: Union[str, Path]) -> gpd.GeoDataFrame:
    """One polygon row per borough: columns borough, geometry (EPSG:4326)."""
    gdf = load_shapefile(path)
    columns = {standardize_column_name(c): c for c in gdf.columns if c != gdf.geometry.name}

    name_key = next((c for c in NAME_CANDIDATES if c in columns), None)
    if name_key is None:
        raise SourceUnavailableError("boroughs", path, f"no borough name column in {list(gdf.columns)}")

    polygons = gpd.GeoDataFrame(
        {"borough": normalize_borough_key(gdf[columns[name_key]])},
        geometry=gdf.geometry.values,
        crs=gdf.crs,
    )
    polygons = polygons.dropna(subset=["borough"])

    # Multi-part boroughs delivered as several rows are merged into one shape
    if polygons["borough"].duplicated().any():
        polygons = polygons.dissolve(by="borough", as_index=False)

    return polygons.sort_values("borough").reset_index(drop=True)


__all__ = ["load_shapefile", "load_borough_polygons"]
