# Static report figures: borough bar chart, monthly trend, density heatmap, rate choropleth

from pathlib import Path
from typing import Dict

import numpy as np
import pandas as pd
import geopandas as gpd
import matplotlib.pyplot as plt
import seaborn as sns
from sklearn.neighbors import KernelDensity
from rich.console import Console

from config import NY_STATE_PLANE

console = Console()

sns.set(style="whitegrid")


def _save(fig, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    console.print(f"[dim cyan]  💾 Saved: {path.name}[/dim cyan]")
    return path


def plot_borough_bar(counts: pd.DataFrame, path: Path) -> Path:
    """Raw incident totals per borough."""
    data = counts.dropna(subset=["borough"]).sort_values("incident_count", ascending=False)
    unplaced = int(counts.loc[counts["borough"].isna(), "incident_count"].sum())
    if unplaced:
        console.print(f"[yellow]Bar chart omits {unplaced:,} incidents without a borough.[/yellow]")

    fig, ax = plt.subplots(figsize=(10, 6))
    sns.barplot(data=data, x="borough", y="incident_count", color="steelblue", ax=ax)

    ax.bar_label(ax.containers[0], labels=[f"{v:,}" for v in data["incident_count"]], fontweight="bold")

    ax.set_title("Incidents by borough")
    ax.set_xlabel("Borough")
    ax.set_ylabel("Number of incidents")
    return _save(fig, path)


def plot_monthly_trend(monthly: pd.DataFrame, path: Path) -> Path:
    """One line per borough over the year-month buckets."""
    fig, ax = plt.subplots(figsize=(14, 6))
    sns.lineplot(data=monthly, x="time_bucket", y="incident_count", hue="borough", marker="o", ax=ax)

    buckets = list(dict.fromkeys(monthly["time_bucket"]))
    step = max(len(buckets) // 24, 1)
    ax.set_xticks(range(0, len(buckets), step))
    ax.set_xticklabels(buckets[::step], rotation=45, ha="right")

    ax.set_title("Monthly incidents by borough")
    ax.set_xlabel("Month")
    ax.set_ylabel("Number of incidents")
    ax.legend(title="Borough")
    return _save(fig, path)


def plot_incident_heatmap(
    incidents: gpd.GeoDataFrame,
    polygons: gpd.GeoDataFrame,
    path: Path,
    bandwidth: float = 2000.0,
    grid_size: int = 200,
) -> Path:
    """Gaussian kernel density of incident points (feet, NY State Plane) with borough outlines."""
    points = incidents.to_crs(NY_STATE_PLANE)
    shapes = polygons.to_crs(NY_STATE_PLANE)

    xmin, ymin, xmax, ymax = shapes.total_bounds
    fig, ax = plt.subplots(figsize=(12, 12))

    if len(points) > 0:
        coords = np.vstack([points.geometry.x, points.geometry.y]).T
        kde = KernelDensity(bandwidth=bandwidth, kernel="gaussian").fit(coords)

        xx, yy = np.mgrid[xmin:xmax:complex(grid_size), ymin:ymax:complex(grid_size)]
        grid_points = np.vstack([xx.ravel(), yy.ravel()]).T
        z = np.exp(kde.score_samples(grid_points)).reshape(xx.shape)

        im = ax.imshow(
            z.T,
            extent=[xmin, xmax, ymin, ymax],
            origin="lower",
            cmap="hot_r",
            alpha=0.8,
        )
        plt.colorbar(im, ax=ax, label="Incident density", shrink=0.7)

    shapes.boundary.plot(ax=ax, edgecolor="black", linewidth=1.2)
    ax.set_title("Incident density")
    ax.axis("off")
    return _save(fig, path)


def plot_rate_choropleth(choropleth: gpd.GeoDataFrame, centroids: gpd.GeoDataFrame, path: Path) -> Path:
    """Boroughs shaded by rate per 100k residents, labelled at their centroids."""
    fig, ax = plt.subplots(figsize=(12, 12))
    choropleth.plot(
        column="rate_per_100k",
        cmap="Reds",
        legend=True,
        edgecolor="black",
        linewidth=1.5,
        ax=ax,
        legend_kwds={"label": "Incidents per 100k residents", "shrink": 0.7},
    )

    rates = choropleth.set_index("borough")["rate_per_100k"]
    for _, row in centroids.iterrows():
        if row["borough"] not in rates.index:
            continue
        ax.text(
            row.geometry.x,
            row.geometry.y,
            f"{row['borough'].title()}\n({rates[row['borough']]:.1f})",
            fontsize=9,
            ha="center",
            fontweight="bold",
            bbox=dict(boxstyle="round", facecolor="white", alpha=0.7),
        )

    ax.set_title("Incidents per 100k residents by borough")
    ax.axis("off")
    return _save(fig, path)


def render_figures(
    borough_counts: pd.DataFrame,
    monthly_panel: pd.DataFrame,
    incident_points: gpd.GeoDataFrame,
    polygons: gpd.GeoDataFrame,
    choropleth: gpd.GeoDataFrame,
    centroids: gpd.GeoDataFrame,
    out_dir: Path,
) -> Dict[str, Path]:
    """Write the four report figures into out_dir."""
    out_dir = Path(out_dir)
    return {
        "borough_bar": plot_borough_bar(borough_counts, out_dir / "01_incidents_by_borough.png"),
        "monthly_trend": plot_monthly_trend(monthly_panel, out_dir / "02_monthly_trend.png"),
        "heatmap": plot_incident_heatmap(incident_points, polygons, out_dir / "03_incident_density.png"),
        "choropleth": plot_rate_choropleth(choropleth, centroids, out_dir / "04_rate_choropleth.png"),
    }


__all__ = [
    "plot_borough_bar",
    "plot_monthly_trend",
    "plot_incident_heatmap",
    "plot_rate_choropleth",
    "render_figures",
]
