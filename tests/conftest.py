"""Shared fixtures: small synthetic county and ambulance service maps."""
import matplotlib

matplotlib.use("Agg")

import geopandas as gpd
import matplotlib.pyplot as plt
import numpy as np
import pytest
from shapely.geometry import box

SERVICES = ["EMAS", "EEAST", "IOW", "LAS", "NEAS", "NWAS", "SCAS", "SECAMB", "SWAS", "WMAS", "YAS"]


def _grid(n_cols, n_rows, size=1000.0):
    return [
        box(col * size, row * size, (col + 1) * size, (row + 1) * size)
        for row in range(n_rows)
        for col in range(n_cols)
    ]


@pytest.fixture
def county_gdf():
    """150 square counties on a 15 x 10 grid; the bottom-left 6 x 3 block is London."""
    geoms = _grid(15, 10)
    rng = np.random.default_rng(42)
    in_london = [(i % 15) < 6 and (i // 15) < 3 for i in range(150)]
    return gpd.GeoDataFrame(
        {
            "CNTY14": [f"E{i:08d}" for i in range(150)],
            "county": [f"County {i:03d}" for i in range(150)],
            "in_london": in_london,
            "deaths": rng.normal(30, 8, 150).round(),
        },
        geometry=geoms,
        crs="EPSG:27700",
    )


@pytest.fixture
def service_gdf():
    """11 ambulance services laid out in a single row."""
    return gpd.GeoDataFrame(
        {
            "service": SERVICES,
            "hoaxes": [58, 60, 62, 64, 66, 68, 70, 72, 75, 78, 82],
        },
        geometry=_grid(11, 1, size=13636.0),
        crs="EPSG:27700",
    )


@pytest.fixture
def overlay_gdf():
    """Service outlines covering the county grid."""
    return gpd.GeoDataFrame(
        {"service": ["NORTH", "SOUTH"]},
        geometry=[box(0, 5000, 15000, 10000), box(0, 0, 15000, 5000)],
        crs="EPSG:27700",
    )


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")
