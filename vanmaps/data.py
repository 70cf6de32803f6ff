"""
Boundary datasets shipped with vanmaps.

Contains National Statistics data: Crown copyright and database right 2016;
Contains OS data: Crown copyright and database right 2016.

county_boundary_data
    English counties (Upper Tier Local Authorities), 150 rows:

    - ``CNTY14``: ONS county/UTLA code
    - ``county``: county/UTLA name
    - ``in_london``: whether the county is a London Borough

    Derived from the ONS/OS 2011 LSOA boundaries and the ONS lookups from
    LSOA to Local Authority District to county. The City of London is merged
    into Westminster, and the Isles of Scilly into Cornwall.

ambulance_boundary_data
    English ambulance services, 11 rows:

    - ``service``: ambulance service short code (e.g. ``EMAS``)

    Derived from the ONS/OS 2011 LSOA boundaries, the ONS 2011 LSOA to 2016
    CCG lookup and NHS England's 2016 CCG to ambulance service lookup.

Both files are GeoJSON. They are read from ``$VANMAPS_DATA_DIR`` if that
variable is set, and otherwise from this package's ``data`` directory. Each
file is read at most once per process; callers receive copies.
"""

from __future__ import annotations

import functools
import logging
import os
from pathlib import Path

import geopandas as gpd

from vanmaps.geography import SUBSET_COLUMN, london_flags

logger = logging.getLogger(__name__)

DATA_DIR_ENV = 'VANMAPS_DATA_DIR'
COUNTY_BOUNDARIES_FILE = 'county_boundaries.geojson'
AMBULANCE_BOUNDARIES_FILE = 'ambulance_boundaries.geojson'


def data_dir() -> Path:
    """Directory the boundary files are read from."""
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override)
    return Path(__file__).parent / 'data'


@functools.lru_cache(maxsize=None)
def _read_boundaries(path: Path) -> gpd.GeoDataFrame:
    if not path.is_file():
        raise FileNotFoundError(
            f"Boundary file not found: {path} "
            f"(set {DATA_DIR_ENV} to the directory holding the boundary files)"
        )
    logger.debug("reading boundaries from %s", path)
    return gpd.read_file(path)


def county_boundary_data() -> gpd.GeoDataFrame:
    """English county (UTLA) boundaries with ``CNTY14``, ``county`` and ``in_london``."""
    gdf = _read_boundaries(data_dir() / COUNTY_BOUNDARIES_FILE).copy()
    gdf[SUBSET_COLUMN] = london_flags(gdf[SUBSET_COLUMN])
    return gdf


def ambulance_boundary_data() -> gpd.GeoDataFrame:
    """English ambulance service boundaries with a ``service`` code column."""
    return _read_boundaries(data_dir() / AMBULANCE_BOUNDARIES_FILE).copy()
