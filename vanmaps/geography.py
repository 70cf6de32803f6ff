"""
Region datasets and their geographic granularity.

A RegionDataset pairs a GeoDataFrame with the GeographyLevel it is drawn at.
The level is decided once, when the dataset is built, and every later step
reads it from there.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import geopandas as gpd
import pandas as pd

COUNTY_COLUMN = 'county'
SERVICE_COLUMN = 'service'
SUBSET_COLUMN = 'in_london'


def london_flags(flags: pd.Series) -> pd.Series:
    """
    Boolean mask of the rows flagged as London.

    True (or 1, as a boolean field with gaps may be read) counts; missing
    values, other numbers and strings such as ``"FALSE"`` are read as not
    in London.
    """
    mask = flags.apply(lambda v: not isinstance(v, str) and v is not pd.NA and v == 1)
    return mask.astype(bool)


class GeographyLevel(Enum):
    """Granularity of a region dataset."""

    COUNTY = (COUNTY_COLUMN, 'counties')
    SERVICE_AREA = (SERVICE_COLUMN, 'services')

    def __init__(self, id_column: str, file_stem: str) -> None:
        self.id_column = id_column
        self.file_stem = file_stem

    @property
    def has_subset(self) -> bool:
        """Whether an in-London view exists at this level."""
        return self is GeographyLevel.COUNTY

    @classmethod
    def infer(cls, gdf: pd.DataFrame) -> 'GeographyLevel':
        """County level if the frame has a ``county`` column, service level otherwise."""
        if COUNTY_COLUMN in gdf.columns:
            return cls.COUNTY
        return cls.SERVICE_AREA


@dataclass(frozen=True, eq=False)
class RegionDataset:
    """
    Regions to be drawn, together with their granularity.

    Use :meth:`from_geodataframe` rather than the constructor; it checks
    the frame before wrapping it.

    Attributes
    ----------
    gdf : geopandas.GeoDataFrame
        Region geometries and their data columns.
    level : GeographyLevel
        Granularity the regions are drawn at.
    """
    gdf: gpd.GeoDataFrame
    level: GeographyLevel

    @classmethod
    def from_geodataframe(
        cls,
        gdf: gpd.GeoDataFrame,
        level: Optional[GeographyLevel] = None,
    ) -> 'RegionDataset':
        """
        Wrap a GeoDataFrame, inferring its level if none is given.

        Raises
        ------
        ValueError
            If the identifier column is missing or not unique, or if
            county data lacks the ``in_london`` flag.
        """
        if level is None:
            level = GeographyLevel.infer(gdf)

        if level.id_column not in gdf.columns:
            raise ValueError(f"{level.name} data needs a '{level.id_column}' column")

        ids = gdf[level.id_column]
        if ids.duplicated().any():
            dupes = sorted(ids[ids.duplicated()].astype(str).unique())
            raise ValueError(f"Duplicate {level.id_column} identifiers: {', '.join(dupes)}")

        if level.has_subset and SUBSET_COLUMN not in gdf.columns:
            raise ValueError(f"County data needs a boolean '{SUBSET_COLUMN}' column")

        return cls(gdf, level)

    @property
    def ids(self) -> pd.Series:
        return self.gdf[self.level.id_column]

    def subset(self) -> gpd.GeoDataFrame:
        """Rows flagged ``in_london``."""
        if not self.level.has_subset:
            raise ValueError(f"{self.level.name} data has no London subset")
        return self.gdf[london_flags(self.gdf[SUBSET_COLUMN])]


def as_region_dataset(data: Union[RegionDataset, gpd.GeoDataFrame]) -> RegionDataset:
    if isinstance(data, RegionDataset):
        return data
    return RegionDataset.from_geodataframe(data)


def attach_data(
    boundaries: gpd.GeoDataFrame,
    df: pd.DataFrame,
    by: Optional[str] = None,
) -> gpd.GeoDataFrame:
    """
    Join a table of values onto boundary geometries.

    Only regions present in both inputs are kept.

    Parameters
    ----------
    boundaries : geopandas.GeoDataFrame
        Boundary data, e.g. from :func:`vanmaps.data.county_boundary_data`.
    df : pandas.DataFrame
        Values keyed by region identifier.
    by : str, optional
        Join column. Defaults to the identifier column of the boundaries'
        geography level (``county`` or ``service``).

    Returns
    -------
    geopandas.GeoDataFrame

    Examples
    --------
    >>> counties = county_boundary_data()
    >>> deaths = pd.DataFrame({'county': counties.county, 'deaths': 30})
    >>> county_data = attach_data(counties, deaths)
    """
    if by is None:
        by = GeographyLevel.infer(boundaries).id_column
    if by not in df.columns:
        raise ValueError(f"Cannot join on '{by}': column missing from the data")
    return boundaries.merge(df, on=by, how='inner')
