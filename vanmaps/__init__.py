"""
vanmaps - Choropleth maps at the English county or ambulance service level.

This package classifies a numeric variable into quantile or user-defined
bins and draws it as a filled-region map over the shipped county and
ambulance service boundaries.

Contains National Statistics data: Crown copyright and database right 2016;
Contains OS data: Crown copyright and database right 2016.
"""

from .classify import ConfigurationError, compute_breaks, assign_bins
from .palettes import select_palette
from .geography import GeographyLevel, RegionDataset, attach_data
from .data import county_boundary_data, ambulance_boundary_data
from .choropleth import MapStyle, plot_map, save_maps
from .tools import figure_dimensions, polygon_patch

__version__ = "0.1.0"

__all__ = [
    # Map drawing
    "plot_map",
    "save_maps",
    "MapStyle",
    # Classification
    "compute_breaks",
    "assign_bins",
    "select_palette",
    "ConfigurationError",
    # Regions
    "GeographyLevel",
    "RegionDataset",
    "attach_data",
    # Shipped data
    "county_boundary_data",
    "ambulance_boundary_data",
    # Utility functions
    "figure_dimensions",
    "polygon_patch",
]
