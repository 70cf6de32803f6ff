"""
Drawing helpers shared by the choropleth renderer.

This module provides helper functions for:
- Converting shapely geometries to matplotlib patches
- Drawing a column of geometries onto an axes in one pass
- Computing map bounds and canvas sizes from geometry extents
- Laying out a figure so the map fills everything below the title
"""

from __future__ import annotations

from typing import Any, Sequence, Union
import numpy as np
from matplotlib.figure import Figure
from matplotlib.axes import Axes
from matplotlib.path import Path
from matplotlib.patches import PathPatch
from shapely.geometry import Polygon, MultiPolygon
import geopandas as gpd

# margins are measured in text lines of 0.2 inches
LINE_HEIGHT_INCHES = 0.2


def polygon_patch(
    polygon: Union[Polygon, MultiPolygon],
    **kwargs: Any
) -> PathPatch:
    """
    Create a matplotlib PathPatch from a shapely Polygon or MultiPolygon.

    Interior rings are kept as separate closed sub-paths, so holes (for
    example an enclave county) are left unfilled.

    Parameters
    ----------
    polygon : shapely.geometry.Polygon or shapely.geometry.MultiPolygon
        The geometry to convert.
    **kwargs : dict
        Passed on to matplotlib.patches.PathPatch
        (e.g., facecolor, edgecolor, linewidth).

    Returns
    -------
    matplotlib.patches.PathPatch

    Raises
    ------
    TypeError
        If polygon is not a Polygon or MultiPolygon.
    """
    if isinstance(polygon, MultiPolygon):
        parts = list(polygon.geoms)
    elif isinstance(polygon, Polygon):
        parts = [polygon]
    else:
        raise TypeError(f"Expected Polygon or MultiPolygon, got {type(polygon)}")

    vertices = []
    codes = []
    for part in parts:
        for ring in [part.exterior, *part.interiors]:
            coords = list(ring.coords)
            if len(coords) < 3:
                continue
            vertices.extend(coords)
            codes.append(Path.MOVETO)
            codes.extend([Path.LINETO] * (len(coords) - 2))
            codes.append(Path.CLOSEPOLY)

    return PathPatch(Path(vertices, codes), **kwargs)


def draw_geometries(
    ax: Axes,
    geometries: Sequence[Union[Polygon, MultiPolygon]],
    facecolors: Union[str, Sequence[str]],
    edgecolor: str,
    linewidth: float,
) -> list[PathPatch]:
    """
    Add one patch per geometry to an axes.

    Parameters
    ----------
    ax : matplotlib.axes.Axes
        Axes to draw on.
    geometries : sequence of Polygon or MultiPolygon
        Geometries to draw. Empty and missing geometries are skipped.
    facecolors : color-like or sequence of color-like
        A single fill for every geometry, or one fill per geometry.
        Use 'none' for outlines only.
    edgecolor : color-like
        Border colour shared by all geometries.
    linewidth : float
        Border width in points.

    Returns
    -------
    list of matplotlib.patches.PathPatch
        The patches that were added, in input order.
    """
    if isinstance(facecolors, str):
        facecolors = [facecolors] * len(geometries)

    patches = []
    for geom, fc in zip(geometries, facecolors):
        if geom is None or geom.is_empty:
            continue
        patch = polygon_patch(geom,
                              facecolor=fc,
                              edgecolor=edgecolor,
                              lw=linewidth,
                              )
        ax.add_patch(patch)
        patches.append(patch)
    return patches


def get_bounds(gdf: gpd.GeoDataFrame) -> tuple[tuple[float, float], tuple[float, float]]:
    """
    Return the x and y limits of all geometries in a GeoDataFrame.

    Returns
    -------
    x_, y_ : tuple of float
        (xmin, xmax) and (ymin, ymax).

    Raises
    ------
    ValueError
        If the frame has no non-empty geometry.
    """
    xmin, ymin, xmax, ymax = gdf.total_bounds
    if not np.all(np.isfinite([xmin, ymin, xmax, ymax])):
        raise ValueError("Cannot compute bounds of an empty geometry collection")
    return (xmin, xmax), (ymin, ymax)


def figure_dimensions(
    gdf: gpd.GeoDataFrame,
    width: int,
    top_margin_lines: float = 1.5,
    dpi: int = 100,
) -> tuple[int, int]:
    """
    Compute canvas size in pixels for a map of the given geometry.

    The map area keeps the aspect ratio of the geometry's bounding box and
    spans the full requested width. A title margin of
    ``top_margin_lines`` text lines is added on top.

    Parameters
    ----------
    gdf : geopandas.GeoDataFrame
        Geometry that will fill the map area.
    width : int
        Requested canvas width in pixels.
    top_margin_lines : float, optional
        Height of the title band in text lines (default: 1.5).
    dpi : int, optional
        Resolution used to convert lines to pixels (default: 100).

    Returns
    -------
    width, height : int
        Canvas size in pixels.
    """
    width = int(width)
    if width <= 0:
        raise ValueError(f"Figure width must be positive, got {width}")

    x_, y_ = get_bounds(gdf)
    dx = x_[1] - x_[0]
    dy = y_[1] - y_[0]
    if dx <= 0 or dy <= 0:
        raise ValueError("Geometry has a degenerate bounding box")

    top_margin = top_margin_lines * LINE_HEIGHT_INCHES * dpi
    height = int(round(width * dy / dx + top_margin))
    return width, height


def layout_map_axes(
    ax: Axes,
    x_: tuple[float, float],
    y_: tuple[float, float],
    fig: Figure | None = None,
    top_margin_lines: float = 1.5,
) -> None:
    """
    Frame a map on its axes.

    Hides ticks and spines, fixes an equal aspect ratio and limits the
    axes to the given extent. If ``fig`` is given, the axes are also
    stretched to fill the figure below a title band of
    ``top_margin_lines`` text lines.
    """
    ax.set_axis_off()
    ax.set_aspect('equal')
    ax.set_xlim(x_)
    ax.set_ylim(y_)
    if fig is not None:
        height_inches = fig.get_size_inches()[1]
        top = 1. - top_margin_lines * LINE_HEIGHT_INCHES / height_inches
        fig.subplots_adjust(top=max(top, 0.5), bottom=0, right=1, left=0)
