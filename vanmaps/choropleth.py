"""
Choropleth maps at the English county or ambulance service level.

plot_map draws one map onto a matplotlib axes. save_maps writes every view
of a dataset to PNG files: England, plus London for county data.

Both accept either a GeoDataFrame or a RegionDataset. A plain GeoDataFrame
is drawn at county level if it has a ``county`` column and at ambulance
service level otherwise.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np
import geopandas as gpd
import matplotlib.pyplot as pl
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.patches import Patch, Rectangle
from numpy.typing import NDArray

from vanmaps.classify import assign_bins, compute_breaks
from vanmaps.data import ambulance_boundary_data
from vanmaps.geography import GeographyLevel, RegionDataset, as_region_dataset
from vanmaps.palettes import (
    BLACK,
    COUNTY_BORDER,
    NO_DATA_GREY,
    WHITE,
    select_palette,
)
from vanmaps.tools import (
    draw_geometries,
    figure_dimensions,
    get_bounds,
    layout_map_axes,
)

logger = logging.getLogger(__name__)

SAVE_COMPLETE = "Save complete."
TOP_MARGIN_LINES = 1.5
NO_DATA_LABEL = "no data"


@dataclass(frozen=True)
class MapStyle:
    """
    Options for drawing one choropleth map.

    Parameters
    ----------
    variable : str
        Column whose values colour the regions; also the legend title.
    title : str
        Title drawn above the map.
    qtiles : int, optional
        Number of quantile bins (default: 5). Ignored if ``breaks`` is set.
    breaks : sequence of float, optional
        Explicit, ordered bin edges; ``n`` bins need ``n + 1`` edges.
    london_only : bool, optional
        County level only: draw just the London boroughs (default: False).
    greyscale : bool, optional
        Draw in shades of grey (default: False). At most 9 bins are
        allowed in greyscale and 11 in colour.
    sources : str, optional
        Source attribution written in the bottom left corner.
    author : str, optional
        Author text written in the bottom right corner.
    """
    variable: str
    title: str
    qtiles: int = 5
    breaks: Optional[Sequence[float]] = None
    london_only: bool = False
    greyscale: bool = False
    sources: str = ""
    author: str = ""

    def classify(self, values) -> tuple[NDArray[np.floating], list[str], str]:
        """Bin edges, bin colours and background colour for ``values``."""
        edges = compute_breaks(values, self.qtiles, self.breaks, self.greyscale)
        palette, background = select_palette(len(edges) - 1, self.greyscale)
        return edges, palette, background


def _variable_values(gdf: gpd.GeoDataFrame, variable: str) -> NDArray[np.floating]:
    return gdf[variable].astype(float).to_numpy()


def _fill_colours(bins: NDArray[np.integer], palette: list[str], na_colour: str) -> list[str]:
    return [palette[b] if b >= 0 else na_colour for b in bins]


def _format_edge(x: float) -> str:
    # legend values rounded to 2 dp, trailing zeros dropped
    return f"{float(x):.2f}".rstrip('0').rstrip('.')


def _add_legend(
    ax: Axes,
    style: MapStyle,
    edges: NDArray[np.floating],
    palette: list[str],
    border: str,
    na_colour: Optional[str],
) -> None:
    handles = []
    labels = []
    # highest bin first
    for i in reversed(range(len(palette))):
        handles.append(Patch(facecolor=palette[i], edgecolor=border, lw=0.25))
        labels.append(f"{_format_edge(edges[i])} - {_format_edge(edges[i+1])}")
    if na_colour is not None:
        handles.append(Patch(facecolor=na_colour, edgecolor=border, lw=0.25))
        labels.append(NO_DATA_LABEL)

    ax.legend(handles,
              labels,
              title=style.variable,
              loc='upper right',
              frameon=False,
              fontsize='small',
              )


def _add_layout(ax: Axes, style: MapStyle) -> None:
    ax.set_title(style.title, color='black')
    if style.sources:
        ax.text(0.01, 0.01, style.sources,
                transform=ax.transAxes, ha='left', va='bottom', fontsize='x-small')
    if style.author:
        ax.text(0.99, 0.01, style.author,
                transform=ax.transAxes, ha='right', va='bottom', fontsize='x-small')


def _render(
    ax: Axes,
    dataset: RegionDataset,
    style: MapStyle,
    edges: NDArray[np.floating],
    palette: list[str],
    background: str,
    overlay: Optional[gpd.GeoDataFrame],
    fig: Optional[Figure] = None,
) -> None:
    """Draw one view of ``dataset`` onto ``ax``; ``fig`` is laid out too if given."""
    gdf = dataset.gdf
    county_level = dataset.level is GeographyLevel.COUNTY
    london_only = style.london_only and county_level

    if fig is not None:
        fig.set_facecolor(background)
    # background patch
    ax.add_patch(Rectangle((0, 0), 1, 1,
                           transform=ax.transAxes,
                           facecolor=background,
                           edgecolor='none',
                           zorder=0,
                           ))

    if county_level and not london_only:
        # England
        extent = gdf
        border, lw, na_colour = COUNTY_BORDER, 0.25, NO_DATA_GREY
        drawn = gdf
    elif county_level:
        # London, on top of every county blanked out in the background colour
        extent = dataset.subset()
        border, lw, na_colour = BLACK, 0.25, background
        draw_geometries(ax, gdf.geometry.to_list(), background, BLACK, 0.25)
        drawn = extent
    else:
        # ambulance service
        extent = gdf
        border, lw, na_colour = WHITE, 1., background
        drawn = gdf

    bins = assign_bins(_variable_values(drawn, style.variable), edges)
    fills = _fill_colours(bins, palette, na_colour)
    draw_geometries(ax, drawn.geometry.to_list(), fills, border, lw)

    if county_level and overlay is not None:
        draw_geometries(ax, overlay.geometry.to_list(), 'none', WHITE, 1.)

    has_missing = bool(np.any(bins < 0))
    _add_legend(ax, style, edges, palette, border, na_colour if has_missing else None)
    _add_layout(ax, style)

    x_, y_ = get_bounds(extent)
    layout_map_axes(ax, x_, y_, fig=fig, top_margin_lines=TOP_MARGIN_LINES)


def _resolve_overlay(
    dataset: RegionDataset,
    overlay: Optional[gpd.GeoDataFrame],
    show_overlay: bool,
) -> Optional[gpd.GeoDataFrame]:
    if not show_overlay or dataset.level is not GeographyLevel.COUNTY:
        return None
    if overlay is None:
        try:
            overlay = ambulance_boundary_data()
        except FileNotFoundError as exc:
            raise FileNotFoundError(
                f"{exc}. Pass overlay= or show_overlay=False to draw county maps "
                "without the shipped ambulance service outlines."
            ) from exc
    return overlay


def plot_map(
    data: Union[RegionDataset, gpd.GeoDataFrame],
    variable: str,
    title: str,
    qtiles: int = 5,
    breaks: Optional[Sequence[float]] = None,
    london_only: bool = False,
    greyscale: bool = False,
    ax: Optional[Axes] = None,
    overlay: Optional[gpd.GeoDataFrame] = None,
    show_overlay: bool = True,
    sources: str = "",
    author: str = "",
):
    """
    Plot a choropleth map.

    Parameters
    ----------
    data : geopandas.GeoDataFrame or RegionDataset
        Regions with the variable to map. The map is at county level if
        there is a ``county`` column and at the level of the given geography
        otherwise.
    variable : str
        Column the map is themed on.
    title : str
        Title to display on the map.
    qtiles : int, optional
        Number of quantiles to split ``variable`` into (default: 5).
        Ignored if ``breaks`` is specified.
    breaks : sequence of float, optional
        Ordered breaks to split ``variable`` on; ``n`` splits need
        ``n + 1`` breaks. A sequence containing a missing value is ignored.
    london_only : bool, optional
        County level only (otherwise ignored): show only the London
        counties (default: False).
    greyscale : bool, optional
        Draw in greyscale (default: False).
    ax : matplotlib.axes.Axes, optional
        Axes to plot on. If None, creates a new figure.
    overlay : geopandas.GeoDataFrame, optional
        County level only: outlines drawn in white on top of the map.
        Defaults to the shipped ambulance service boundaries, which are
        not part of the source tree; without them pass ``overlay`` or
        ``show_overlay=False``.
    show_overlay : bool, optional
        Draw the overlay on county maps (default: True).
    sources : str, optional
        Source attribution written in the bottom left corner.
    author : str, optional
        Author text written in the bottom right corner.

    Returns
    -------
    fig, ax : matplotlib Figure and Axes
        Only if ax was None; otherwise returns just ax.

    Raises
    ------
    ConfigurationError
        If the breaks give fewer than 2 bins, or more than the palette
        supports (9 greyscale, 11 colour). Raised before anything is drawn.
    FileNotFoundError
        If a county map needs the shipped ambulance service boundaries and
        they are not installed.

    Examples
    --------
    >>> counties = county_boundary_data()
    >>> counties['deaths'] = np.random.normal(30, 8, len(counties)).round()
    >>> fig, ax = plot_map(counties, 'deaths', 'My lovely map')
    >>> fig, ax = plot_map(counties, 'deaths', 'My lovely map', london_only=True)
    """
    dataset = as_region_dataset(data)
    style = MapStyle(variable, title, qtiles, breaks, london_only, greyscale, sources, author)
    edges, palette, background = style.classify(_variable_values(dataset.gdf, variable))
    overlay = _resolve_overlay(dataset, overlay, show_overlay)

    generate_figure = ax is None

    if generate_figure:
        fig, ax = pl.subplots(1, 1)
        _render(ax, dataset, style, edges, palette, background, overlay, fig=fig)
        return fig, ax

    _render(ax, dataset, style, edges, palette, background, overlay)
    return ax


def save_maps(
    fname: str,
    fwidth: int,
    data: Union[RegionDataset, gpd.GeoDataFrame],
    variable: str,
    title: str,
    qtiles: int = 5,
    breaks: Optional[Sequence[float]] = None,
    greyscale: bool = False,
    overlay: Optional[gpd.GeoDataFrame] = None,
    show_overlay: bool = True,
    sources: str = "",
    author: str = "",
    dpi: int = 100,
) -> str:
    """
    Save choropleth map(s) as PNG files.

    County level data is saved as an England map and a London only map;
    any other geography as a single England map. Files are named
    ``<fname>_counties_england.png``, ``<fname>_counties_london.png`` or
    ``<fname>_services_england.png``.

    Parameters
    ----------
    fname : str
        Base file name (may include a directory, no extension).
    fwidth : int
        Width of the images in pixels. Heights follow from the aspect ratio
        of each view's extent.
    data, variable, title, qtiles, breaks, greyscale
        As for :func:`plot_map`. There is a maximum of 9 bins for
        greyscale maps and 11 for colour maps.
    overlay, show_overlay, sources, author
        As for :func:`plot_map`.
    dpi : int, optional
        Resolution the images are rendered at (default: 100).

    Returns
    -------
    str
        ``"Save complete."``

    Raises
    ------
    ConfigurationError
        As for :func:`plot_map`. No file is written in that case.

    Examples
    --------
    >>> save_maps('lovely-map', 500, counties, 'deaths', 'My lovely map')
    'Save complete.'
    """
    dataset = as_region_dataset(data)
    style = MapStyle(variable, title, qtiles, breaks, False, greyscale, sources, author)
    edges, palette, background = style.classify(_variable_values(dataset.gdf, variable))
    overlay = _resolve_overlay(dataset, overlay, show_overlay)

    views = [(style, dataset.gdf, 'england')]
    if dataset.level.has_subset:
        views.append((dataclasses.replace(style, london_only=True), dataset.subset(), 'london'))

    for view_style, extent, view_name in views:
        filename = f"{fname}_{dataset.level.file_stem}_{view_name}.png"
        width, height = figure_dimensions(extent, fwidth, TOP_MARGIN_LINES, dpi)

        fig = pl.figure(figsize=(width / dpi, height / dpi), dpi=dpi)
        try:
            ax = fig.add_subplot(1, 1, 1)
            _render(ax, dataset, view_style, edges, palette, background, overlay, fig=fig)
            fig.savefig(filename, dpi=dpi)
        finally:
            pl.close(fig)
        logger.info("saved %s (%dx%d px)", filename, width, height)

    return SAVE_COMPLETE
