"""
Fill colours for choropleth bins.

Palettes come from matplotlib's copies of the ColorBrewer ramps: ``Greys``
for greyscale maps and the purple-green diverging ``PRGn`` ramp otherwise.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

import numpy as np
from matplotlib import colormaps
from matplotlib.colors import to_hex

from vanmaps.classify import check_bin_count

logger = logging.getLogger(__name__)

WHITE = '#ffffff'
BLACK = '#000000'
SEA_BLUE = '#A6CAE0'
NO_DATA_GREY = '#aaaaaa'
COUNTY_BORDER = '#666666'


class PaletteFamily(NamedTuple):
    """How to sample a palette of a given length from a named colormap."""
    cmap: str
    reverse: bool
    low: float
    high: float
    background: str


PALETTE_FAMILIES = {
    # Greys runs white to black. Sampled short of pure white, then reversed:
    # lightness increases with the bin index.
    True: PaletteFamily('Greys', True, 0.25, 0.95, WHITE),
    False: PaletteFamily('PRGn', False, 0., 1., SEA_BLUE),
}


def _sample(family: PaletteFamily, n: int) -> list[str]:
    cmap = colormaps[family.cmap]
    colours = [to_hex(cmap(x)) for x in np.linspace(family.low, family.high, n)]
    if family.reverse:
        colours.reverse()
    return colours


def select_palette(bin_count: int, greyscale: bool = False) -> tuple[list[str], str]:
    """
    Pick fill colours for ``bin_count`` bins and a map background colour.

    Parameters
    ----------
    bin_count : int
        Number of bins to colour.
    greyscale : bool, optional
        Use shades of grey instead of the diverging colour ramp
        (default: False).

    Returns
    -------
    palette : list of str
        ``bin_count`` hex colours, one per bin in bin order.
    background : str
        Hex colour for the area around the regions: white for greyscale
        and two-bin maps, light blue for colour maps.

    Raises
    ------
    ConfigurationError
        If ``bin_count`` is outside the range the palette family supports.

    Notes
    -----
    Two bins are always drawn as a pair of contrasting greys on white,
    whatever ``greyscale`` says: the middle and lightest steps of a three
    step grey ramp.
    """
    check_bin_count(bin_count, greyscale)

    if bin_count == 2:
        palette = _sample(PALETTE_FAMILIES[True], 3)[1:]
        background = WHITE
    else:
        family = PALETTE_FAMILIES[bool(greyscale)]
        palette = _sample(family, bin_count)
        background = family.background

    logger.debug("palette for %d bins (greyscale=%s): %s", bin_count, greyscale, palette)
    return palette, background
