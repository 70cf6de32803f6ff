"""
Classification of a numeric variable into choropleth bins.

This module turns a column of values into an ordered sequence of bin edges,
either from sample quantiles or from explicit breaks. It also assigns each
value to its bin.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike, NDArray

logger = logging.getLogger(__name__)

MIN_BINS = 2

# maximum number of bins each palette family can colour
MAX_BINS = {
    True: 9,    # greyscale
    False: 11,  # colour
}


class ConfigurationError(ValueError):
    """Raised when the requested bins cannot be drawn with the requested palette."""


def check_bin_count(n_bins: int, greyscale: bool = False) -> None:
    """
    Check that ``n_bins`` can be coloured with the requested palette family.

    Parameters
    ----------
    n_bins : int
        Number of bins, i.e. ``len(breaks) - 1``.
    greyscale : bool, optional
        Whether a greyscale palette was requested (default: False).

    Raises
    ------
    ConfigurationError
        If there are fewer than 2 bins, more than 9 greyscale bins,
        or more than 11 colour bins.
    """
    if n_bins < MIN_BINS:
        raise ConfigurationError("Too few breaks/quantiles: Min of 2.")
    if greyscale and n_bins > MAX_BINS[True]:
        raise ConfigurationError(
            "Too many breaks/quantiles: Max of 9 with a greyscale palette. "
            "(Max of 11 with a colour palette.)"
        )
    if not greyscale and n_bins > MAX_BINS[False]:
        raise ConfigurationError("Too many breaks/quantiles: Max of 11 with a colour palette.")


def _has_missing(breaks: Sequence[Optional[float]]) -> bool:
    return any(pd.isna(b) for b in breaks)


def compute_breaks(
    values: ArrayLike,
    qtiles: int = 5,
    breaks: Optional[Sequence[Optional[float]]] = None,
    greyscale: bool = False,
) -> NDArray[np.floating]:
    """
    Compute the bin edges for a choropleth variable.

    Parameters
    ----------
    values : array-like
        The variable to classify. Missing (None or NaN) and infinite
        entries are ignored.
    qtiles : int, optional
        Number of quantile bins (default: 5, i.e. quintiles). Ignored if
        ``breaks`` is given.
    breaks : sequence of float, optional
        Explicit, ordered bin edges; ``n`` bins need ``n + 1`` edges.
        If any entry is missing, quantile breaks are used instead.
    greyscale : bool, optional
        Whether the bins will be drawn in greyscale, which allows at most
        9 bins instead of 11 (default: False).

    Returns
    -------
    numpy.ndarray
        ``N + 1`` non-decreasing bin edges.

    Raises
    ------
    ConfigurationError
        If the resulting bin count is outside what the palette supports,
        or if explicit breaks decrease or are not finite.
    ValueError
        If quantiles are requested but ``values`` holds no finite data.

    Notes
    -----
    Quantiles follow Hyndman & Fan's type 8 estimator (plotting positions
    with a = b = 1/3), which numpy calls ``median_unbiased``. The first
    and last edges are the sample minimum and maximum.

    Examples
    --------
    >>> compute_breaks([1, 2, 3, 4, 5], qtiles=2)
    array([1., 3., 5.])
    >>> compute_breaks([1, 2, 3], breaks=[0, 10, 20])
    array([ 0., 10., 20.])
    """
    if breaks is not None and not _has_missing(breaks):
        edges = np.asarray(breaks, dtype=float)
        if np.any(np.diff(edges) < 0):
            raise ConfigurationError("Breaks must be in non-decreasing order.")
        source = 'explicit'
    else:
        qtiles = int(qtiles)
        if qtiles < 1:
            raise ConfigurationError("Too few breaks/quantiles: Min of 2.")
        data = np.asarray(values, dtype=float).ravel()
        data = data[np.isfinite(data)]
        if data.size == 0:
            raise ValueError("Cannot compute quantile breaks: variable has no finite values.")
        probs = np.arange(qtiles + 1) / qtiles
        edges = np.quantile(data, probs, method='median_unbiased')
        source = f'{qtiles}-quantile'

    if not np.all(np.isfinite(edges)):
        raise ConfigurationError(f"Breaks must be finite numbers, got {edges.tolist()}.")
    check_bin_count(len(edges) - 1, greyscale)

    logger.debug("using %s breaks %s", source, edges)
    return edges


def assign_bins(values: ArrayLike, breaks: ArrayLike) -> NDArray[np.integer]:
    """
    Find the bin index of every value.

    Bins are closed on the left, ``[b_i, b_{i+1})``, apart from the last
    bin, which also includes its upper edge.

    Parameters
    ----------
    values : array-like
        Values to classify. Missing entries are allowed.
    breaks : array-like
        Non-decreasing bin edges.

    Returns
    -------
    numpy.ndarray of int
        Bin index per value, or -1 for values that are missing or fall
        outside ``[breaks[0], breaks[-1]]``.
    """
    values = np.asarray(values, dtype=float)
    breaks = np.asarray(breaks, dtype=float)
    n_bins = len(breaks) - 1

    idx = np.searchsorted(breaks, values, side='right') - 1
    idx[values == breaks[-1]] = n_bins - 1
    outside = np.isnan(values) | (values < breaks[0]) | (values > breaks[-1])
    idx[outside] = -1
    return idx
