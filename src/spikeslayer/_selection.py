"""Peak spacing helpers shared by the built-in strategies."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from collections.abc import Sequence

import numpy as np
from scipy.signal import find_peaks

from spikeslayer._accessors import XYPoint


def local_maxima(points: Sequence[XYPoint], min_height: float | None = None) -> list[XYPoint]:
    """Return the points that are local maxima of the Y series.

    Parameters
    ----------
    points : sequence of XYPoint
        Ordered points.
    min_height : float or None, optional
        Minimum Y-value of a reported maximum.

    Returns
    -------
    list of XYPoint
        Maxima in input order.  Flat tops are reported once, at their middle
        sample; the first and last points are never maxima.

    Examples
    --------
    >>> pts = [XYPoint(i, v, i) for i, v in enumerate([1, 3, 1, 4, 4, 1])]
    >>> [p.index for p in local_maxima(pts)]
    [1, 3]
    """
    if len(points) < 3:
        return []
    y = np.fromiter((p.y for p in points), dtype=float, count=len(points))
    missing = np.isnan(y)
    if missing.any():
        # NaN never compares as a maximum
        y = np.where(missing, -np.inf, y)
    indices, _ = find_peaks(y, height=min_height)
    return [points[int(i)] for i in indices]


def select_by_distance(peaks: Sequence[XYPoint], min_distance: float) -> list[XYPoint]:
    """Keep the peaks that dominate their ``min_distance`` neighbourhood.

    A peak is kept when no other peak closer than *min_distance* on the X
    axis is higher; of two equal heights the earlier index wins.  Unlike a
    greedy strongest-first pass, whether a peak survives depends only on
    the peaks within *min_distance* of it, so the same rule applied to a
    sliding window gives the same answer as on the full sequence.

    Parameters
    ----------
    peaks : sequence of XYPoint
        Candidate peaks in input order, with mutually comparable numeric X.
    min_distance : float
        Minimum X-distance between two accepted peaks.  ``0`` keeps all.

    Returns
    -------
    list of XYPoint
        Accepted peaks, in input order.  No two are closer than
        *min_distance*.

    Examples
    --------
    >>> pts = [XYPoint(2, 5.0, 2), XYPoint(7, 6.0, 7), XYPoint(40, 1.0, 40)]
    >>> [p.index for p in select_by_distance(pts, 30)]
    [7, 40]
    """
    if min_distance <= 0 or len(peaks) < 2:
        return list(peaks)

    order = sorted(range(len(peaks)), key=lambda i: peaks[i].x)
    xs = [peaks[i].x for i in order]

    def strength(i: int) -> tuple[float, int]:
        return (-peaks[i].y, peaks[i].index)

    accepted: list[int] = []
    for i in order:
        x = peaks[i].x
        lo = bisect_right(xs, x - min_distance)
        hi = bisect_left(xs, x + min_distance)
        if min(order[lo:hi], key=strength) == i:
            accepted.append(i)

    return [peaks[i] for i in sorted(accepted)]
