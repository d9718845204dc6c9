"""Local-maximum strategy with minimum peak spacing.

Candidates are found as in the ``default`` strategy.  A candidate is kept
when no other candidate closer than ``min_peak_distance`` on the X axis is
higher (equal heights go to the earlier one), so no two accepted peaks are
closer than ``min_peak_distance``.
"""

from __future__ import annotations

from collections.abc import Sequence

from spikeslayer._accessors import XYPoint
from spikeslayer._config import SlayerConfig
from spikeslayer._selection import local_maxima, select_by_distance


def detect(points: Sequence[XYPoint], config: SlayerConfig) -> list[XYPoint]:
    """Return spaced local maxima of *points*."""
    candidates = local_maxima(points, min_height=config.min_peak_height)
    return select_by_distance(candidates, config.min_peak_distance)
