"""Local-maximum strategy.

A point is a peak when its Y-value rises above both neighbours (flat tops
are reported at their middle sample) and reaches ``min_peak_height``.
Neighbouring peaks are not spaced apart; use the ``distance`` strategy to
enforce ``min_peak_distance``.
"""

from __future__ import annotations

from collections.abc import Sequence

from spikeslayer._accessors import XYPoint
from spikeslayer._config import SlayerConfig
from spikeslayer._selection import local_maxima


def detect(points: Sequence[XYPoint], config: SlayerConfig) -> list[XYPoint]:
    """Return the local maxima of *points* at or above ``min_peak_height``."""
    return local_maxima(points, min_height=config.min_peak_height)
