"""Pass-through strategy: every point is a candidate.

Selection is left entirely to the filter chain, which turns the pipeline
into a plain accessor / filter / transform map.
"""

from __future__ import annotations

from collections.abc import Sequence

from spikeslayer._accessors import XYPoint
from spikeslayer._config import SlayerConfig


def detect(points: Sequence[XYPoint], config: SlayerConfig) -> list[XYPoint]:
    return list(points)
