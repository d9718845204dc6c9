"""Synchronous runner over a finite in-memory sequence."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from spikeslayer._accessors import XYPoint
from spikeslayer._errors import RunFailure
from spikeslayer._pipeline import REJECTED, RunContext

logger = logging.getLogger(__name__)


def run_array(context: RunContext, items: Iterable[Any]) -> list[Any]:
    """Detect spikes in *items* and return them in ascending index order.

    Parameters
    ----------
    context : RunContext
        Snapshot of the pipeline taken at run start.
    items : iterable
        Raw items.  Materialized once; iterating it must terminate.

    Returns
    -------
    list
        Spikes produced by the transform accessor.

    Raises
    ------
    RunFailure
        If the items cannot be iterated or any accessor, strategy, filter or
        transform call fails.  No partial result is returned.
    """
    try:
        items = list(items)
    except Exception as exc:
        raise RunFailure(exc, "source") from exc

    points: list[XYPoint] = []
    for index, item in enumerate(items):
        point = context.project(item, index)
        if point is not None:
            points.append(point)

    peaks = context.detect(points)

    spikes: list[Any] = []
    for point in peaks:
        spike = context.finalize(point, items[point.index])
        if spike is not REJECTED:
            spikes.append(spike)

    logger.debug(
        "Array run: %d items, %d points, %d candidates, %d spikes",
        len(items),
        len(points),
        len(peaks),
        len(spikes),
    )
    return spikes
