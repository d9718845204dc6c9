"""Per-run snapshot of a pipeline and the item transformation it applies.

Both runners funnel every raw item through the same three steps:

1. :meth:`RunContext.project` -- X/Y accessors build an :class:`XYPoint`.
2. :meth:`RunContext.detect` -- the strategy selects candidate peaks.
3. :meth:`RunContext.finalize` -- the filter chain and the transform turn a
   candidate into a spike, or reject it.

Failures in any user-supplied callable are wrapped in :class:`RunFailure`.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from spikeslayer._accessors import Transform, XAccessor, XYPoint, YAccessor, coerce_y
from spikeslayer._config import SlayerConfig
from spikeslayer._errors import RunFailure, TypeMismatch
from spikeslayer._filters import FilterChain
from spikeslayer.algorithms import Strategy

#: Returned by :meth:`RunContext.finalize` for candidates the filters reject.
REJECTED = object()


@dataclass(frozen=True)
class RunContext:
    """Configuration fixed at run start.

    The context is built by :meth:`Slayer._begin_run` from the pipeline's
    current accessors, strategy and filters.  It holds copies, so the
    pipeline itself is free to be reconfigured once the run is over.
    """

    config: SlayerConfig
    algorithm: Strategy
    filters: FilterChain
    get_value_x: XAccessor
    get_value_y: YAccessor
    get_item: Transform

    def project(self, item: Any, index: int) -> XYPoint | None:
        """Build the point of *item*, or ``None`` when its Y value is ``None``."""
        try:
            x = self.get_value_x(item, index)
        except Exception as exc:
            raise RunFailure(exc, "x", index) from exc
        try:
            y = coerce_y(self.get_value_y(item))
        except Exception as exc:
            raise RunFailure(exc, "y", index) from exc
        if y is None:
            return None
        return XYPoint(x=x, y=y, index=index)

    def detect(self, points: Sequence[XYPoint]) -> list[XYPoint]:
        """Run the strategy and return its peaks sorted by index, without duplicates."""
        known = {point.index for point in points}
        try:
            result = self.algorithm(points, self.config)
            peaks: dict[int, XYPoint] = {}
            for peak in result or ():
                if not isinstance(peak, XYPoint) or peak.index not in known:
                    msg = f"Algorithm should return points of its input. Got: {peak!r}"
                    raise TypeMismatch(msg)
                peaks[peak.index] = peak
        except RunFailure:
            raise
        except Exception as exc:
            raise RunFailure(exc, "algorithm") from exc
        return [peaks[index] for index in sorted(peaks)]

    def finalize(self, point: XYPoint, item: Any) -> Any:
        """Return the spike of *point*, or :data:`REJECTED`."""
        try:
            accepted = self.filters.accepts(point.y)
        except Exception as exc:
            raise RunFailure(exc, "filter", point.index) from exc
        if not accepted:
            return REJECTED
        try:
            return self.get_item(point.as_dict(), item, point.index)
        except Exception as exc:
            raise RunFailure(exc, "transform", point.index) from exc
