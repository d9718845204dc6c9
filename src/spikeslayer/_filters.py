"""Post-detection filter chain.

Filters are inclusion criteria: a candidate value is kept when **any**
filter in the chain accepts it, and every value passes an empty chain.
Adding a filter can therefore only widen what is accepted.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterator
from numbers import Real
from typing import Any

from spikeslayer._accessors import ensure_callable
from spikeslayer._config import SlayerConfig
from spikeslayer._errors import TypeMismatch

Predicate = Callable[[float], bool]


def min_height_filter(min_peak_height: Any) -> Predicate:
    """Build the ``value >= min_peak_height`` predicate.

    Parameters
    ----------
    min_peak_height : float
        Finite numeric threshold.

    Returns
    -------
    callable
        Predicate over a numeric value.

    Raises
    ------
    TypeMismatch
        If *min_peak_height* is not a finite real number (booleans, ``nan``
        and infinities are rejected).
    """
    if (
        isinstance(min_peak_height, bool)
        or not isinstance(min_peak_height, Real)
        or not math.isfinite(min_peak_height)
    ):
        msg = f"config.minPeakHeight should be a finite numeric value. Was: {min_peak_height!r}"
        raise TypeMismatch(msg)

    threshold = float(min_peak_height)

    def min_height(value: float) -> bool:
        return value >= threshold

    return min_height


class FilterChain:
    """Ordered predicates combined with logical OR.

    Examples
    --------
    >>> chain = FilterChain([min_height_filter(3)])
    >>> chain.accepts(5), chain.accepts(1)
    (True, False)
    >>> chain.add(lambda value: value < 0).accepts(-2)
    True
    """

    def __init__(self, filters: list[Predicate] | None = None) -> None:
        self._filters: list[Predicate] = []
        for predicate in filters or ():
            self.add(predicate)

    @classmethod
    def from_config(cls, config: SlayerConfig) -> FilterChain:
        """Build the configuration-derived filters.

        Raises
        ------
        TypeMismatch
            If ``min_peak_height`` is not a finite number, ``None`` included.
        """
        return cls([min_height_filter(config.min_peak_height)])

    def add(self, predicate: Predicate) -> FilterChain:
        """Append a predicate and return the chain."""
        self._filters.append(ensure_callable(predicate, "filter", "predicate"))
        return self

    def accepts(self, value: float) -> bool:
        """Return whether at least one filter accepts *value*."""
        if not self._filters:
            return True
        return any(predicate(value) for predicate in self._filters)

    def apply(self, value: float) -> float | None:
        """Return *value* if accepted, ``None`` otherwise."""
        return value if self.accepts(value) else None

    def copy(self) -> FilterChain:
        """Return an independent chain with the same predicates."""
        return FilterChain(list(self._filters))

    def __iter__(self) -> Iterator[Predicate]:
        return iter(self._filters)

    def __len__(self) -> int:
        return len(self._filters)

    def __repr__(self) -> str:
        names = ", ".join(getattr(f, "__name__", repr(f)) for f in self._filters)
        return f"FilterChain([{names}])"
