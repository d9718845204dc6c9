"""Built-in detection strategies and the strategy registry.

Each built-in strategy is a module of this package exposing
``detect(points, config)``.  A strategy receives the ordered
:class:`~spikeslayer.XYPoint` sequence of a run together with the resolved
:class:`~spikeslayer.SlayerConfig` and returns the subsequence of the same
point objects it identifies as peaks, preserving their order.

.. autosummary::
    BUILTIN_ALGORITHMS
    resolve_algorithm
"""

from __future__ import annotations

import importlib
import logging
import re
from collections.abc import Callable, Sequence
from typing import Any

from spikeslayer._accessors import XYPoint
from spikeslayer._config import SlayerConfig
from spikeslayer._errors import ConfigurationError, TypeMismatch

logger = logging.getLogger(__name__)

Strategy = Callable[[Sequence[XYPoint], SlayerConfig], Sequence[XYPoint]]

#: Identifiers of the strategies bundled with the package.
BUILTIN_ALGORITHMS: tuple[str, ...] = ("default", "distance", "none")

_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*$")


def resolve_algorithm(name: Any) -> Strategy:
    """Map a built-in identifier to its ``detect`` function.

    Parameters
    ----------
    name : str
        One of :data:`BUILTIN_ALGORITHMS`.

    Returns
    -------
    callable
        The strategy's ``detect(points, config)`` function.

    Raises
    ------
    TypeMismatch
        If *name* is not a string.
    ConfigurationError
        If *name* is malformed or not a bundled strategy.

    Examples
    --------
    >>> resolve_algorithm("default").__module__
    'spikeslayer.algorithms.default'
    """
    if not isinstance(name, str):
        msg = f"Algorithm identifier should be a string. Was: {name!r}"
        raise TypeMismatch(msg)
    if not _IDENTIFIER.match(name) or name not in BUILTIN_ALGORITHMS:
        msg = (
            f"Invalid built-in algorithm provided: {name!r} "
            f"(expected one of {', '.join(BUILTIN_ALGORITHMS)})"
        )
        raise ConfigurationError(msg)

    module = importlib.import_module(f"{__name__}.{name}")
    logger.debug("Resolved built-in algorithm %r", name)
    return module.detect


__all__ = ["BUILTIN_ALGORITHMS", "Strategy", "resolve_algorithm"]
