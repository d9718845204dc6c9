"""Pluggable spike (local peak) detection.

A :class:`Slayer` pipeline maps raw items to XY points through swappable
accessors, selects candidate peaks with a pluggable strategy, keeps the
candidates accepted by an OR-combined filter chain and shapes them with a
transform.  The same pipeline runs over in-memory sequences
(:meth:`Slayer.from_array`) and over asynchronous chunk streams
(:meth:`Slayer.from_stream`).

Public API
----------
.. autosummary::
    slayer
    Slayer
    SlayerConfig
    resolve_config
    FilterChain
    SpikeStream
    resolve_algorithm
"""

import logging

from spikeslayer._accessors import XYPoint
from spikeslayer._config import CONFIG_ALIASES, CONFIG_DEFAULTS, SlayerConfig, resolve_config
from spikeslayer._core import Slayer, slayer
from spikeslayer._errors import (
    ConfigurationError,
    InvalidArgument,
    RunFailure,
    RunInProgress,
    SlayerError,
    TypeMismatch,
)
from spikeslayer._filters import FilterChain, min_height_filter
from spikeslayer._selection import select_by_distance
from spikeslayer._stream import SpikeStream
from spikeslayer.algorithms import BUILTIN_ALGORITHMS, resolve_algorithm

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "BUILTIN_ALGORITHMS",
    "CONFIG_ALIASES",
    "CONFIG_DEFAULTS",
    "ConfigurationError",
    "FilterChain",
    "InvalidArgument",
    "RunFailure",
    "RunInProgress",
    "Slayer",
    "SlayerConfig",
    "SlayerError",
    "SpikeStream",
    "TypeMismatch",
    "XYPoint",
    "min_height_filter",
    "resolve_algorithm",
    "resolve_config",
    "select_by_distance",
    "slayer",
]
