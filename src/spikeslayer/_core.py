"""The :class:`Slayer` pipeline.

A pipeline owns one resolved configuration, one detection strategy, one
filter chain and the three accessors.  It is configured fluently, then
driven by :meth:`Slayer.from_array` or :meth:`Slayer.from_stream`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from numbers import Integral
from typing import Any

from spikeslayer._accessors import (
    Transform,
    XAccessor,
    YAccessor,
    default_transform,
    default_x,
    default_y,
    ensure_callable,
)
from spikeslayer._array import run_array
from spikeslayer._config import SlayerConfig
from spikeslayer._errors import RunFailure, RunInProgress, TypeMismatch
from spikeslayer._filters import FilterChain, Predicate
from spikeslayer._pipeline import RunContext
from spikeslayer._stream import SpikeStream
from spikeslayer.algorithms import Strategy, resolve_algorithm

logger = logging.getLogger(__name__)

Callback = Callable[[RunFailure | None, list[Any] | None], Any]


class Slayer:
    """Spike detection pipeline.

    Parameters
    ----------
    config : mapping or None, optional
        Options resolved with :func:`~spikeslayer.resolve_config`.  Recognized
        options are ``algorithm``, ``minPeakDistance``, ``minPeakHeight`` and
        ``transformedValueProperty``.

    Raises
    ------
    TypeMismatch
        If ``minPeakHeight`` is not a finite number, ``minPeakDistance`` is
        not a non-negative integer or ``algorithm`` is neither a string nor a
        callable.
    ConfigurationError
        If ``algorithm`` names no built-in strategy.

    Examples
    --------
    >>> spikes = Slayer({"minPeakHeight": 3}).detect([1, 2, 5, 2, 1, 1, 2, 6, 2, 1])
    >>> spikes
    [{'x': 2, 'y': 5.0}, {'x': 7, 'y': 6.0}]
    """

    def __init__(self, config: Mapping[str, Any] | None = None) -> None:
        self.config = SlayerConfig.from_options(config)
        self.algorithm: Strategy | None = None
        self.filters = FilterChain()
        self.get_value_x: XAccessor = default_x
        self.get_value_y: YAccessor = default_y
        self.get_item: Transform = default_transform
        self._running = False

        _check_min_peak_distance(self.config.min_peak_distance)
        self.use(self.config.algorithm)
        self.configure_filters(self.config)

    def __repr__(self) -> str:
        name = getattr(self.algorithm, "__module__", None) or repr(self.algorithm)
        return f"Slayer(algorithm={name}, filters={len(self.filters)})"

    @property
    def running(self) -> bool:
        """Whether a run is in flight on this pipeline."""
        return self._running

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def configure_filters(self, config: SlayerConfig) -> Slayer:
        """Append the configuration-derived filters to the chain."""
        self._check_idle()
        for predicate in FilterChain.from_config(config):
            self.filters.add(predicate)
        return self

    def filter(self, predicate: Predicate) -> Slayer:
        """Add an ad hoc filter, combined with the others by logical OR."""
        self._check_idle()
        self.filters.add(predicate)
        return self

    def filter_value(self, value: float) -> float | None:
        """Return *value* if at least one filter accepts it, else ``None``."""
        return self.filters.apply(value)

    def use(self, module: str | Strategy) -> Slayer:
        """Plug a detection strategy.

        Parameters
        ----------
        module : str or callable
            Built-in strategy identifier (see
            :data:`~spikeslayer.BUILTIN_ALGORITHMS`) or a callable
            ``(points, config) -> peaks``.

        Raises
        ------
        ConfigurationError
            If a string names no built-in strategy.
        TypeMismatch
            If *module* is neither a string nor a callable.
        """
        self._check_idle()
        if isinstance(module, str):
            self.algorithm = resolve_algorithm(module)
            logger.debug("Using built-in algorithm %r", module)
            return self

        if callable(module):
            self.algorithm = module
            logger.debug("Using external algorithm %r", module)
            return self

        msg = f"Unable to handle the provided module argument: {module!r}"
        raise TypeMismatch(msg)

    def x(self, mapper: XAccessor) -> Slayer:
        """Set the X accessor ``(item, index) -> x``.

        Examples
        --------
        >>> data = [{"date": "2014-04-12", "value": 12}]
        >>> pipeline = slayer().x(lambda item, i: item["date"])
        """
        self._check_idle()
        self.get_value_x = ensure_callable(mapper, "x")
        return self

    def y(self, mapper: YAccessor) -> Slayer:
        """Set the Y accessor ``(item) -> y``.

        The result may be a number, a numeric string, or ``None`` to skip the
        item.
        """
        self._check_idle()
        self.get_value_y = ensure_callable(mapper, "y")
        return self

    def transform(self, mapper: Transform) -> Slayer:
        """Set the spike transform ``(xy_dict, original_item, index) -> spike``.

        Examples
        --------
        >>> def with_id(point, item, i):
        ...     point["id"] = item["id"]
        ...     return point
        >>> pipeline = slayer().transform(with_id)
        """
        self._check_idle()
        self.get_item = ensure_callable(mapper, "transform")
        return self

    def value_of(self, spike: Any) -> Any:
        """Read the ``transformedValueProperty`` of *spike*."""
        prop = self.config.transformed_value_property
        if isinstance(spike, Mapping):
            return spike[prop]
        return getattr(spike, prop)

    # ------------------------------------------------------------------
    # Runners
    # ------------------------------------------------------------------

    def from_array(self, items: Iterable[Any], callback: Callback) -> list[Any] | None:
        """Detect spikes in a finite sequence.

        Parameters
        ----------
        items : iterable
            Raw items.
        callback : callable
            Called exactly once, with ``(None, spikes)`` on success or
            ``(RunFailure, None)`` on failure.

        Returns
        -------
        list or None
            The spikes handed to *callback*, ``None`` on failure.

        Raises
        ------
        RunInProgress
            If the pipeline is already running.
        """
        ensure_callable(callback, "from_array", "callback")
        try:
            spikes = self.detect(items)
        except RunFailure as exc:
            logger.debug("Array run failed in %s stage: %s", exc.stage, exc.cause)
            callback(exc, None)
            return None
        callback(None, spikes)
        return spikes

    def detect(self, items: Iterable[Any]) -> list[Any]:
        """Detect spikes in a finite sequence and return them.

        Raises
        ------
        RunFailure
            If any accessor, strategy, filter or transform call fails.
        RunInProgress
            If the pipeline is already running.
        """
        context = self._begin_run()
        try:
            return run_array(context, items)
        finally:
            self._end_run()

    def from_stream(self, source: Any) -> SpikeStream:
        """Return a :class:`SpikeStream` over an async or plain iterable of chunks.

        The run starts when the stream is awaited or :meth:`SpikeStream.start`
        is called; register listeners first.
        """
        return SpikeStream(self, source)

    # ------------------------------------------------------------------
    # Run bookkeeping
    # ------------------------------------------------------------------

    def _check_idle(self) -> None:
        if self._running:
            msg = "Slayer cannot be reconfigured while a run is in progress"
            raise RunInProgress(msg)

    def _begin_run(self) -> RunContext:
        if self._running:
            msg = "Slayer is already running; wait for the current run to finish"
            raise RunInProgress(msg)
        self._running = True
        return RunContext(
            config=self.config,
            algorithm=self.algorithm,
            filters=self.filters.copy(),
            get_value_x=self.get_value_x,
            get_value_y=self.get_value_y,
            get_item=self.get_item,
        )

    def _end_run(self) -> None:
        self._running = False


def slayer(config: Mapping[str, Any] | None = None) -> Slayer:
    """Create a :class:`Slayer` (factory shortcut)."""
    return Slayer(config)


def _check_min_peak_distance(value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, Integral) or value < 0:
        msg = f"config.minPeakDistance should be a non-negative integer. Was: {value!r}"
        raise TypeMismatch(msg)
