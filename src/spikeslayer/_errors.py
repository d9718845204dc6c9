"""Exception hierarchy for the spike detection pipeline.

Setup errors (:class:`TypeMismatch`, :class:`ConfigurationError`,
:class:`RunInProgress`) are raised synchronously where the pipeline is
configured.  :class:`RunFailure` is only ever delivered through a run's own
channel: the ``from_array`` callback or the stream ``"error"`` event.
"""

from __future__ import annotations


class SlayerError(Exception):
    """Base class for every error raised by :mod:`spikeslayer`."""


class TypeMismatch(SlayerError, TypeError):
    """A configuration value, accessor or algorithm has the wrong shape."""


#: Alternative name used for accessor and filter argument checks.
InvalidArgument = TypeMismatch


class ConfigurationError(SlayerError, ValueError):
    """A built-in algorithm identifier does not resolve to a known strategy."""


class RunInProgress(SlayerError, RuntimeError):
    """A pipeline was reconfigured or re-run while a run is in flight."""


class RunFailure(SlayerError):
    """An accessor, algorithm, filter or transform failed during a run.

    Parameters
    ----------
    cause : BaseException
        The underlying exception.  Also chained as ``__cause__``.
    stage : str
        Pipeline stage that failed: ``"x"``, ``"y"``, ``"algorithm"``,
        ``"filter"``, ``"transform"`` or ``"source"``.
    index : int or None, optional
        Positional index of the raw item being processed, when known.
    """

    def __init__(self, cause: BaseException, stage: str, index: int | None = None) -> None:
        where = f" at index {index}" if index is not None else ""
        super().__init__(f"{stage} stage failed{where}: {cause!r}")
        self.cause = cause
        self.stage = stage
        self.index = index
        self.__cause__ = cause
