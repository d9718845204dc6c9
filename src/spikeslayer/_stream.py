"""Asynchronous runner over a source of chunks arriving over time.

A chunk is one raw item, typically one decoded text line.  Points are kept
in a bounded look-ahead window; a point is decided once enough newer points
have arrived to confirm it, so spikes leave the runner in strictly
increasing index order.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import AsyncIterator, Callable
from typing import TYPE_CHECKING, Any

from spikeslayer._accessors import XYPoint, ensure_callable
from spikeslayer._errors import InvalidArgument, RunFailure
from spikeslayer._pipeline import REJECTED, RunContext

if TYPE_CHECKING:
    from spikeslayer._core import Slayer

logger = logging.getLogger(__name__)

EVENTS = ("data", "end", "error")


class WindowDetector:
    """Incremental detection over a bounded window of recent points.

    A point is decided once ``lookahead = max(1, min_peak_distance)`` newer
    points have arrived and the newest X-value lies at least
    ``min_peak_distance`` past its own.  Older points are kept while they
    are among the ``lookahead`` points before the oldest undecided one, or
    while their successor is closer than ``min_peak_distance`` to it on the
    X axis.  The strategy therefore sees every point within
    ``min_peak_distance`` of a decided point, on both sides, together with
    the neighbours that make it a local maximum.  With the default index
    X-values the window never holds more than ``2 * lookahead + 1`` points.

    The X-span rules assume non-decreasing X-values.  X-values that go
    backwards, or that cannot be offset by a number (e.g. timestamp
    strings), fall back to the point count alone.

    Parameters
    ----------
    context : RunContext
        Snapshot of the pipeline taken at run start.
    """

    def __init__(self, context: RunContext) -> None:
        self._context = context
        self.span = context.config.min_peak_distance
        self.lookahead = max(1, int(self.span))
        self._window: deque[XYPoint] = deque()
        self._items: dict[int, Any] = {}
        # window position of the oldest undecided point
        self._cursor = 0
        self._next_index = 0

    def push(self, chunk: Any) -> list[Any]:
        """Add one chunk and return the spikes it confirms."""
        index = self._next_index
        self._next_index += 1

        point = self._context.project(chunk, index)
        if point is None:
            return []
        self._window.append(point)
        self._items[index] = chunk

        ready: list[XYPoint] = []
        while self._cursor < len(self._window) and self._confirmed(self._cursor):
            ready.append(self._window[self._cursor])
            self._cursor += 1
        if not ready:
            return []

        spikes = self._decide(ready)
        self._evict()
        return spikes

    def flush(self) -> list[Any]:
        """Decide the trailing points that never got full look-ahead."""
        undecided = list(self._window)[self._cursor :]
        self._cursor = len(self._window)
        if not undecided:
            return []
        return self._decide(undecided)

    def close(self) -> None:
        """Release the window."""
        self._window.clear()
        self._items.clear()
        self._cursor = 0

    def _confirmed(self, position: int) -> bool:
        newer = len(self._window) - 1 - position
        return newer >= self.lookahead and self._apart(self._window[position], self._window[-1])

    def _apart(self, older: XYPoint, newer: XYPoint) -> bool:
        """Whether *newer* lies at least ``span`` past *older* on the X axis."""
        try:
            return not (older.x <= newer.x < older.x + self.span)
        except TypeError:
            return True

    def _evict(self) -> None:
        window = self._window
        anchor = window[self._cursor] if self._cursor < len(window) else window[-1]
        while self._cursor > self.lookahead and self._apart(window[1], anchor):
            oldest = window.popleft()
            del self._items[oldest.index]
            self._cursor -= 1

    def _decide(self, undecided: list[XYPoint]) -> list[Any]:
        wanted = {point.index for point in undecided}
        spikes: list[Any] = []
        for peak in self._context.detect(list(self._window)):
            if peak.index not in wanted:
                continue
            spike = self._context.finalize(peak, self._items[peak.index])
            if spike is not REJECTED:
                spikes.append(spike)
        return spikes


class _ListenerError(Exception):
    """Carries an exception raised by a caller's listener out of the run."""


class SpikeStream:
    """Emitter-like handle of one stream run.

    Subscribe with :meth:`on` before driving the run with ``await stream``
    (or :meth:`start` to schedule it as a task).  ``"data"`` listeners get
    one spike per call, ``"end"`` listeners no argument and ``"error"``
    listeners the exception.  ``"end"`` and ``"error"`` are terminal and
    mutually exclusive; neither follows :meth:`cancel`.

    Examples
    --------
    >>> async def main(lines):
    ...     spikes = []
    ...     await slayer().from_stream(lines).on("data", spikes.append)
    ...     return spikes
    """

    def __init__(self, slayer: Slayer, source: Any) -> None:
        self._slayer = slayer
        self._source = source
        self._listeners: dict[str, list[Callable[..., Any]]] = {event: [] for event in EVENTS}
        self._task: asyncio.Task[None] | None = None
        self._cancel_requested = False
        self.state = "pending"
        self.error: BaseException | None = None
        self.count = 0

    def on(self, event: str, listener: Callable[..., Any]) -> SpikeStream:
        """Register *listener* for *event* and return the stream."""
        if event not in EVENTS:
            msg = f"Unknown stream event {event!r} (expected one of {', '.join(EVENTS)})"
            raise InvalidArgument(msg)
        self._listeners[event].append(ensure_callable(listener, "on", "listener"))
        return self

    @property
    def done(self) -> bool:
        """Whether the run has ended, failed or been cancelled."""
        return self.state in ("ended", "failed", "cancelled")

    def start(self) -> asyncio.Task[None]:
        """Schedule the run on the running event loop (idempotent).

        Raises
        ------
        RunInProgress
            If the pipeline is already driving another run.
        """
        if self._task is None:
            loop = asyncio.get_running_loop()
            if self._cancel_requested:
                self.state = "cancelled"
                context = None
            else:
                context = self._slayer._begin_run()
            self._task = loop.create_task(self._run(context))
        return self._task

    async def run(self) -> None:
        """Drive the run to completion.

        Returns normally after ``"end"``, ``"error"`` or :meth:`cancel`.
        Exceptions raised by the caller's own listeners propagate.
        """
        task = self.start()
        try:
            await task
        except asyncio.CancelledError:
            if not self._cancel_requested:
                raise

    def __await__(self):
        return self.run().__await__()

    def cancel(self) -> None:
        """Stop emitting immediately; no ``"end"`` follows."""
        if self.done:
            return
        self._cancel_requested = True
        task = self._task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def __aiter__(self) -> AsyncIterator[Any]:
        queue: asyncio.Queue[Any] = asyncio.Queue()
        finished = object()
        failure: list[BaseException] = []

        self.on("data", queue.put_nowait)
        self.on("error", failure.append)
        task = self.start()
        task.add_done_callback(lambda _: queue.put_nowait(finished))
        try:
            while True:
                spike = await queue.get()
                if spike is finished:
                    break
                yield spike
        finally:
            if not task.done():
                self.cancel()

        if failure:
            raise failure[0]
        if not task.cancelled() and task.exception() is not None:
            raise task.exception()

    async def _run(self, context: RunContext | None) -> None:
        if context is None:
            return
        try:
            await self._consume(context)
        except _ListenerError as exc:
            self.state = "failed"
            raise exc.__cause__ from None

    async def _consume(self, context: RunContext) -> None:
        self.state = "running"
        detector = WindowDetector(context)
        failure: Exception | None = None
        try:
            async for chunk in _iterate(self._source):
                if self._cancel_requested:
                    break
                self._emit_spikes(detector.push(chunk))
            else:
                self._emit_spikes(detector.flush())
        except asyncio.CancelledError:
            self.state = "cancelled"
            logger.debug("Stream cancelled after %d spikes", self.count)
            raise
        except _ListenerError:
            raise
        except Exception as exc:
            # RunFailure from the pipeline or the source's own error
            failure = exc
        finally:
            detector.close()
            self._slayer._end_run()

        if failure is not None:
            self._fail(failure)
            return
        if self._cancel_requested:
            self.state = "cancelled"
            logger.debug("Stream cancelled after %d spikes", self.count)
            return
        self.state = "ended"
        logger.debug("Stream ended with %d spikes", self.count)
        self._emit("end")

    def _emit_spikes(self, spikes: list[Any]) -> None:
        for spike in spikes:
            if self._cancel_requested:
                return
            self.count += 1
            self._emit("data", spike)

    def _fail(self, exc: BaseException) -> None:
        self.state = "failed"
        self.error = exc
        if isinstance(exc, RunFailure):
            logger.debug("Stream run failed in %s stage: %s", exc.stage, exc.cause)
        else:
            logger.debug("Stream source failed: %r", exc)
        self._emit("error", exc)

    def _emit(self, event: str, *args: Any) -> None:
        for listener in list(self._listeners[event]):
            try:
                listener(*args)
            except Exception as exc:
                raise _ListenerError(event) from exc


async def _iterate(source: Any) -> AsyncIterator[Any]:
    """Yield chunks from an async or a plain iterable source."""
    if hasattr(source, "__aiter__"):
        async for chunk in source:
            yield chunk
    else:
        for chunk in source:
            yield chunk
            await asyncio.sleep(0)
