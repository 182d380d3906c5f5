"""
Transfer progress reporting.

ProgressReader wraps a byte source. Reads pass through unchanged while the
number of bytes consumed is rendered as a single status line by a
background task. The read path only enqueues deltas and never waits on
the renderer.
"""
import asyncio
import inspect
import sys
from typing import Any, AsyncIterator, Optional, TextIO

from ..logging import get_logger

LABEL_LENGTH = 40
TERM_WIDTH = 80
UPDATE_INTERVAL = 0.1
DEFAULT_CHUNK_SIZE = 64 * 1024

# '\r', spaces up to the terminal width, '\r'
CLEAR_LINE = '\r' + ' ' * (TERM_WIDTH - 2) + '\r'

# Marks the end of the delta stream; distinct from an empty queue
_CLOSED = object()


class ProgressReader:
    """
    Byte source decorator that renders transfer progress.

    One renderer task runs per started reader. Deltas reach it through an
    unbounded queue; every delta is added to the running total exactly
    once, and the line is redrawn on a fixed tick.

    Example:
        >>> async with ProgressReader("notes.txt", f, size) as reader:
        ...     await session.put(url, data=reader.iter_chunks())
    """

    def __init__(
        self,
        label: str,
        source: Any,
        total: int,
        output: Optional[TextIO] = None,
        interval: float = UPDATE_INTERVAL
    ):
        """
        Initialize progress reader.

        Args:
            label: Name of the item being transferred
            source: Object with a sync or async read(size)
            total: Declared size in bytes (0 or less when unknown)
            output: Status stream (defaults to stderr)
            interval: Seconds between renders
        """
        self._label = label
        self._source = source
        self._total = total if total and total > 0 else 0
        self._output = output if output is not None else sys.stderr
        self._interval = interval
        self._deltas: asyncio.Queue = asyncio.Queue()
        self._task: Optional[asyncio.Task] = None
        self._transferred = 0
        self._closed = False
        self._logger = get_logger('linxpy.upload.progress')

    @property
    def label(self) -> str:
        return self._label

    @property
    def total(self) -> int:
        return self._total

    @property
    def transferred(self) -> int:
        """Bytes accounted for by the renderer so far."""
        return self._transferred

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def percentage(self) -> Optional[float]:
        """Percentage complete, capped at 100; None when the size is unknown."""
        if not self._total:
            return None
        return min(100.0, self._transferred * 100.0 / self._total)

    async def __aenter__(self) -> 'ProgressReader':
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def start(self) -> None:
        """Start the renderer task. Must be called from a running loop."""
        if self._closed:
            raise RuntimeError("ProgressReader is closed")
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._render_loop())

    async def read(self, size: int = -1) -> bytes:
        """
        Read from the underlying source and record the delta.

        Zero-byte reads record a delta of 0. If the source raises, a zero
        delta is recorded and the error propagates.
        """
        n = 0
        try:
            data = self._source.read(size)
            if inspect.isawaitable(data):
                data = await data
            n = len(data) if data else 0
            return data
        finally:
            self._record(n)

    async def iter_chunks(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> AsyncIterator[bytes]:
        """Yield chunks until the source is exhausted (request body helper)."""
        while True:
            chunk = await self.read(chunk_size)
            if not chunk:
                return
            yield chunk

    def _record(self, n: int) -> None:
        if not self._closed:
            self._deltas.put_nowait(n)

    async def close(self) -> None:
        """
        Stop the renderer and clear the progress line.

        The renderer drains pending deltas, draws the final state and
        exits before the line is cleared; nothing is written afterwards.
        Calling close() again is a no-op.
        """
        if self._closed:
            return
        self._closed = True

        if self._task is not None:
            self._deltas.put_nowait(_CLOSED)
            try:
                await self._task
            except Exception as e:
                self._logger.debug(f"Progress renderer for {self._label} failed: {e}")
            self._task = None

        self._clear()

    async def _render_loop(self) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time() + self._interval

        while True:
            timeout = max(0.0, next_tick - loop.time())
            try:
                delta = await asyncio.wait_for(self._deltas.get(), timeout)
            except asyncio.TimeoutError:
                self._render()
                next_tick = loop.time() + self._interval
                continue

            if delta is _CLOSED:
                self._render()
                return

            self._transferred += delta
            # A steady stream of deltas must not starve the tick
            if loop.time() >= next_tick:
                self._render()
                next_tick = loop.time() + self._interval

    def _render(self) -> None:
        label = f"{self._label:<{LABEL_LENGTH}.{LABEL_LENGTH}}"
        percentage = self.percentage
        if percentage is None:
            line = f"\r{label} {self._transferred} bytes"
        else:
            line = f"\r{label} {percentage:7.2f}%"
        self._write(line)

    def _clear(self) -> None:
        self._write(CLEAR_LINE)

    def _write(self, text: str) -> None:
        self._output.write(text)
        self._output.flush()
