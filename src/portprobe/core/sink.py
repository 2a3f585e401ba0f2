"""
Result Sink - Single consumer that prints scan results as they complete.

Producers never wait on the sink: the queue is unbounded, so dispatch
keeps going no matter how slowly lines are written.
"""

import asyncio
from typing import Any, Callable, Optional

import structlog


_CLOSED = object()


class ResultSink:
    """
    Drains results from a queue and writes one formatted line per result.

    Example:
        >>> sink = ResultSink(writer=print)
        >>> consumer = asyncio.create_task(sink.run())
        >>> sink.put(result)
        >>> sink.close()
        >>> await consumer
    """

    def __init__(self, writer: Optional[Callable[[str], Any]] = None):
        """
        Initialize the sink.

        Args:
            writer: Callable receiving each formatted line (print if None)
        """
        self.writer = writer or print
        self.queue: asyncio.Queue = asyncio.Queue()
        self.emitted = 0
        self.closed = False

        self.logger = structlog.get_logger(__name__)

    def put(self, result):
        """Hand a result to the sink. Never blocks."""
        if self.closed:
            raise RuntimeError("result sink is closed")
        self.queue.put_nowait(result)

    def close(self):
        """Signal that no more results will arrive"""
        if not self.closed:
            self.closed = True
            self.queue.put_nowait(_CLOSED)

    async def run(self) -> int:
        """
        Write results in arrival order until the sink is closed.

        Returns:
            Number of lines written
        """
        while True:
            item = await self.queue.get()
            if item is _CLOSED:
                break

            self.writer(item.format())
            self.emitted += 1
            self.logger.debug("result_emitted", host=item.host, port=item.port)

        self.logger.debug("result_sink_drained", emitted=self.emitted)
        return self.emitted
