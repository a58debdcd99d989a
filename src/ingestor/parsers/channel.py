"""
Bounded hand-off between a tokenizer thread and the row consumer.

The tokenizer blocks once ``capacity`` rows are waiting, so memory held in
flight never exceeds the high-water mark no matter how fast the file is
read. The consumer can abandon the channel at any point, which releases a
blocked producer.
"""

import logging
import threading
from collections import deque
from typing import Optional

from ingestor.errors import ParseCancelled

logger = logging.getLogger(__name__)


class CancelToken:
    """
    Cooperative cancellation flag checked between chunks.

    Usage:
        token = CancelToken()
        # from another thread or a UI callback
        token.cancel()
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, filename: Optional[str] = None) -> None:
        if self._event.is_set():
            raise ParseCancelled("Parse cancelled by caller", filename=filename)


class RowChannel:
    """
    Row-bounded queue of row batches.

    Attributes:
        capacity: Maximum rows buffered before ``put`` blocks
        waits: Number of times the producer had to wait for the consumer
    """

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self.waits = 0
        self._batches: deque[list] = deque()
        self._buffered = 0
        self._closed = False
        self._abandoned = False
        self._error: Optional[BaseException] = None
        self._cond = threading.Condition()

    @property
    def buffered(self) -> int:
        """Rows currently waiting for the consumer."""
        with self._cond:
            return self._buffered

    @property
    def abandoned(self) -> bool:
        return self._abandoned

    def put(self, batch: list) -> bool:
        """
        Hand a batch to the consumer, waiting while the channel is full.

        A batch is always admitted into an empty channel, so producers must
        keep batches no larger than ``capacity``.

        Returns:
            False if the consumer abandoned the channel
        """
        with self._cond:
            if self._buffered and self._buffered + len(batch) > self.capacity:
                self.waits += 1
                logger.debug(f"Row channel full ({self._buffered} rows), waiting")
                while (
                    not self._abandoned
                    and self._buffered
                    and self._buffered + len(batch) > self.capacity
                ):
                    self._cond.wait()
            if self._abandoned:
                return False
            self._batches.append(batch)
            self._buffered += len(batch)
            self._cond.notify_all()
            return True

    def get(self) -> Optional[list]:
        """
        Take the next batch, waiting for the producer if needed.

        Returns:
            The next batch, or None once the producer has finished

        Raises:
            The producer's error, if it failed
        """
        with self._cond:
            while not self._batches and not self._closed:
                self._cond.wait()
            if self._error is not None:
                raise self._error
            if not self._batches:
                return None
            batch = self._batches.popleft()
            self._buffered -= len(batch)
            self._cond.notify_all()
            return batch

    def close(self, error: Optional[BaseException] = None) -> None:
        """Signal that the producer is done, optionally with a failure."""
        with self._cond:
            self._closed = True
            self._error = error
            self._cond.notify_all()

    def abandon(self) -> None:
        """Stop consuming; drops buffered rows and unblocks the producer."""
        with self._cond:
            self._abandoned = True
            self._batches.clear()
            self._buffered = 0
            self._cond.notify_all()
