from __future__ import annotations
from collections import deque
import logging
from threading import Condition, Lock
from typing import Deque, Generic, Iterator, TypeVar

T = TypeVar("T")

log = logging.getLogger(__name__)


class TreeDigestError(Exception):
    """Base class for errors raised by ``treedigest``"""


class QueueClosed(TreeDigestError):
    """Raised when putting a value into a closed or cancelled `WorkQueue`"""


class WorkQueue(Generic[T]):
    """
    Synchronized FIFO queue connecting one or more producers to a collection
    of concurrent consumers.  The queue starts out *open*; producers call
    `put()` for each task and then `close()` once there is nothing left to
    send.  Consumers iterate over the queue, receiving each task exactly once;
    iteration blocks while the queue is open and empty and stops once the
    queue has been closed and drained.

    If ``maxsize`` is positive, `put()` blocks while the queue holds that many
    tasks.

    `cancel()` closes the queue and discards any tasks not yet handed out, so
    that consumers stop promptly and further `put()` calls fail.

    Sample usage by a consumer:

    .. code:: python

        for task in work_queue:
            # Operate on task
    """

    def __init__(self, maxsize: int = 0) -> None:
        self._lock = Lock()
        self._not_empty = Condition(self._lock)
        self._not_full = Condition(self._lock)
        self._queue: Deque[T] = deque()
        self.maxsize = maxsize
        self._closed = False
        self._cancelled = False

    def __len__(self) -> int:
        with self._lock:
            return len(self._queue)

    def __iter__(self) -> Iterator[T]:
        while True:
            with self._lock:
                while not self._queue:
                    if self._closed:
                        return
                    self._not_empty.wait()
                value = self._queue.popleft()
                self._not_full.notify()
            yield value

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    @property
    def cancelled(self) -> bool:
        with self._lock:
            return self._cancelled

    def put(self, value: T) -> None:
        with self._lock:
            while True:
                if self._closed:
                    if self._cancelled:
                        raise QueueClosed("work queue has been cancelled")
                    raise QueueClosed("work queue is closed")
                if self.maxsize <= 0 or len(self._queue) < self.maxsize:
                    break
                self._not_full.wait()
            self._queue.append(value)
            self._not_empty.notify()

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._not_empty.notify_all()
            self._not_full.notify_all()

    def cancel(self) -> int:
        """
        Close the queue and drop all pending tasks.  Returns the number of
        tasks dropped.
        """
        with self._lock:
            dropped = len(self._queue)
            self._queue.clear()
            self._closed = True
            self._cancelled = True
            self._not_empty.notify_all()
            self._not_full.notify_all()
        if dropped:
            log.debug("Dropped %d pending paths from cancelled work queue", dropped)
        return dropped
