from __future__ import annotations
from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
import threading
from typing import List, Optional, Sequence, Union
from .digest import ALGORITHMS, DEFAULT_ALGORITHM
from .results import ResultSink, ScanStats
from .walker import DEFAULT_SKIP_PREFIXES, TreeWalker
from .workers import start_workers
from .workqueue import QueueClosed, WorkQueue

log = logging.getLogger(__name__)


def detect_parallelism() -> int:
    """
    Return the number of CPUs available to this process, or 1 if that cannot
    be determined
    """
    try:
        n = len(os.sched_getaffinity(0))
    except (AttributeError, OSError):
        n = os.cpu_count()
    return max(n or 1, 1)


@dataclass
class DigestPipeline:
    threads: int = field(default_factory=detect_parallelism)
    algorithm: str = DEFAULT_ALGORITHM
    skip_prefixes: Sequence[Union[str, Path]] = DEFAULT_SKIP_PREFIXES
    max_queue: int = 0
    follow_symlinks: bool = True

    def __post_init__(self) -> None:
        if self.threads < 1:
            raise ValueError(f"threads must be at least 1, got {self.threads}")
        if self.algorithm not in ALGORITHMS:
            raise ValueError(f"Unsupported digest algorithm: {self.algorithm!r}")
        if self.max_queue < 0:
            raise ValueError(f"max_queue must be non-negative, got {self.max_queue}")

    def start(
        self, root: Union[str, Path], sink: Optional[ResultSink] = None
    ) -> ScanJob:
        """
        Start walking ``root`` on a new thread and digesting the files it
        finds on ``threads`` worker threads.  Results are written to ``sink``
        (standard output by default).
        """
        if sink is None:
            sink = ResultSink()
        queue: WorkQueue[Path] = WorkQueue(self.max_queue)
        stats = ScanStats()
        walker = TreeWalker(
            queue=queue,
            skip_prefixes=self.skip_prefixes,
            follow_symlinks=self.follow_symlinks,
            stats=stats,
        )
        log.info(
            "Scanning %s with %d %s workers", root, self.threads, self.algorithm
        )
        walker_thread = threading.Thread(
            target=walk_and_close,
            args=(walker, root),
            name=f"treedigest.walk {root}",
            daemon=True,
        )
        walker_thread.start()
        workers = start_workers(self.threads, queue, sink, self.algorithm, stats)
        return ScanJob(
            root=root,
            queue=queue,
            stats=stats,
            walker_thread=walker_thread,
            worker_threads=workers,
        )

    def run(
        self, root: Union[str, Path], sink: Optional[ResultSink] = None
    ) -> ScanStats:
        return self.start(root, sink).join()


@dataclass
class ScanJob:
    root: Union[str, Path]
    queue: WorkQueue[Path]
    stats: ScanStats
    walker_thread: threading.Thread
    worker_threads: List[threading.Thread]

    @property
    def threads(self) -> List[threading.Thread]:
        return [self.walker_thread, *self.worker_threads]

    def join(self) -> ScanStats:
        for t in self.threads:
            t.join()
        log.info("Finished scanning %s: %s", self.root, self.stats.as_dict())
        return self.stats

    def cancel(self) -> None:
        log.info("Cancelling scan of %s", self.root)
        self.queue.cancel()

    def is_alive(self) -> bool:
        return any(t.is_alive() for t in self.threads)


def walk_and_close(walker: TreeWalker, root: Union[str, Path]) -> None:
    try:
        walker.walk(root)
    except QueueClosed:
        log.debug("Traversal of %s aborted", root)
        walker.stats.mark_aborted()
    finally:
        walker.queue.close()
