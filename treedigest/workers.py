from __future__ import annotations
import logging
from pathlib import Path
import threading
from typing import List
from .digest import filedigest
from .results import ResultSink, ScanStats
from .workqueue import WorkQueue

log = logging.getLogger(__name__)


def digest_worker(
    queue: WorkQueue[Path], sink: ResultSink, algorithm: str, stats: ScanStats
) -> None:
    """
    Digest paths from ``queue`` until it is closed and drained.  A file that
    cannot be read or whose result cannot be written is logged and skipped.
    """
    log.debug("Digest worker started")
    for path in queue:
        try:
            digest = filedigest(path, algorithm)
        except OSError as e:
            log.error("Failed to create digest of %s: %s", path, e)
            stats.incr("errors")
            continue
        try:
            sink.write(digest, path)
        except (OSError, UnicodeError) as e:
            log.error("Failed to write digest of %s: %s", path, e)
            stats.incr("errors")
        else:
            stats.incr("files_digested")
    log.debug("Digest worker finished")


def start_workers(
    threads: int,
    queue: WorkQueue[Path],
    sink: ResultSink,
    algorithm: str,
    stats: ScanStats,
) -> List[threading.Thread]:
    workers = [
        threading.Thread(
            target=digest_worker,
            args=(queue, sink, algorithm, stats),
            name=f"treedigest.worker {i}",
            daemon=True,
        )
        for i in range(threads)
    ]
    for w in workers:
        w.start()
    return workers
