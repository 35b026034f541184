"""
Digest every file in a directory tree using a pool of threads

One thread walks the tree and feeds the canonical path of each regular file
into a work queue; a pool of worker threads drains the queue, computing a
digest for each file and printing it alongside the path.
"""

__version__ = "0.1.0"

from .digest import ALGORITHMS, DEFAULT_ALGORITHM, filedigest
from .pipeline import DigestPipeline, ScanJob, detect_parallelism
from .results import ResultSink, ScanStats
from .walker import DEFAULT_SKIP_PREFIXES, TreeWalker
from .workqueue import QueueClosed, TreeDigestError, WorkQueue

__all__ = [
    "ALGORITHMS",
    "DEFAULT_ALGORITHM",
    "DEFAULT_SKIP_PREFIXES",
    "DigestPipeline",
    "QueueClosed",
    "ResultSink",
    "ScanJob",
    "ScanStats",
    "TreeDigestError",
    "TreeWalker",
    "WorkQueue",
    "detect_parallelism",
    "filedigest",
]
