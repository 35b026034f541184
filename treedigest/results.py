from __future__ import annotations
from dataclasses import dataclass, field, fields
import os
from pathlib import Path
import sys
from threading import Lock
from typing import Dict, Optional, TextIO, Union


class ResultSink:
    """
    Line-oriented destination for digest results, shared by all workers.
    Writes are serialized so that lines from different threads never
    interleave.  If ``fp`` is `None`, lines go to whatever `sys.stdout` is at
    the time of writing.
    """

    def __init__(self, fp: Optional[TextIO] = None, flush: bool = False) -> None:
        self.fp = fp
        self.flush = flush
        self._lock = Lock()

    def write(self, digest: str, path: Union[str, Path]) -> None:
        line = f"{digest} {os.fspath(path)}\n"
        with self._lock:
            fp = self.fp if self.fp is not None else sys.stdout
            buffer = getattr(fp, "buffer", None)
            if buffer is None:
                fp.write(line)
                if self.flush:
                    fp.flush()
            else:
                # Paths that are not valid in the filesystem encoding are
                # written back out as their original bytes
                fp.flush()
                buffer.write(os.fsencode(line))
                if self.flush:
                    buffer.flush()


@dataclass
class ScanStats:
    dirs_scanned: int = 0
    files_found: int = 0
    files_digested: int = 0
    skipped: int = 0
    errors: int = 0
    aborted: bool = False
    _lock: Lock = field(default_factory=Lock, init=False, repr=False, compare=False)

    def incr(self, name: str, n: int = 1) -> None:
        with self._lock:
            setattr(self, name, getattr(self, name) + n)

    def mark_aborted(self) -> None:
        with self._lock:
            self.aborted = True

    def as_dict(self) -> Dict[str, Union[int, bool]]:
        with self._lock:
            return {
                f.name: getattr(self, f.name)
                for f in fields(self)
                if not f.name.startswith("_")
            }
