from __future__ import annotations
from dataclasses import dataclass, field
import logging
import os
import os.path
from pathlib import Path
import stat
from typing import List, Sequence, Set, Tuple, Union
from .results import ScanStats
from .workqueue import QueueClosed, WorkQueue

log = logging.getLogger(__name__)

# Pseudo-filesystems whose "files" are device nodes, process state or kernel
# parameters rather than stored content
DEFAULT_SKIP_PREFIXES = ("/dev", "/proc", "/sys")

AnyPath = Union[str, Path]


def matches_prefix(path: str, prefixes: Sequence[str]) -> bool:
    """
    Test whether ``path`` equals or lies beneath any of ``prefixes``.
    Comparison is done per path component, so ``/proc`` matches
    ``/proc/self/status`` but not ``/processes``.
    """
    for prefix in prefixes:
        if path == prefix:
            return True
        if path.startswith(prefix.rstrip(os.sep) + os.sep):
            return True
    return False


@dataclass
class TreeWalker:
    """
    Walks a directory tree and puts the canonical path of every regular file
    it finds into ``queue``.

    Failures to list a directory or to examine an entry are logged and the
    affected branch is skipped; the rest of the tree is still walked.  Entries
    that are neither regular files nor directories (sockets, FIFOs, device
    nodes, broken symlinks, entries that vanish mid-walk) are ignored without
    a diagnostic.
    """

    queue: WorkQueue[Path]
    skip_prefixes: Sequence[AnyPath] = DEFAULT_SKIP_PREFIXES
    follow_symlinks: bool = True
    stats: ScanStats = field(default_factory=ScanStats)
    _enqueued: Set[Path] = field(default_factory=set, init=False, repr=False)

    def __post_init__(self) -> None:
        # Each prefix is matched both as given and with symlinks resolved, so
        # that it also excludes the canonical paths of files beneath it
        prefixes: List[str] = []
        for p in self.skip_prefixes:
            for form in (os.path.abspath(os.fspath(p)), os.path.realpath(p)):
                if form not in prefixes:
                    prefixes.append(form)
        self.skip_prefixes = tuple(prefixes)

    def is_skipped(self, path: AnyPath) -> bool:
        return matches_prefix(os.fspath(path), self.skip_prefixes)

    def walk(self, root: AnyPath) -> None:
        """
        Enqueue every regular file under ``root``.  Raises `QueueClosed` if
        the queue stops accepting paths before the walk is complete.
        """
        self._enqueued.clear()
        rootpath = os.path.abspath(os.fspath(root))
        if self.is_skipped(rootpath):
            log.info("Skipping excluded path %s", rootpath)
            self.stats.incr("skipped")
            return
        try:
            st = os.stat(rootpath)
            if stat.S_ISREG(st.st_mode):
                self.enqueue(rootpath)
                return
        except OSError as e:
            log.error("Failed to scan %s: %s", rootpath, e)
            self.stats.incr("errors")
            return
        if stat.S_ISDIR(st.st_mode):
            self._walk_tree(rootpath, (st.st_dev, st.st_ino))
        else:
            log.debug("Ignoring non-regular file %s", rootpath)

    def _walk_tree(self, rootpath: str, rootkey: Tuple[int, int]) -> None:
        visited = {rootkey}
        dirs = [rootpath]
        while dirs:
            dirpath = dirs.pop()
            try:
                with os.scandir(dirpath) as it:
                    entries = list(it)
            except OSError as e:
                log.error("Failed to read directory %s: %s", dirpath, e)
                self.stats.incr("errors")
                continue
            self.stats.incr("dirs_scanned")
            for entry in entries:
                try:
                    self._scan_entry(entry, dirs, visited)
                except FileNotFoundError:
                    log.debug("Ignoring vanished entry %s", entry.path)
                except OSError as e:
                    log.error("Failed to scan %s: %s", entry.path, e)
                    self.stats.incr("errors")

    def _scan_entry(
        self,
        entry: os.DirEntry,
        dirs: List[str],
        visited: Set[Tuple[int, int]],
    ) -> None:
        if self.is_skipped(entry.path):
            log.debug("Skipping excluded path %s", entry.path)
            self.stats.incr("skipped")
            return
        if not self.follow_symlinks and entry.is_symlink():
            log.debug("Ignoring symlink %s", entry.path)
            return
        if entry.is_dir():
            if entry.is_symlink() and self.is_skipped(os.path.realpath(entry.path)):
                log.debug("Skipping symlink into excluded path %s", entry.path)
                self.stats.incr("skipped")
                return
            st = entry.stat()
            key = (st.st_dev, st.st_ino)
            if key in visited:
                log.debug("Directory %s already visited", entry.path)
                return
            visited.add(key)
            dirs.append(entry.path)
        elif entry.is_file():
            self.enqueue(entry.path)
        else:
            log.debug("Ignoring non-regular file %s", entry.path)

    def enqueue(self, path: AnyPath) -> None:
        try:
            canonical = Path(path).resolve(strict=True)
        except FileNotFoundError:
            log.debug("Ignoring vanished file %s", path)
            return
        if self.is_skipped(canonical):
            log.debug("Skipping %s: resolves to excluded path %s", path, canonical)
            self.stats.incr("skipped")
            return
        if canonical in self._enqueued:
            log.debug("Skipping %s: %s already enqueued", path, canonical)
            return
        try:
            self.queue.put(canonical)
        except QueueClosed as e:
            log.error("Failed to enqueue %s: %s", canonical, e)
            raise
        self._enqueued.add(canonical)
        self.stats.incr("files_found")
