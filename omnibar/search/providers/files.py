"""
File Provider - Filename search under a few configured roots.

Walks each root breadth-first down to ``max_depth``, skipping hidden
entries, and yields matches as soon as they are found so a slow disk only
delays its own results. Cancellation is checked once per directory.
"""

import os
from collections import deque
from pathlib import Path
from typing import Iterable, Iterator

from loguru import logger

from omnibar.search.cancellation import CancellationToken
from omnibar.search.models import Category, OpenFile, Result
from omnibar.search.provider import Provider
from omnibar.search.scoring import relevance


class FileProvider(Provider):
    """Match file and folder names containing the query."""

    name = "files"

    def __init__(self, roots: Iterable[str | Path], max_depth: int = 3, max_results: int = 20):
        self.roots = [Path(r).expanduser() for r in roots]
        self.max_depth = max_depth
        self.max_results = max_results

    def search(self, query: str, cancel: CancellationToken) -> Iterator[Result]:
        q = query.strip().lower()
        if not q:
            return

        seen: set[str] = set()
        found = 0
        for root in self.roots:
            for entry in self._walk(root, cancel):
                if entry.path in seen or q not in entry.name.lower():
                    continue
                seen.add(entry.path)
                yield self._to_result(entry, query)
                found += 1
                if found >= self.max_results:
                    return

    def _walk(self, root: Path, cancel: CancellationToken) -> Iterator[os.DirEntry]:
        queue = deque([(root, 0)])
        while queue:
            if cancel.cancelled:
                return
            directory, depth = queue.popleft()
            try:
                with os.scandir(directory) as it:
                    entries = sorted(it, key=lambda e: e.name)
            except OSError as e:
                logger.debug(f"Skipping {directory}: {e}")
                continue

            for entry in entries:
                if entry.name.startswith("."):
                    continue
                yield entry
                if depth + 1 < self.max_depth and entry.is_dir(follow_symlinks=False):
                    queue.append((Path(entry.path), depth + 1))

    def _to_result(self, entry: os.DirEntry, query: str) -> Result:
        is_dir = entry.is_dir(follow_symlinks=False)
        return Result(
            id=entry.path,
            title=entry.name,
            subtitle=entry.path,
            icon="folder" if is_dir else "text-x-generic",
            category=Category.FILE,
            action=OpenFile(entry.path),
            relevance_score=relevance(entry.name, query),
        )
