"""Built-in listing cache.

Holds the rendered invoice listing per path for the lifetime of the
store. ``revalidate_path`` evicts the entry so the next read recomputes
it from the database.

Each path carries a generation number bumped on every revalidation. Rows
computed while a revalidation lands are returned to the caller but not
stored, so a concurrent write is never masked by a stale listing.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from invoicectl.plugins.hookspecs import hookimpl

logger = logging.getLogger(__name__)


class ListingCache:
    """Path-keyed cache of listing rows, invalidated via ``revalidate_path``."""

    def __init__(self) -> None:
        self._entries: dict[str, list[dict[str, Any]]] = {}
        self._generations: dict[str, int] = {}
        self._lock = threading.Lock()
        self.revalidations: list[str] = []

    def get_or_compute(
        self, path: str, compute: Callable[[], list[dict[str, Any]]]
    ) -> tuple[list[dict[str, Any]], bool]:
        """Return ``(rows, hit)`` for *path*, computing and storing on a miss."""
        with self._lock:
            cached = self._entries.get(path)
            generation = self._generations.get(path, 0)
        if cached is not None:
            return cached, True

        rows = compute()
        with self._lock:
            if self._generations.get(path, 0) == generation:
                self._entries[path] = rows
            else:
                logger.debug("Discarded listing computed across a revalidation: %s", path)
        return rows, False

    def is_cached(self, path: str) -> bool:
        with self._lock:
            return path in self._entries

    @hookimpl
    def revalidate_path(self, path: str) -> None:
        with self._lock:
            self._entries.pop(path, None)
            self._generations[path] = self._generations.get(path, 0) + 1
            self.revalidations.append(path)
        logger.debug("Revalidated path: %s", path)
