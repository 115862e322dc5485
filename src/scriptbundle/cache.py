"""
Process-wide caches for rendered bundle markup.

:class:`BundleCache` holds release renders and implements "render once":
an entry is written a single time per key and never replaced until
:meth:`BundleCache.clear`. Writers serialize on one lock covering the
whole cache and must re-check :meth:`BundleCache.contains_key` after
entering :meth:`BundleCache.exclusive`, since another thread may have
populated the key while they waited::

    if not cache.contains_key(key):
        with cache.exclusive():
            if not cache.contains_key(key):
                cache.add(key, render(), files)
    return cache.get(key)

:class:`DebugRenderCache` holds debug renders, which are recomputed and
overwritten on every render.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from .errors import KeyNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """Rendered markup plus the member files that produced it."""

    markup: str
    files: tuple[str, ...] = field(default_factory=tuple)


class BundleCache:
    """Render-once cache of release markup, keyed by bundle name.

    Reads do not lock. Dict lookups and ``setdefault`` are atomic, so
    readers may interleave with the one writer holding :meth:`exclusive`.
    """

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def contains_key(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> str:
        """Return cached markup for *key*.

        Raises:
            KeyNotFoundError: If *key* was never added.
        """
        return self._entry(key).markup

    def get_files(self, key: str) -> list[str]:
        """Return the resolved member files recorded for *key*."""
        return list(self._entry(key).files)

    def add(self, key: str, markup: str, files: list[str] | None = None) -> None:
        """Insert an entry unless *key* is already present."""
        entry = CacheEntry(markup=markup, files=tuple(files or ()))
        if self._entries.setdefault(key, entry) is not entry:
            logger.debug("Bundle %s already cached, keeping existing entry", key)

    def clear(self) -> None:
        """Drop every entry. Meant for tests and explicit resets."""
        with self._lock:
            self._entries.clear()

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        """Hold the cache-wide writer lock."""
        with self._lock:
            yield

    def keys(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def _entry(self, key: str) -> CacheEntry:
        try:
            return self._entries[key]
        except KeyError:
            raise KeyNotFoundError(key) from None


class DebugRenderCache:
    """Latest debug markup per bundle name. Always overwritten."""

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}

    def set(self, key: str, markup: str) -> None:
        self._entries[key] = markup

    def contains_key(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> str:
        try:
            return self._entries[key]
        except KeyError:
            raise KeyNotFoundError(key) from None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


# ── Module-level singletons ─────────────────────────────────────────

_bundle_cache: BundleCache | None = None
_debug_cache: DebugRenderCache | None = None
_singleton_lock = threading.Lock()


def get_bundle_cache() -> BundleCache:
    """Get or create the process-wide bundle cache."""
    global _bundle_cache
    if _bundle_cache is None:
        with _singleton_lock:
            if _bundle_cache is None:
                _bundle_cache = BundleCache()
    return _bundle_cache


def get_debug_cache() -> DebugRenderCache:
    """Get or create the process-wide debug render cache."""
    global _debug_cache
    if _debug_cache is None:
        with _singleton_lock:
            if _debug_cache is None:
                _debug_cache = DebugRenderCache()
    return _debug_cache
