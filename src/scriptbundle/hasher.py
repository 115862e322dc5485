"""Content hashing for cache-busting bundle URLs."""

from __future__ import annotations

import hashlib

HASH_LENGTH = 16


def content_hash(content: str) -> str:
    """Return a short, stable hex digest of *content*.

    The same text always yields the same digest, so the hash can be
    embedded in filenames or query strings and only changes when the
    minified bundle changes.
    """
    return hashlib.sha256(content.encode("utf-8")).hexdigest()[:HASH_LENGTH]
