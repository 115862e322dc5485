"""
File resolver and IO capability.

Bundles talk to the filesystem only through :class:`AssetFileSystem`.
Paths handed to a bundle are app-relative: ``~/js/app.js`` means
``js/app.js`` under the asset root on disk, and ``{base_url}js/app.js``
in rendered tags. Paths without the ``~/`` prefix are used as given
(relative ones resolved against the asset root).
"""

from __future__ import annotations

import gzip
import logging
import os
import stat
import tempfile
import threading
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

APP_RELATIVE_PREFIX = "~/"


class AssetFileSystem(Protocol):
    """What the render pipeline needs from the filesystem."""

    def resolve(self, path: str) -> str: ...

    def expand(self, path: str) -> str: ...

    def exists(self, file: str) -> bool: ...

    def read(self, file: str) -> str: ...

    def write(self, file: str, content: str) -> None: ...

    def write_gzip(self, file: str, content: str) -> None: ...


def _strip_query(path: str) -> str:
    return path.split("?", 1)[0]


_umask_lock = threading.Lock()


def _current_umask() -> int:
    with _umask_lock:
        mask = os.umask(0)
        os.umask(mask)
    return mask


def _target_mode(target: Path) -> int:
    """Mode a plain open() would give *target*: its current mode, else 0666 minus umask."""
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        return 0o666 & ~_current_umask()


class LocalFileSystem:
    """:class:`AssetFileSystem` backed by a directory on local disk.

    Args:
        root: Asset root that ``~/`` paths map to.
        base_url: URL prefix that replaces ``~/`` in rendered tags.
    """

    def __init__(self, root: Path | str = ".", base_url: str = "/") -> None:
        self.root = Path(root)
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"

    def resolve(self, path: str) -> str:
        """Map an app-relative path (query string ignored) to a file path."""
        path = _strip_query(path)
        if path.startswith(APP_RELATIVE_PREFIX):
            path = path[len(APP_RELATIVE_PREFIX) :]
        candidate = Path(path)
        if candidate.is_absolute():
            return str(candidate)
        return str(self.root / candidate)

    def expand(self, path: str) -> str:
        """Map an app-relative path to the URL used in tags."""
        if path.startswith(APP_RELATIVE_PREFIX):
            return self.base_url + path[len(APP_RELATIVE_PREFIX) :]
        return path

    def exists(self, file: str) -> bool:
        return Path(file).is_file()

    def read(self, file: str) -> str:
        return Path(file).read_text(encoding="utf-8")

    def write(self, file: str, content: str) -> None:
        """Write *content* atomically: temp file in the same directory, then rename."""
        self._write_atomic(Path(file), content.encode("utf-8"))

    def write_gzip(self, file: str, content: str) -> None:
        self._write_atomic(Path(file), gzip.compress(content.encode("utf-8")))

    def _write_atomic(self, target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        mode = _target_mode(target)
        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.chmod(tmp_name, mode)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Wrote %s (%d bytes)", target, len(data))
