"""Shared pytest fixtures for scriptbundle tests."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from scriptbundle.bundle import JavaScriptBundle
from scriptbundle.cache import BundleCache, DebugRenderCache
from scriptbundle.debug import DebugStatusReader
from scriptbundle.files import LocalFileSystem
from scriptbundle.logging import ROOT_LOGGER
from scriptbundle.minifiers import DEFAULT_IDENTIFIER, MinifierRegistry, create_default_registry


class RecordingCompressor:
    """Compressor that uppercases content and records every call."""

    def __init__(self, identifier: str = DEFAULT_IDENTIFIER) -> None:
        self.identifier = identifier
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def compress(self, content: str) -> str:
        with self._lock:
            self.calls.append(content)
        return content.upper()


class CountingFileSystem(LocalFileSystem):
    """LocalFileSystem that counts output writes."""

    def __init__(self, root: Path, base_url: str = "/") -> None:
        super().__init__(root, base_url)
        self.writes: list[str] = []
        self._lock = threading.Lock()

    def write(self, file: str, content: str) -> None:
        with self._lock:
            self.writes.append(file)
        super().write(file, content)


@pytest.fixture
def asset_root(tmp_path: Path) -> Path:
    """Asset root holding a few member scripts."""
    root = tmp_path / "static"
    js = root / "js"
    js.mkdir(parents=True)
    (js / "a.js").write_text("var a = 1;\n")
    (js / "b.js").write_text("var b = 2;\n")
    (js / "vendor.min.js").write_text("var v=3;")
    return root


@pytest.fixture
def file_system(asset_root: Path) -> CountingFileSystem:
    return CountingFileSystem(asset_root, "/static/")


@pytest.fixture
def cache() -> BundleCache:
    return BundleCache()


@pytest.fixture
def debug_cache() -> DebugRenderCache:
    return DebugRenderCache()


@pytest.fixture
def recorder() -> RecordingCompressor:
    return RecordingCompressor()


@pytest.fixture
def registry(recorder: RecordingCompressor) -> MinifierRegistry:
    """Default registry with the fallback identifier swapped for the recorder."""
    registry = create_default_registry()
    registry.register(recorder)
    return registry


@pytest.fixture
def make_bundle(
    file_system: CountingFileSystem,
    cache: BundleCache,
    debug_cache: DebugRenderCache,
    registry: MinifierRegistry,
) -> Callable[..., JavaScriptBundle]:
    """Factory for bundles sharing the isolated caches and filesystem."""

    def _make(debug: bool = False, **kwargs: object) -> JavaScriptBundle:
        return JavaScriptBundle(
            debug_status=DebugStatusReader(debug),
            file_system=file_system,
            cache=cache,
            debug_cache=debug_cache,
            registry=registry,
            **kwargs,
        )

    return _make


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Detach handlers installed by setup_logging (CLI runs included)."""
    yield
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
