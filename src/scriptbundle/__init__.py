"""
scriptbundle - JavaScript bundling with render-once, content-hashed output.

Debug mode serves every member script individually; release mode
concatenates and minifies them into one cache-busted file.
"""

from __future__ import annotations

from ._version import get_version
from .bundle import JavaScriptBundle, javascript
from .cache import BundleCache, DebugRenderCache, get_bundle_cache, get_debug_cache
from .debug import DebugStatusReader
from .errors import (
    BundleError,
    FileProcessingError,
    KeyNotFoundError,
    ManifestError,
    UnknownMinifierError,
)
from .files import AssetFileSystem, LocalFileSystem
from .hasher import content_hash
from .minifiers import JavaScriptMinifier, MinifierRegistry, default_registry

__version__ = get_version()

__all__ = [
    "__version__",
    "JavaScriptBundle",
    "javascript",
    "BundleCache",
    "DebugRenderCache",
    "get_bundle_cache",
    "get_debug_cache",
    "DebugStatusReader",
    "AssetFileSystem",
    "LocalFileSystem",
    "content_hash",
    "JavaScriptMinifier",
    "MinifierRegistry",
    "default_registry",
    "BundleError",
    "FileProcessingError",
    "KeyNotFoundError",
    "ManifestError",
    "UnknownMinifierError",
]
