"""
Minifier registry and minifier selection.

``JavaScriptMinifier`` is the closed set of choices a bundle can make.
:func:`minifier_identifier` turns a choice into a registry identifier and
never fails: anything it does not recognise resolves to the default
identifier, which every registry built by :func:`create_default_registry`
contains.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum

from ..errors import UnknownMinifierError
from .compressors import (
    BUILTIN_COMPRESSORS,
    Compressor,
    JsMinCompressor,
    NullCompressor,
    RJsMinCompressor,
    RJsMinKeepBangCompressor,
)

logger = logging.getLogger(__name__)

DEFAULT_IDENTIFIER = RJsMinKeepBangCompressor.identifier


class JavaScriptMinifier(str, Enum):
    """Minifier choices exposed to bundle builders and manifests."""

    NULL = "null"
    JSMIN = "jsmin"
    RJSMIN = "rjsmin"
    RJSMIN_KEEP_BANG = "rjsmin-keep-bang"
    DEFAULT = "default"


_IDENTIFIERS: dict[JavaScriptMinifier, str] = {
    JavaScriptMinifier.NULL: NullCompressor.identifier,
    JavaScriptMinifier.JSMIN: JsMinCompressor.identifier,
    JavaScriptMinifier.RJSMIN: RJsMinCompressor.identifier,
    JavaScriptMinifier.RJSMIN_KEEP_BANG: RJsMinKeepBangCompressor.identifier,
    JavaScriptMinifier.DEFAULT: DEFAULT_IDENTIFIER,
}


def minifier_identifier(minifier: JavaScriptMinifier | str) -> str:
    """Map a minifier choice to its registry identifier.

    Unknown values (including arbitrary strings) map to
    :data:`DEFAULT_IDENTIFIER` rather than raising.
    """
    if not isinstance(minifier, JavaScriptMinifier):
        try:
            minifier = JavaScriptMinifier(minifier)
        except ValueError:
            logger.debug("Unmapped minifier %r, using %s", minifier, DEFAULT_IDENTIFIER)
            return DEFAULT_IDENTIFIER
    return _IDENTIFIERS.get(minifier, DEFAULT_IDENTIFIER)


class MinifierRegistry:
    """Maps identifiers to compressor instances."""

    def __init__(self, compressors: list[Compressor] | None = None) -> None:
        self._compressors: dict[str, Compressor] = {}
        for compressor in compressors or []:
            self.register(compressor)

    def register(self, compressor: Compressor) -> None:
        """Add a compressor, replacing any previous one with the same identifier."""
        self._compressors[compressor.identifier] = compressor

    def get(self, identifier: str) -> Compressor:
        """Return the compressor registered under *identifier*.

        Raises:
            UnknownMinifierError: If nothing is registered under it.
        """
        try:
            return self._compressors[identifier]
        except KeyError:
            raise UnknownMinifierError(identifier, list(self._compressors)) from None

    def identifiers(self) -> list[str]:
        """Registered identifiers, in registration order."""
        return list(self._compressors)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._compressors


def create_default_registry() -> MinifierRegistry:
    """Build a registry holding every built-in compressor."""
    return MinifierRegistry([cls() for cls in BUILTIN_COMPRESSORS])


# ── Module-level singleton ──────────────────────────────────────────

_registry: MinifierRegistry | None = None
_registry_lock = threading.Lock()


def default_registry() -> MinifierRegistry:
    """Get or create the process-wide registry."""
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = create_default_registry()
    return _registry
