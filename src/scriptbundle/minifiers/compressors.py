"""
JavaScript compressor strategies.

Each compressor is a pure text transform identified by a short string.
The heavy lifting is delegated to the ``jsmin`` and ``rjsmin`` libraries.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import jsmin
import rjsmin


@runtime_checkable
class Compressor(Protocol):
    """A named, side-effect-free JavaScript transform."""

    identifier: str

    def compress(self, content: str) -> str: ...


class NullCompressor:
    """Pass content through untouched."""

    identifier = "null"

    def compress(self, content: str) -> str:
        return content


class JsMinCompressor:
    """Basic comment and whitespace stripping (Crockford's jsmin port)."""

    identifier = "jsmin"

    def compress(self, content: str) -> str:
        return jsmin.jsmin(content)


class RJsMinCompressor:
    """Regex-based jsmin, strips every comment including license blocks."""

    identifier = "rjsmin"

    def compress(self, content: str) -> str:
        return rjsmin.jsmin(content, keep_bang_comments=False)


class RJsMinKeepBangCompressor:
    """Regex-based jsmin that preserves ``/*! ... */`` license comments."""

    identifier = "rjsmin-keep-bang"

    def compress(self, content: str) -> str:
        return rjsmin.jsmin(content, keep_bang_comments=True)


BUILTIN_COMPRESSORS: tuple[type, ...] = (
    NullCompressor,
    JsMinCompressor,
    RJsMinCompressor,
    RJsMinKeepBangCompressor,
)
