"""Pluggable JavaScript compressors and the registry that selects them."""

from .compressors import (
    Compressor,
    JsMinCompressor,
    NullCompressor,
    RJsMinCompressor,
    RJsMinKeepBangCompressor,
)
from .registry import (
    DEFAULT_IDENTIFIER,
    JavaScriptMinifier,
    MinifierRegistry,
    create_default_registry,
    default_registry,
    minifier_identifier,
)

__all__ = [
    "Compressor",
    "NullCompressor",
    "JsMinCompressor",
    "RJsMinCompressor",
    "RJsMinKeepBangCompressor",
    "DEFAULT_IDENTIFIER",
    "JavaScriptMinifier",
    "MinifierRegistry",
    "create_default_registry",
    "default_registry",
    "minifier_identifier",
]
