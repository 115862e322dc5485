"""
JavaScript bundles.

A :class:`JavaScriptBundle` collects member scripts through a fluent
builder and renders them either as one tag per file (debug) or as a
single minified, content-hashed output file (release)::

    tags = (
        javascript()
        .add("~/js/jquery.min.js")
        .add("~/js/app.js")
        .with_minifier(JavaScriptMinifier.JSMIN)
        .render("~/js/combined-#.js")
    )

Release renders are cached per key for the life of the process (see
:mod:`scriptbundle.cache`); the output file is minified and written at
most once per key. A ``#`` in the output path is replaced by the content
hash, otherwise the hash is appended as an ``r`` query parameter.
"""

from __future__ import annotations

import logging
import os

from .cache import BundleCache, DebugRenderCache, get_bundle_cache, get_debug_cache
from .debug import DebugStatusReader
from .errors import FileProcessingError
from .files import AssetFileSystem, LocalFileSystem
from .hasher import content_hash
from .logging import log_with_context
from .minifiers import (
    Compressor,
    JavaScriptMinifier,
    MinifierRegistry,
    default_registry,
    minifier_identifier,
)

logger = logging.getLogger(__name__)

SCRIPT_TEMPLATE = '<script type="text/javascript" src="{0}"></script>'
HASH_PLACEHOLDER = "#"
PREMINIFIED_SUFFIX = ".min.js"
ROOT_ENV_VAR = "SCRIPTBUNDLE_ROOT"


class JavaScriptBundle:
    """Builder and renderer for one logical script bundle.

    Collaborators default to the process-wide instances; pass them
    explicitly to isolate a bundle (tests, multiple asset roots).

    Args:
        debug_status: Debug-status capability. Each bundle gets its own by
            default so ``force_debug``/``force_release`` stay local.
        file_system: Path resolution and file IO.
        cache: Release markup cache shared by all bundles.
        debug_cache: Debug markup cache shared by all bundles.
        registry: Compressor registry.
        gzip: Also write a ``.gz`` companion next to release output.
    """

    def __init__(
        self,
        debug_status: DebugStatusReader | None = None,
        file_system: AssetFileSystem | None = None,
        cache: BundleCache | None = None,
        debug_cache: DebugRenderCache | None = None,
        registry: MinifierRegistry | None = None,
        *,
        gzip: bool = False,
    ) -> None:
        self.debug_status = debug_status or DebugStatusReader()
        self.file_system = file_system or LocalFileSystem(os.environ.get(ROOT_ENV_VAR, "."))
        self.cache = cache if cache is not None else get_bundle_cache()
        self.debug_cache = debug_cache if debug_cache is not None else get_debug_cache()
        self.registry = registry or default_registry()
        self.gzip = gzip

        self.files: list[str] = []
        self.remote_files: list[str] = []
        self.minifier: JavaScriptMinifier | str = JavaScriptMinifier.DEFAULT
        self.only_if_output_missing = False

    # -- builder ---------------------------------------------------------

    def add(self, path: str) -> JavaScriptBundle:
        """Append a local member. Order is concatenation order; repeats are kept."""
        self.files.append(path)
        return self

    def add_remote(self, local_path: str, remote_uri: str) -> JavaScriptBundle:
        """Reference *remote_uri* in release mode, or serve *local_path* in debug mode."""
        if self.debug_status.is_debugging_enabled():
            self.files.append(local_path)
        else:
            self.remote_files.append(remote_uri)
        return self

    def with_minifier(self, minifier: JavaScriptMinifier | str) -> JavaScriptBundle:
        self.minifier = minifier
        return self

    def render_only_if_output_file_missing(self) -> JavaScriptBundle:
        """Reuse an existing output file instead of minifying again."""
        self.only_if_output_missing = True
        return self

    def force_debug(self) -> JavaScriptBundle:
        self.debug_status.force_debug()
        return self

    def force_release(self) -> JavaScriptBundle:
        self.debug_status.force_release()
        return self

    # -- terminal operations ---------------------------------------------

    def render(self, render_to: str) -> str:
        """Render to *render_to*, using the path itself as the cache key."""
        return self._render(render_to, render_to)

    def as_named(self, name: str, render_to: str) -> str:
        """Render to *render_to* under cache key *name*."""
        return self._render(render_to, name)

    def render_named(self, name: str) -> str:
        """Return markup from an earlier :meth:`as_named` call.

        Raises:
            KeyNotFoundError: If *name* was never rendered in the current mode.
        """
        if self.debug_status.is_debugging_enabled():
            return self.debug_cache.get(name)
        return self.cache.get(name)

    def clear_testing_cache(self) -> None:
        self.debug_cache.clear()
        self.cache.clear()

    # -- pipeline --------------------------------------------------------

    def _render(self, render_to: str, key: str) -> str:
        if self.debug_status.is_debugging_enabled():
            output = self._render_debug()
            self.debug_cache.set(key, output)
            return output

        if not self.cache.contains_key(key):
            with self.cache.exclusive():
                if not self.cache.contains_key(key):
                    markup, files = self._render_release(render_to, key)
                    self.cache.add(key, markup, files)
        else:
            logger.debug("Bundle %s served from cache", key)
        return self.cache.get(key)

    def _render_debug(self) -> str:
        return "".join(SCRIPT_TEMPLATE.format(self.file_system.expand(path)) for path in self.files)

    def _render_release(self, render_to: str, key: str) -> tuple[str, list[str]]:
        files = [self.file_system.resolve(path) for path in self.files]
        compressor = self.registry.get(minifier_identifier(self.minifier))

        minified: str | None = None
        hash_: str | None = None
        hash_in_filename = HASH_PLACEHOLDER in render_to
        if hash_in_filename:
            minified = self._minify(files, compressor, key)
            hash_ = content_hash(minified)
            render_to = render_to.replace(HASH_PLACEHOLDER, hash_)

        output_file = self.file_system.resolve(render_to)

        if self.only_if_output_missing and self.file_system.exists(output_file):
            logger.info("Reusing existing output %s for bundle %s", output_file, key)
            content = self.file_system.read(output_file)
        else:
            content = minified if minified is not None else self._minify(files, compressor, key)
            self.file_system.write(output_file, content)
            if self.gzip:
                self.file_system.write_gzip(output_file + ".gz", content)
            log_with_context(
                logger,
                logging.INFO,
                "Rendered bundle %s: %d file(s) -> %s",
                key,
                len(files),
                output_file,
                bundle=key,
                files=files,
                output=output_file,
                minifier=compressor.identifier,
            )

        if hash_ is None:
            hash_ = content_hash(content)

        path = self.file_system.expand(render_to)
        if not hash_in_filename:
            separator = "&" if "?" in path else "?"
            path = f"{path}{separator}r={hash_}"

        markup = "".join(SCRIPT_TEMPLATE.format(uri) for uri in self.remote_files)
        markup += SCRIPT_TEMPLATE.format(path)
        return markup, files

    def _minify(self, files: list[str], compressor: Compressor, key: str) -> str:
        parts: list[str] = []
        for file in files:
            try:
                content = self.file_system.read(file)
                if file.endswith(PREMINIFIED_SUFFIX):
                    parts.append(content)
                else:
                    parts.append(compressor.compress(content))
            except Exception as e:
                logger.error("Bundle %s failed on %s: %s", key, file, e)
                raise FileProcessingError(file, e, bundle=key) from e
        return "".join(parts)


def javascript(
    *,
    debug: bool | None = None,
    file_system: AssetFileSystem | None = None,
    gzip: bool = False,
) -> JavaScriptBundle:
    """Start a new bundle wired to the process-wide caches and registry."""
    return JavaScriptBundle(
        debug_status=DebugStatusReader(debug),
        file_system=file_system,
        gzip=gzip,
    )
