"""
Bundle manifest loading.

Bundles can be declared in a ``scriptbundle.toml`` next to the assets::

    [settings]
    root = "static"
    base_url = "/static/"
    debug = false
    gzip = false
    minifier = "default"

    [[bundles]]
    name = "app"
    output = "~/js/app-#.js"
    files = ["~/js/a.js", "~/js/b.js"]
    remote = [{ local = "~/js/jquery.js", uri = "https://cdn.example.com/jquery.min.js" }]

``SCRIPTBUNDLE_ROOT`` overrides ``settings.root`` and ``SCRIPTBUNDLE_DEBUG``
forces ``settings.debug`` on.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationError

from .bundle import ROOT_ENV_VAR, JavaScriptBundle
from .cache import BundleCache, DebugRenderCache
from .debug import DebugStatusReader, env_debug_enabled
from .errors import ManifestError
from .files import LocalFileSystem
from .minifiers import JavaScriptMinifier, MinifierRegistry

logger = logging.getLogger(__name__)

MANIFEST_FILE = "scriptbundle.toml"


@dataclass
class BundleSettings:
    """Settings shared by every bundle in a manifest."""

    root: Path = field(default_factory=lambda: Path("."))
    base_url: str = "/"
    debug: bool = False
    gzip: bool = False
    minifier: JavaScriptMinifier = JavaScriptMinifier.DEFAULT


class SettingsSpec(BaseModel):
    """The raw ``[settings]`` table."""

    root: str = "."
    base_url: str = "/"
    debug: StrictBool = False
    gzip: StrictBool = False
    minifier: str = JavaScriptMinifier.DEFAULT.value

    model_config = ConfigDict(frozen=True, extra="forbid")


class RemoteScript(BaseModel):
    """A CDN script with a local copy served in debug mode."""

    local: str
    uri: str

    model_config = ConfigDict(frozen=True)


class BundleSpec(BaseModel):
    """One ``[[bundles]]`` entry."""

    name: str = Field(min_length=1)
    output: str = Field(min_length=1)
    files: list[str] = Field(default_factory=list)
    remote: list[RemoteScript] = Field(default_factory=list)
    minifier: JavaScriptMinifier | None = None
    render_only_if_missing: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")


@dataclass
class BundleManifest:
    """Settings and bundle declarations loaded from scriptbundle.toml."""

    settings: BundleSettings
    bundles: list[BundleSpec] = field(default_factory=list)
    path: Path | None = None

    def get(self, name: str) -> BundleSpec:
        for spec in self.bundles:
            if spec.name == name:
                return spec
        raise ManifestError(f"No bundle named {name!r} in {self.path or MANIFEST_FILE}")

    def file_system(self) -> LocalFileSystem:
        return LocalFileSystem(self.settings.root, self.settings.base_url)

    def build(
        self,
        spec: BundleSpec,
        *,
        debug: bool | None = None,
        cache: BundleCache | None = None,
        debug_cache: DebugRenderCache | None = None,
        registry: MinifierRegistry | None = None,
    ) -> JavaScriptBundle:
        """Create a bundle populated from *spec*.

        *debug* overrides ``settings.debug`` when given.
        """
        ambient = self.settings.debug if debug is None else debug
        bundle = JavaScriptBundle(
            debug_status=DebugStatusReader(ambient),
            file_system=self.file_system(),
            cache=cache,
            debug_cache=debug_cache,
            registry=registry,
            gzip=self.settings.gzip,
        )
        bundle.with_minifier(spec.minifier or self.settings.minifier)
        if spec.render_only_if_missing:
            bundle.render_only_if_output_file_missing()
        for remote in spec.remote:
            bundle.add_remote(remote.local, remote.uri)
        for path in spec.files:
            bundle.add(path)
        return bundle


def _parse_settings(data: dict, path: Path) -> BundleSettings:
    try:
        raw = SettingsSpec.model_validate(data)
    except ValidationError as e:
        raise ManifestError(f"Invalid settings in {path}: {e}") from e

    root = Path(os.environ.get(ROOT_ENV_VAR) or raw.root)
    if not root.is_absolute():
        root = path.parent / root

    try:
        minifier = JavaScriptMinifier(raw.minifier)
    except ValueError:
        logger.warning("Unknown minifier %r in settings, using default", raw.minifier)
        minifier = JavaScriptMinifier.DEFAULT

    return BundleSettings(
        root=root,
        base_url=raw.base_url,
        debug=raw.debug or env_debug_enabled(),
        gzip=raw.gzip,
        minifier=minifier,
    )


def load_manifest(path: Path) -> BundleManifest:
    """Load and validate a manifest file.

    Raises:
        ManifestError: If the file is missing, not valid TOML, or the settings
            table or a bundle entry fails validation.
    """
    if not path.exists():
        raise ManifestError(f"Manifest not found: {path}")

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"Invalid TOML in {path}: {e}") from e

    settings = _parse_settings(data.get("settings", {}), path)

    bundles: list[BundleSpec] = []
    for index, entry in enumerate(data.get("bundles", [])):
        try:
            bundles.append(BundleSpec.model_validate(entry))
        except ValidationError as e:
            raise ManifestError(f"Invalid bundle #{index + 1} in {path}: {e}") from e

    names = [b.name for b in bundles]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ManifestError(f"Duplicate bundle names in {path}: {', '.join(duplicates)}")

    logger.debug("Loaded %d bundle(s) from %s", len(bundles), path)
    return BundleManifest(settings=settings, bundles=bundles, path=path)
