"""Debug-status capability for bundles."""

from __future__ import annotations

import os

DEBUG_ENV_VAR = "SCRIPTBUNDLE_DEBUG"


def env_debug_enabled() -> bool:
    """Whether ``SCRIPTBUNDLE_DEBUG`` asks for debug rendering."""
    return os.environ.get(DEBUG_ENV_VAR, "0").strip().lower() in ("1", "true", "yes", "on")


class DebugStatusReader:
    """Reports whether bundles should render in debug mode.

    The ambient status comes from *debug* when given, else from the
    ``SCRIPTBUNDLE_DEBUG`` environment variable at query time.
    :meth:`force_debug` and :meth:`force_release` override it for
    whichever bundle owns this reader.
    """

    def __init__(self, debug: bool | None = None) -> None:
        self._ambient = debug
        self._forced: bool | None = None

    def is_debugging_enabled(self) -> bool:
        if self._forced is not None:
            return self._forced
        if self._ambient is not None:
            return self._ambient
        return env_debug_enabled()

    def force_debug(self) -> None:
        self._forced = True

    def force_release(self) -> None:
        self._forced = False
