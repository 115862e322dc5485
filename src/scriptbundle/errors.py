"""
Error types for bundle rendering, minifier lookup, and manifest loading.
"""


class BundleError(Exception):
    """Base exception for all scriptbundle errors."""

    def __init__(self, message: str, bundle: str | None = None):
        self.message = message
        self.bundle = bundle
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with the bundle key if available."""
        if self.bundle:
            return f"[{self.bundle}] {self.message}"
        return self.message


class UnknownMinifierError(BundleError):
    """
    Raised when a minifier identifier has no registered compressor.

    The enum-to-identifier mapping always falls back to a registered
    identifier, so this only surfaces for raw identifiers passed straight
    to the registry.
    """

    def __init__(self, identifier: str, known: list[str] | None = None):
        self.identifier = identifier
        self.known = known or []
        message = f"Unknown minifier: {identifier!r}"
        if self.known:
            message += f" (registered: {', '.join(sorted(self.known))})"
        super().__init__(message)


class FileProcessingError(BundleError):
    """
    Raised when a bundle member cannot be read or compressed.

    Examples:
    - Member file missing on disk
    - Undecodable file contents
    - Compressor failing on input it cannot handle

    The offending file and the underlying exception are kept on the error
    so callers can point at the input that broke the build.
    """

    def __init__(self, file: str, cause: BaseException, bundle: str | None = None):
        self.file = file
        self.cause = cause
        super().__init__(f"Error processing {file}: {cause}", bundle=bundle)


class KeyNotFoundError(BundleError, KeyError):
    """Raised when reading a bundle cache key that was never rendered."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Bundle not found in cache: {key!r}")

    def __str__(self) -> str:
        return self.message


class ManifestError(BundleError):
    """
    Raised when scriptbundle.toml cannot be loaded.

    Examples:
    - Manifest file missing
    - Invalid TOML
    - Bundle entry failing schema validation
    """

    pass
