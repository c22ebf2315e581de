"""
Exception types raised by modctx.

Filesystem failures (directory creation, move, copy) surface as the
built-in :class:`OSError`. Everything else derives from
:class:`ContextError` so callers can catch the whole family at the CLI
boundary.
"""

from __future__ import annotations


class ContextError(Exception):
    """Base class for all modctx errors."""


class NotFoundError(ContextError, LookupError):
    """A module is absent from the registry."""

    def __init__(self, name: str, version: str | None = None) -> None:
        self.name = name
        self.version = version
        label = f"{name} {version}" if version else name
        super().__init__(
            f"Module {label} was not found in the registry. It may not be "
            f"compatible with the edition of the runtime in use."
        )


class ParseError(ContextError, ValueError):
    """A canonical id, version string, or manifest could not be parsed."""


class RegistryError(ContextError):
    """The registry client failed to complete a request."""


class InstallError(ContextError):
    """Installing one module into a context failed.

    The message is the underlying failure prefixed with the module name and
    version; the original exception is chained as ``__cause__``.
    """

    def __init__(self, name: str, version: str, cause: BaseException) -> None:
        self.name = name
        self.version = version
        super().__init__(f"{name} {version}: {cause}")


class UnsupportedPlatformError(ContextError):
    """No session launcher is registered for the current platform."""
