"""
Registry protocol: The package-manager boundary used by the reconciliation engine.

A RegistryClient answers four questions:
- What does the remote registry know about a module? (find_module)
- Install a module from the registry (install_module)
- Which module copies are visible on disk? (list_local_modules)
- Which modules are loaded in the user's session? (list_loaded_modules)

Implementations handle runtime-specific details (command syntax, output
parsing) behind this uniform protocol.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from modctx.types import InstalledModule, ModuleData, VersionConstraint


@runtime_checkable
class RegistryClient(Protocol):
    """Protocol for registry/package-manager backends."""

    def find_module(self, name: str, version: str | None = None) -> ModuleData | None:
        """
        Look a module up in the remote registry.

        Args:
            name: Module name.
            version: Exact version to look up, or ``None`` for the latest.

        Returns:
            The module's metadata, or ``None`` if the registry has no match.
        """
        ...

    def install_module(
        self, name: str, constraint: VersionConstraint
    ) -> InstalledModule | None:
        """
        Install a module into the runtime's shared module location.

        The publisher check is skipped and the installed module is passed
        through to the caller.

        Returns:
            The installed module, or ``None`` if nothing was reported.

        Raises:
            RegistryError: If the install fails.
        """
        ...

    def list_local_modules(self, name: str | None = None) -> list[InstalledModule]:
        """List module copies visible without a network call."""
        ...

    def list_loaded_modules(self) -> list[InstalledModule]:
        """List modules currently loaded in the user's session."""
        ...
