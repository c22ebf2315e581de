"""
ModuleInstaller: Materializes a module and its dependencies inside a context.

For each (name, version) pair of a module's dependency list the installer
prefers, in order:

1. The copy already inside the context (nothing to do)
2. A copy of any exact local match (shared source left in place)
3. A fresh registry install, moved into the context when the registry
   produced the exact version, otherwise copied at the version the registry
   reports it installed

Any failure stops the whole operation; nothing is retried or skipped.
"""

from __future__ import annotations

import logging
from functools import cmp_to_key
from pathlib import Path
from typing import TYPE_CHECKING

from modctx.dependencies import build_dependency_list
from modctx.errors import InstallError, NotFoundError, RegistryError
from modctx.layout import ContextLayout
from modctx.transfer import TransferMode, transfer_module
from modctx.types import ModuleRef, VersionConstraint
from modctx.versioning import compare_versions, is_version_string

if TYPE_CHECKING:
    from modctx.registry import RegistryClient

logger = logging.getLogger(__name__)


class ModuleInstaller:
    """
    Installs modules into a context's isolated module directory.

    Example:
        installer = ModuleInstaller(registry)
        installer.install(ModuleRef("Pester", "5.5.0"), config.context.layout(root))
    """

    def __init__(self, registry: RegistryClient) -> None:
        self.registry = registry

    def install(self, ref: ModuleRef, layout: ContextLayout | Path) -> None:
        """
        Install *ref* and its declared dependencies.

        Args:
            ref: The module to install.
            layout: Target context layout (or its root path).

        Raises:
            NotFoundError: If the registry does not know the module.
            ParseError: If a dependency canonical id is malformed.
            InstallError: If an install or filesystem step fails.
        """
        if not isinstance(layout, ContextLayout):
            layout = ContextLayout(Path(layout))

        if layout.module_path(ref.name, ref.version).exists():
            logger.info(f"{ref.name} {ref.version} already present in {layout.name}")
            return

        data = self.registry.find_module(ref.name, ref.version)
        if data is None:
            raise NotFoundError(ref.name, ref.version)

        for index, entry in enumerate(build_dependency_list(data)):
            if index == 0:
                constraint = VersionConstraint(ref.condition, entry.version)
            else:
                constraint = VersionConstraint.required(entry.version)
            self.install_one(entry.name, constraint, layout)

    def install_one(
        self, name: str, constraint: VersionConstraint, layout: ContextLayout
    ) -> None:
        """
        Install a single module without looking at its dependencies.

        Raises:
            InstallError: Wrapping the underlying registry or filesystem
                failure, prefixed with the module name and version.
        """
        version = constraint.version
        target = layout.module_path(name, version)
        if target.exists():
            logger.info(f"{name} {version} already present at {target}")
            return

        modules_dir = layout.modules_dir_path()
        try:
            if transfer_module(self.registry, name, version, modules_dir, TransferMode.COPY):
                return

            installed = self.registry.install_module(name, constraint)
            if installed is not None and installed.version == version:
                self._transfer_installed(name, version, modules_dir, TransferMode.MOVE)
                return

            if installed is not None:
                actual = installed.version
            else:
                actual = self._discover_version(name)
                if actual is None:
                    raise RegistryError(f"No local copy of {name} found after install")
            logger.info(f"Registry produced {name} {actual} for requested {version}")
            if layout.module_path(name, actual).exists():
                return
            self._transfer_installed(name, actual, modules_dir, TransferMode.COPY)
        except (OSError, RegistryError) as e:
            raise InstallError(name, version, e) from e

    def _transfer_installed(
        self, name: str, version: str, modules_dir: Path, mode: TransferMode
    ) -> None:
        if not transfer_module(self.registry, name, version, modules_dir, mode):
            raise RegistryError(f"Installed {name} {version} is not locally visible")

    def _discover_version(self, name: str) -> str | None:
        """Return the highest locally visible version of *name*."""
        folded = name.casefold()
        versions = [
            module.version
            for module in self.registry.list_local_modules(name)
            if module.name.casefold() == folded
        ]
        if not versions:
            return None
        numeric = [v for v in versions if is_version_string(v)]
        if not numeric:
            return versions[0]
        return max(numeric, key=cmp_to_key(compare_versions))
