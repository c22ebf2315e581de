"""
Context activation (``modctx set``).

Activation installs every module a manifest pins into the context's own
module directory, then hands a :class:`SessionEnvironment` with that
directory first on the module search path to a session launcher.

The first activation of a root with no manifest only takes a snapshot; the
manifest it writes drives installs on the next activation.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from modctx.config import ContextConfig
from modctx.installer import ModuleInstaller
from modctx.launcher import SessionEnvironment
from modctx.layout import provision_directory
from modctx.manifest import ContextManifest
from modctx.snapshot import new_context

if TYPE_CHECKING:
    from modctx.launcher import SessionLauncher
    from modctx.registry import RegistryClient

logger = logging.getLogger(__name__)


def install_manifest(
    manifest: ContextManifest,
    registry: RegistryClient,
    config: ContextConfig | None = None,
) -> None:
    """
    Install every module listed in *manifest*, in order.

    The first failure propagates and the remaining modules are not attempted.
    """
    config = config or ContextConfig()
    layout = config.context.layout(manifest.root)
    installer = ModuleInstaller(registry)
    for ref in manifest.modules:
        installer.install(ref, layout)


def set_context(
    root: str | Path,
    registry: RegistryClient,
    launcher: SessionLauncher | None = None,
    config: ContextConfig | None = None,
) -> SessionEnvironment:
    """
    Activate the context at *root*.

    Args:
        root: Context root directory.
        registry: Client used for lookups and installs.
        launcher: Session launcher to hand off to. ``None`` skips the launch.
        config: Layout and runtime settings. Defaults apply if ``None``.

    Returns:
        The session environment that was (or would be) launched.

    Raises:
        NotFoundError, ParseError, InstallError: From the install pass.
        UnsupportedPlatformError: From the launcher.
    """
    config = config or ContextConfig()
    layout = config.context.layout(root)
    manifest_path = layout.manifest_path()

    modules_dir = provision_directory(layout.modules_dir_path())

    if manifest_path.exists():
        manifest = ContextManifest.load(manifest_path)
        logger.info(
            f"Activating {manifest.name} {manifest.version} "
            f"({len(manifest.modules)} modules)"
        )
        install_manifest(manifest, registry, config)
    else:
        logger.info(f"No manifest for {layout.name}, taking a snapshot")
        new_context(layout.root, registry, config)

    environment = SessionEnvironment(
        working_directory=layout.root,
        module_paths=[modules_dir],
        variable=config.runtime.module_path_variable,
    )

    if launcher is not None:
        launcher.launch(environment)
    return environment
