"""
modctx: Reproducible module contexts for a scripting runtime.

A context is a named, versioned snapshot of a module set: a manifest file
plus an isolated module directory. Snapshot the modules a session uses, and
later restore exactly that set and start a session pinned to it.

Example:
    import modctx

    registry = modctx.PowerShellRegistry()

    # Record what the current session uses
    manifest = modctx.new_context("/work/contexts/dev", registry)

    # Later: install the pinned modules and get a session environment
    env = modctx.set_context("/work/contexts/dev", registry)
    print(env.module_path)
"""

__version__ = "0.1.0"

from modctx.activate import install_manifest, set_context
from modctx.config import ContextConfig
from modctx.dependencies import CanonicalId, build_dependency_list, parse_canonical_id
from modctx.errors import (
    ContextError,
    InstallError,
    NotFoundError,
    ParseError,
    RegistryError,
    UnsupportedPlatformError,
)
from modctx.installer import ModuleInstaller
from modctx.launcher import LauncherRegistry, SessionEnvironment, SessionLauncher
from modctx.layout import ContextLayout, provision_directory
from modctx.manifest import ContextManifest
from modctx.registry import PowerShellRegistry, RegistryClient
from modctx.snapshot import merge_module_refs, new_context, parse_module_path
from modctx.transfer import TransferMode, transfer_module
from modctx.types import (
    InstalledModule,
    ModuleData,
    ModuleRef,
    ModuleVersion,
    VersionCondition,
    VersionConstraint,
)
from modctx.versioning import compare_versions, synthesize_version

__all__ = [
    # Operations
    "new_context",
    "set_context",
    "install_manifest",
    "ModuleInstaller",
    "transfer_module",
    "TransferMode",
    "build_dependency_list",
    "parse_canonical_id",
    "merge_module_refs",
    "parse_module_path",
    "provision_directory",
    "synthesize_version",
    "compare_versions",
    # Types
    "CanonicalId",
    "ContextConfig",
    "ContextLayout",
    "ContextManifest",
    "InstalledModule",
    "ModuleData",
    "ModuleRef",
    "ModuleVersion",
    "VersionCondition",
    "VersionConstraint",
    # Boundaries
    "RegistryClient",
    "PowerShellRegistry",
    "SessionLauncher",
    "SessionEnvironment",
    "LauncherRegistry",
    # Errors
    "ContextError",
    "InstallError",
    "NotFoundError",
    "ParseError",
    "RegistryError",
    "UnsupportedPlatformError",
]
