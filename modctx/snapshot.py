"""
Context snapshots (``modctx new``).

A snapshot records every module a context should pin:

- modules already materialized under ``<root>/Modules/<name>/<version>``
- modules loaded in the user's session, minus the runtime's built-in
  modules and the excluded tool modules

Candidates are raw directory paths. Only paths whose last segment is a
dotted numeric version become entries; duplicates collapse onto the highest
version while keeping the position of the first occurrence.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

from modctx.config import ContextConfig
from modctx.manifest import ContextManifest
from modctx.types import ModuleRef, ModuleVersion, VersionCondition
from modctx.versioning import compare_versions, is_version_string, synthesize_version

if TYPE_CHECKING:
    from modctx.registry import RegistryClient

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[\\/]+")


def parse_module_path(path: str) -> ModuleVersion | None:
    """
    Read ``<name>/<version>`` from the last two segments of *path*.

    Both ``/`` and ``\\`` separate segments, so paths reported by a Windows
    runtime parse the same way as POSIX ones.

    Returns:
        The module name and version, or ``None`` if the last segment is not
        a version.
    """
    segments = [s for s in _SEPARATORS.split(path.strip()) if s]
    if len(segments) < 2:
        return None
    name, version = segments[-2], segments[-1]
    if not is_version_string(version):
        return None
    return ModuleVersion(name, version)


def merge_module_refs(entries: Iterable[ModuleVersion]) -> list[ModuleRef]:
    """
    Deduplicate *entries* by name, keeping the highest version.

    The first occurrence of a name fixes its position; later occurrences
    only replace the version when it is strictly greater. Names compare
    case-insensitively.
    """
    merged: list[ModuleRef] = []
    index: dict[str, int] = {}

    for entry in entries:
        key = entry.name.casefold()
        if key not in index:
            index[key] = len(merged)
            merged.append(
                ModuleRef(entry.name, entry.version, VersionCondition.REQUIRED)
            )
            continue

        current = merged[index[key]]
        if compare_versions(entry.version, current.version) > 0:
            logger.debug(f"{entry.name}: {entry.version} supersedes {current.version}")
            current.version = entry.version

    return merged


def _materialized_candidates(modules_dir: Path) -> list[str]:
    """Directories one and two levels below *modules_dir*, sorted."""
    candidates: list[str] = []
    for module_dir in sorted(p for p in modules_dir.iterdir() if p.is_dir()):
        candidates.append(str(module_dir))
        candidates.extend(
            str(p) for p in sorted(module_dir.iterdir()) if p.is_dir()
        )
    return candidates


def _loaded_candidates(registry: RegistryClient, config: ContextConfig) -> list[str]:
    candidates: list[str] = []
    for module in registry.list_loaded_modules():
        if config.runtime.is_builtin(module.base_path):
            logger.debug(f"Skipping built-in module {module.name}")
            continue
        if config.context.is_excluded(module.name):
            logger.debug(f"Skipping excluded module {module.name}")
            continue
        candidates.append(module.base_path)
    return candidates


def new_context(
    root: str | Path,
    registry: RegistryClient,
    config: ContextConfig | None = None,
    now: datetime | None = None,
) -> ContextManifest:
    """
    Snapshot the current module set into ``<root>/Context/Context_<name>.json``.

    Args:
        root: Context root directory.
        registry: Client used to list loaded modules.
        config: Layout and exclusion settings. Defaults apply if ``None``.
        now: Clock override for the manifest version.

    Returns:
        The manifest that was written.
    """
    config = config or ContextConfig()
    layout = config.context.layout(root)

    layout.ensure_directories()

    candidates = _materialized_candidates(layout.modules_dir_path())
    candidates += _loaded_candidates(registry, config)

    entries = []
    for candidate in candidates:
        parsed = parse_module_path(candidate)
        if parsed is None:
            logger.debug(f"Not a module version directory: {candidate}")
            continue
        entries.append(parsed)

    modules = merge_module_refs(entries)

    manifest_path = layout.manifest_path()
    prior = None
    if manifest_path.exists():
        prior = ContextManifest.load(manifest_path).version

    manifest = ContextManifest(
        version=synthesize_version(prior, now),
        name=layout.name,
        path=str(layout.parent),
        modules=modules,
    )
    manifest.save(manifest_path)
    logger.info(f"Snapshot of {layout.name} recorded {len(modules)} modules")
    return manifest
