"""
Local module transfer: Copy or move an installed module into a context.

Provides:
- find_local_module: Exact name/version lookup among visible modules
- transfer_module: Relocate (MOVE) or duplicate (COPY) the match into
  ``<environment_root>/<name>/<version>``

MOVE narrows the search to the requested name and removes the source, so
the context owns the only copy. COPY searches every visible module and
leaves the source in place for other contexts to share.
"""

from __future__ import annotations

import logging
import shutil
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from modctx.layout import provision_directory

if TYPE_CHECKING:
    from modctx.registry import RegistryClient
    from modctx.types import InstalledModule

logger = logging.getLogger(__name__)


class TransferMode(str, Enum):
    COPY = "copy"
    MOVE = "move"


def find_local_module(
    registry: RegistryClient,
    name: str,
    version: str,
    *,
    narrow: bool = False,
) -> InstalledModule | None:
    """
    Find the first visible module matching *name* and *version* exactly.

    Args:
        registry: Client used to list visible modules.
        name: Module name (compared case-insensitively).
        version: Exact version string.
        narrow: Only list modules named *name* instead of all modules.

    Returns:
        The first match, or ``None``.
    """
    candidates = registry.list_local_modules(name if narrow else None)
    folded = name.casefold()
    for module in candidates:
        if module.name.casefold() == folded and module.version == version:
            return module
    return None


def transfer_module(
    registry: RegistryClient,
    name: str,
    version: str,
    environment_root: Path,
    mode: TransferMode = TransferMode.COPY,
) -> bool:
    """
    Copy or move a locally visible module into *environment_root*.

    Args:
        registry: Client used to list visible modules.
        name: Module name.
        version: Exact version to transfer.
        environment_root: Module directory of the target context.
        mode: ``COPY`` keeps the source, ``MOVE`` removes it.

    Returns:
        ``True`` if a match was found and transferred, ``False`` otherwise.

    Raises:
        OSError: If the copy or move fails.
    """
    match = find_local_module(
        registry, name, version, narrow=mode is TransferMode.MOVE
    )
    if match is None:
        logger.debug(f"No local copy of {name} {version}")
        return False

    source = match.path
    destination = Path(environment_root) / name / version

    if mode is TransferMode.MOVE:
        provision_directory(destination.parent)
        shutil.move(str(source), str(destination))
        logger.info(f"Moved {name} {version} from {source} to {destination}")
    else:
        shutil.copytree(source, destination)
        logger.info(f"Copied {name} {version} from {source} to {destination}")

    return True
