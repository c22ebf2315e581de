"""
Context layout: Encapsulates the on-disk structure of a context root.

Centralizes path construction and directory provisioning so the snapshot,
install, and activation code never build paths by hand.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


def provision_directory(path: str | Path, name: str | None = None) -> Path:
    """
    Return the resolved directory at *path* (joined with *name*), creating it
    and any missing parents if needed.

    Existing directories are returned untouched, so repeated calls are safe.

    Args:
        path: Target directory.
        name: Optional sub-directory name appended to *path*.

    Returns:
        The resolved absolute path.

    Raises:
        OSError: If the directory cannot be created.
    """
    target = Path(path)
    if name:
        target = target / name

    if target.exists():
        return target.resolve()

    target.mkdir(parents=True, exist_ok=True)
    logger.debug(f"Created directory {target}")
    return target.resolve()


@dataclass(frozen=True)
class ContextLayout:
    """
    Encapsulates a context root's filesystem layout.

    Default layout:
        {root}/
        ├── Modules/{name}/{version}/...
        └── Context/Context_{context_name}.json

    The context name is the last segment of the root path, and the manifest
    records the root's parent as its ``path``.
    """

    root: Path

    modules_dir: str = "Modules"
    context_dir: str = "Context"
    manifest_prefix: str = "Context_"

    def __repr__(self) -> str:
        """Return a concise string representation."""
        return f"ContextLayout(root={self.root!r})"

    def __post_init__(self) -> None:
        # Normalize root to an absolute Path so name/parent are meaningful
        object.__setattr__(self, "root", Path(self.root).absolute())

    @property
    def name(self) -> str:
        """Context name, derived from the root's last path segment."""
        return self.root.name

    @property
    def parent(self) -> Path:
        """The directory containing the context root."""
        return self.root.parent

    def modules_dir_path(self) -> Path:
        """Path to the isolated module directory."""
        return self.root / self.modules_dir

    def context_dir_path(self) -> Path:
        """Path to the directory holding the manifest."""
        return self.root / self.context_dir

    def manifest_path(self) -> Path:
        """Path to the context manifest JSON file."""
        return self.context_dir_path() / f"{self.manifest_prefix}{self.name}.json"

    def module_path(self, name: str, version: str) -> Path:
        """Path where *name* at *version* lives inside this context."""
        return self.modules_dir_path() / name / version

    def ensure_directories(self) -> None:
        """Create the module and manifest directories if they don't exist."""
        provision_directory(self.modules_dir_path())
        provision_directory(self.context_dir_path())
