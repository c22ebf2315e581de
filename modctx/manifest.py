"""
ContextManifest: The persisted description of a context.

The manifest file is the single source of truth for:
- Which modules (and exact versions) a context pins
- Where the context root lives (``path`` / ``name``)
- Which generation of the snapshot this is (``version``)

Manifests live at ``<root>/Context/Context_<name>.json`` and are written as
indented UTF-8 JSON::

    {
      "version": "1.0.9422.21600",
      "name": "dev",
      "path": "/work/contexts",
      "modules": [
        {"name": "Pester", "version": "5.5.0", "condition": "RequiredVersion"}
      ]
    }
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from modctx.errors import ParseError
from modctx.types import ModuleRef

logger = logging.getLogger(__name__)


@dataclass
class ContextManifest:
    """
    A versioned snapshot of a module set.

    Attributes:
        version: Four-part synthetic version.
        name: Context name (last segment of the context root).
        path: Parent directory of the context root.
        modules: Pinned modules, in snapshot order.
    """

    version: str
    name: str
    path: str
    modules: list[ModuleRef] = field(default_factory=list)

    @property
    def root(self) -> Path:
        """The context root this manifest describes."""
        return Path(self.path) / self.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "version": self.version,
            "name": self.name,
            "path": self.path,
            "modules": [ref.to_dict() for ref in self.modules],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ContextManifest:
        """Create from dictionary.

        Raises:
            ParseError: If a required field is missing or malformed.
        """
        if not isinstance(data, dict):
            raise ParseError(f"Manifest must be a JSON object, got {type(data).__name__}")
        try:
            version = data["version"]
            name = data["name"]
            path = data["path"]
        except KeyError as e:
            raise ParseError(f"Manifest is missing field {e.args[0]!r}") from None

        modules_raw = data.get("modules")
        if modules_raw is None:
            modules_raw = []
        if not isinstance(modules_raw, list):
            raise ParseError("Manifest field 'modules' must be a list")

        return cls(
            version=str(version),
            name=str(name),
            path=str(path),
            modules=[ModuleRef.from_dict(item) for item in modules_raw],
        )

    def save(self, path: Path) -> None:
        """
        Write the manifest to *path*, replacing any existing file.

        Args:
            path: Destination JSON file.
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
        logger.info(f"Wrote manifest {self.name} {self.version} to {path}")

    @classmethod
    def load(cls, path: Path) -> ContextManifest:
        """
        Load a manifest from *path*.

        Raises:
            FileNotFoundError: If the file does not exist.
            ParseError: If the file is not a valid manifest.
        """
        text = path.read_text(encoding="utf-8-sig")
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid manifest JSON in {path}: {e}") from e
        return cls.from_dict(data)
