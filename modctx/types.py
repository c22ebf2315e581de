"""
Core value types shared across modctx.

- VersionCondition: how a requested version is matched at install time
- VersionConstraint: a condition paired with its version
- ModuleRef: one entry in a context manifest
- ModuleVersion: a (name, version) pair from the dependency list builder
- ModuleData: transient registry lookup result
- InstalledModule: a module copy materialized on disk
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from modctx.errors import ParseError


class VersionCondition(str, Enum):
    """Version-matching strategy for an install request."""

    MINIMUM = "MinimumVersion"
    MAXIMUM = "MaximumVersion"
    REQUIRED = "RequiredVersion"

    @classmethod
    def parse(cls, value: str | None) -> VersionCondition:
        """Parse a serialized condition, defaulting to ``RequiredVersion``."""
        if not value:
            return cls.REQUIRED
        for member in cls:
            if member.value.lower() == value.lower():
                return member
        raise ParseError(f"Unknown version condition: {value!r}")


@dataclass(frozen=True)
class VersionConstraint:
    """
    A version requirement passed to the registry client.

    Attributes:
        condition: How the version is matched.
        version: The version the condition applies to.
    """

    condition: VersionCondition
    version: str

    @classmethod
    def required(cls, version: str) -> VersionConstraint:
        return cls(VersionCondition.REQUIRED, version)


@dataclass
class ModuleRef:
    """
    A module entry in a context manifest.

    Attributes:
        name: Module name (unique within a manifest, case-insensitive).
        version: Version string.
        condition: Matching strategy used when the module is installed.
    """

    name: str
    version: str
    condition: VersionCondition = VersionCondition.REQUIRED

    @property
    def constraint(self) -> VersionConstraint:
        return VersionConstraint(self.condition, self.version)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "name": self.name,
            "version": self.version,
            "condition": self.condition.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModuleRef:
        """Create from dictionary."""
        try:
            name = data["name"]
            version = data["version"]
        except (KeyError, TypeError) as e:
            raise ParseError(f"Malformed module entry: {data!r}") from e
        return cls(
            name=str(name),
            version=str(version),
            condition=VersionCondition.parse(data.get("condition")),
        )


@dataclass(frozen=True)
class ModuleVersion:
    """A module name and exact version."""

    name: str
    version: str


@dataclass
class ModuleData:
    """
    Result of a registry lookup for one module.

    Attributes:
        name: Module name as reported by the registry.
        version: Version found.
        dependencies: Canonical ids of declared dependencies, in order.
    """

    name: str
    version: str
    dependencies: list[str] = field(default_factory=list)


@dataclass
class InstalledModule:
    """
    A module copy visible on the local filesystem.

    Attributes:
        name: Module name.
        version: Installed version.
        base_path: Directory holding the module, by convention
            ``<root>/<name>/<version>``.
    """

    name: str
    version: str
    base_path: str

    @property
    def path(self) -> Path:
        return Path(self.base_path)
