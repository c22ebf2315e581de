"""Shared fixtures: a filesystem-backed fake registry."""

from __future__ import annotations

from pathlib import Path

import pytest

from modctx.types import InstalledModule, ModuleData, VersionConstraint


class FakeRegistry:
    """
    RegistryClient backed by a directory tree.

    ``shared`` plays the runtime's shared module location: installs land in
    ``shared/<name>/<version>`` and ``list_local_modules`` reports every
    ``<name>/<version>`` directory that currently exists there.
    """

    def __init__(self, shared: Path) -> None:
        self.shared = shared
        self.shared.mkdir(parents=True, exist_ok=True)
        self.catalog: dict[tuple[str, str], ModuleData] = {}
        self.substitutes: dict[tuple[str, str], str] = {}
        self.failures: dict[str, Exception] = {}
        self.loaded: list[InstalledModule] = []
        self.calls: list[tuple] = []

    # -- test setup helpers --

    def publish(self, name: str, version: str, dependencies: list[str] | None = None) -> None:
        self.catalog[(name, version)] = ModuleData(name, version, list(dependencies or []))

    def place(self, name: str, version: str) -> Path:
        path = self.shared / name / version
        path.mkdir(parents=True, exist_ok=True)
        (path / f"{name}.psd1").write_text(f"@{{ ModuleVersion = '{version}' }}")
        return path

    @property
    def registry_calls(self) -> list[tuple]:
        return [c for c in self.calls if c[0] in ("find_module", "install_module")]

    # -- RegistryClient --

    def find_module(self, name, version=None):
        self.calls.append(("find_module", name, version))
        return self.catalog.get((name, version))

    def install_module(self, name, constraint: VersionConstraint):
        self.calls.append(("install_module", name, constraint))
        if name in self.failures:
            raise self.failures[name]
        version = self.substitutes.get((name, constraint.version), constraint.version)
        path = self.place(name, version)
        return InstalledModule(name, version, str(path))

    def list_local_modules(self, name=None):
        self.calls.append(("list_local_modules", name))
        modules = []
        for module_dir in sorted(p for p in self.shared.iterdir() if p.is_dir()):
            if name is not None and module_dir.name.lower() != name.lower():
                continue
            for version_dir in sorted(p for p in module_dir.iterdir() if p.is_dir()):
                modules.append(
                    InstalledModule(module_dir.name, version_dir.name, str(version_dir))
                )
        return modules

    def list_loaded_modules(self):
        self.calls.append(("list_loaded_modules",))
        return list(self.loaded)


@pytest.fixture
def registry(tmp_path) -> FakeRegistry:
    return FakeRegistry(tmp_path / "shared")


@pytest.fixture
def context_root(tmp_path) -> Path:
    return tmp_path / "contexts" / "dev"
