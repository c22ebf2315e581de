"""
ContextConfig: Project-level configuration loader for modctx.

This module provides:

- find_config_file: Walk up directories to locate .modctx.toml
- deep_merge: Recursively merge two dicts (override wins for leaf values)
- RuntimeSettings: How the scripting runtime is invoked
- ContextSettings: Context layout and snapshot exclusions
- ContextConfig: Main config object with a load interface

Configuration is loaded from `.modctx.toml` with optional `.modctx.local.toml`
overrides. Unlike most tools a missing config file is not an error: every
setting has a default.

Example:
    >>> config = ContextConfig.load()
    >>> config.runtime.executable
    'pwsh'
    >>> config.context.layout("/work/ctx/dev").manifest_path()
    PosixPath('/work/ctx/dev/Context/Context_dev.json')
"""

from __future__ import annotations

import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from modctx.layout import ContextLayout

CONFIG_FILENAME = ".modctx.toml"
LOCAL_CONFIG_FILENAME = ".modctx.local.toml"

# Matches $PSHOME-style module roots, e.g. C:\Program Files\PowerShell\7\Modules
# or /opt/microsoft/powershell/7/Modules
DEFAULT_BUILTIN_PATTERN = r"(?i)[\\/](windows)?powershell[\\/][^\\/]+[\\/]modules([\\/]|$)"

# This tool and the prompt-customization module it ships alongside
DEFAULT_EXCLUDED_MODULES = ("modctx", "oh-my-posh")


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Return the nearest `.modctx.toml` at or above *start_dir* (default: cwd)."""
    start = (start_dir or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Overlay *override* onto *base* table by table, returning a new dict."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RuntimeSettings:
    """
    Settings from the ``[runtime]`` table.

    Attributes:
        executable: Runtime executable used for registry calls and sessions.
        module_path_variable: Environment variable holding the module
            search path.
        builtin_module_pattern: Regex matched against a loaded module's
            base path to recognise modules shipped with the runtime.
    """

    executable: str = "pwsh"
    module_path_variable: str = "PSModulePath"
    builtin_module_pattern: str = DEFAULT_BUILTIN_PATTERN

    def is_builtin(self, base_path: str) -> bool:
        """Return ``True`` if *base_path* is inside the runtime's own modules."""
        return re.search(self.builtin_module_pattern, base_path) is not None


@dataclass(frozen=True)
class ContextSettings:
    """
    Settings from the ``[context]`` table.

    Attributes:
        modules_dir: Name of the isolated module directory under a root.
        context_dir: Name of the manifest directory under a root.
        excluded_modules: Loaded modules never recorded in a snapshot
            (matched case-insensitively).
    """

    modules_dir: str = "Modules"
    context_dir: str = "Context"
    excluded_modules: tuple[str, ...] = DEFAULT_EXCLUDED_MODULES

    def layout(self, root: str | Path) -> ContextLayout:
        """Build the :class:`ContextLayout` for *root*."""
        return ContextLayout(
            root=Path(root),
            modules_dir=self.modules_dir,
            context_dir=self.context_dir,
        )

    def is_excluded(self, name: str) -> bool:
        folded = name.casefold()
        return any(folded == excluded.casefold() for excluded in self.excluded_modules)


@dataclass(frozen=True)
class ContextConfig:
    """
    Main configuration loaded from ``.modctx.toml``.

    Typical usage::

        config = ContextConfig.load()
        layout = config.context.layout(root)
    """

    runtime: RuntimeSettings = field(default_factory=RuntimeSettings)
    context: ContextSettings = field(default_factory=ContextSettings)
    source: Path | None = None

    @classmethod
    def load(cls, start_dir: Path | None = None) -> ContextConfig:
        """
        Find and load configuration.

        Walks up from *start_dir* (default: cwd) to locate ``.modctx.toml``
        and deep-merges ``.modctx.local.toml`` from the same directory. When
        no config file exists the defaults are returned.

        Args:
            start_dir: Directory to start searching from.

        Returns:
            A fully-constructed :class:`ContextConfig`.
        """
        config_path = find_config_file(start_dir)
        if config_path is None:
            return cls()

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        local_path = config_path.parent / LOCAL_CONFIG_FILENAME
        if local_path.is_file():
            with open(local_path, "rb") as f:
                data = deep_merge(data, tomllib.load(f))

        return cls.from_dict(data, source=config_path)

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: Path | None = None) -> ContextConfig:
        """
        Create a :class:`ContextConfig` from a parsed TOML dict.

        Unknown keys are ignored; missing keys take their defaults.
        """
        runtime_raw = data.get("runtime", {})
        context_raw = data.get("context", {})

        runtime_defaults = RuntimeSettings()
        runtime = RuntimeSettings(
            executable=runtime_raw.get("executable", runtime_defaults.executable),
            module_path_variable=runtime_raw.get(
                "module_path_variable", runtime_defaults.module_path_variable
            ),
            builtin_module_pattern=runtime_raw.get(
                "builtin_module_pattern", runtime_defaults.builtin_module_pattern
            ),
        )

        context_defaults = ContextSettings()
        context = ContextSettings(
            modules_dir=context_raw.get("modules_dir", context_defaults.modules_dir),
            context_dir=context_raw.get("context_dir", context_defaults.context_dir),
            excluded_modules=tuple(
                context_raw.get("excluded_modules", context_defaults.excluded_modules)
            ),
        )

        return cls(runtime=runtime, context=context, source=source)
