"""
Session launchers: Platform-specific handoff to an interactive runtime session.

The activator never touches ``os.environ``. It builds a
:class:`SessionEnvironment` describing the working directory and module
search path, and a launcher turns that into a process.

Launchers register themselves per ``sys.platform`` value::

    LauncherRegistry.register("linux", ForegroundLauncher)

    launcher = LauncherRegistry.create(sys.platform, executable="pwsh")
    launcher.launch(environment)
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from modctx.errors import UnsupportedPlatformError

logger = logging.getLogger(__name__)


@dataclass
class SessionEnvironment:
    """
    Everything a launched session needs to see the context's modules.

    Attributes:
        working_directory: Directory the session starts in (the context root).
        module_paths: Directories prepended to the module search path.
        variable: Name of the module search path variable.
        base_env: Environment the session inherits. Defaults to a snapshot
            of ``os.environ`` taken at construction.
    """

    working_directory: Path
    module_paths: list[Path] = field(default_factory=list)
    variable: str = "PSModulePath"
    base_env: dict[str, str] = field(default_factory=lambda: dict(os.environ))

    @property
    def module_path(self) -> str:
        """The module search path value with context directories first."""
        parts = [str(p) for p in self.module_paths]
        existing = self.base_env.get(self.variable, "")
        if existing:
            parts.append(existing)
        return os.pathsep.join(parts)

    def to_env(self) -> dict[str, str]:
        """Build the full environment mapping for the session process."""
        env = dict(self.base_env)
        env[self.variable] = self.module_path
        return env


@runtime_checkable
class SessionLauncher(Protocol):
    """Protocol for platform-specific session handoff."""

    platform: str

    def launch(self, environment: SessionEnvironment) -> int:
        """
        Start a runtime session in *environment*.

        Returns:
            The launcher's exit status (0 when the session was handed off).
        """
        ...


class ConsoleWindowLauncher:
    """Opens the runtime in a new console window (Windows)."""

    platform = "win32"

    def __init__(self, executable: str = "pwsh") -> None:
        self.executable = executable

    def launch(self, environment: SessionEnvironment) -> int:
        logger.info(f"Opening {self.executable} in {environment.working_directory}")
        subprocess.Popen(
            [self.executable, "-NoExit", "-NoLogo"],
            cwd=str(environment.working_directory),
            env=environment.to_env(),
            creationflags=getattr(subprocess, "CREATE_NEW_CONSOLE", 0),
        )
        return 0


class ForegroundLauncher:
    """Runs the runtime in the current terminal until it exits (Linux)."""

    platform = "linux"

    def __init__(self, executable: str = "pwsh") -> None:
        self.executable = executable

    def launch(self, environment: SessionEnvironment) -> int:
        logger.info(f"Starting {self.executable} in {environment.working_directory}")
        result = subprocess.run(
            [self.executable, "-NoLogo"],
            cwd=str(environment.working_directory),
            env=environment.to_env(),
        )
        return result.returncode


class LauncherRegistry:
    """
    Registry mapping ``sys.platform`` values to launcher classes.
    """

    _launchers: dict[str, type] = {}

    @classmethod
    def register(cls, platform: str, launcher_class: type) -> None:
        cls._launchers[platform] = launcher_class

    @classmethod
    def get(cls, platform: str) -> type | None:
        return cls._launchers.get(platform)

    @classmethod
    def create(cls, platform: str | None = None, **config: Any) -> SessionLauncher:
        """
        Create the launcher for *platform* (default: ``sys.platform``).

        Raises:
            UnsupportedPlatformError: If no launcher is registered.
        """
        platform = platform or sys.platform
        launcher_class = cls.get(platform)
        if launcher_class is None:
            registered = ", ".join(cls.platforms()) or "(none)"
            raise UnsupportedPlatformError(
                f"No session launcher for platform {platform!r}. "
                f"Supported platforms: {registered}"
            )
        return launcher_class(**config)

    @classmethod
    def platforms(cls) -> list[str]:
        return list(cls._launchers)


LauncherRegistry.register(ConsoleWindowLauncher.platform, ConsoleWindowLauncher)
LauncherRegistry.register(ForegroundLauncher.platform, ForegroundLauncher)
