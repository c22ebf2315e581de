"""
PowerShellRegistry: PowerShellGet-backed registry client.

Every call spawns the runtime executable, runs a short script, and reads
the result back as JSON. Scripts always emit an array via
``ConvertTo-Json -InputObject @(...)`` so single results and empty results
parse the same way.
"""

from __future__ import annotations

import json
import logging
import subprocess
from typing import Any

from modctx.errors import RegistryError
from modctx.types import InstalledModule, ModuleData, VersionConstraint

logger = logging.getLogger(__name__)

_RECORD = (
    "[pscustomobject]@{ Name = $_.Name; Version = [string]$_.Version; "
    "ModuleBase = $_.ModuleBase }"
)


def quote(value: str) -> str:
    """Quote *value* as a single-quoted PowerShell string literal."""
    return "'" + value.replace("'", "''") + "'"


def _to_json(expression: str) -> str:
    return f"ConvertTo-Json -Compress -Depth 4 -InputObject @({expression})"


class PowerShellRegistry:
    """
    Registry client that drives PowerShellGet through ``pwsh``.

    Args:
        executable: Runtime executable (``pwsh`` or ``powershell``).
        scope: ``Install-Module`` scope.
    """

    def __init__(self, executable: str = "pwsh", scope: str = "CurrentUser") -> None:
        self.executable = executable
        self.scope = scope

    def __repr__(self) -> str:
        return f"PowerShellRegistry(executable={self.executable!r})"

    # ------------------------------------------------------------------
    # Process plumbing
    # ------------------------------------------------------------------

    def _command(self, script: str, *, profile: bool = False) -> list[str]:
        cmd = [self.executable, "-NoLogo", "-NonInteractive"]
        if not profile:
            cmd.append("-NoProfile")
        cmd.extend(["-Command", script])
        return cmd

    def _run(self, script: str, *, profile: bool = False) -> list[dict[str, Any]]:
        """Run *script* and decode its JSON array output."""
        cmd = self._command(script, profile=profile)
        logger.debug(f"Running registry command: {script}")
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise RegistryError(f"Runtime executable not found: {self.executable}") from e

        if result.returncode != 0:
            raise RegistryError(
                f"{self.executable} exited with {result.returncode}: "
                f"{result.stderr.strip()}"
            )

        output = result.stdout.strip()
        if not output:
            return []
        try:
            data = json.loads(output)
        except json.JSONDecodeError as e:
            raise RegistryError(f"Unreadable registry output: {output[:200]!r}") from e
        if isinstance(data, dict):
            return [data]
        return [item for item in data if isinstance(item, dict)]

    @staticmethod
    def _installed(item: dict[str, Any]) -> InstalledModule:
        return InstalledModule(
            name=str(item.get("Name", "")),
            version=str(item.get("Version", "")),
            base_path=str(item.get("ModuleBase") or ""),
        )

    # ------------------------------------------------------------------
    # RegistryClient
    # ------------------------------------------------------------------

    def find_module(self, name: str, version: str | None = None) -> ModuleData | None:
        args = f"-Name {quote(name)}"
        if version:
            args += f" -RequiredVersion {quote(version)}"
        script = (
            f"Find-Module {args} -ErrorAction SilentlyContinue | "
            "Select-Object -First 1 | ForEach-Object { "
            "[pscustomobject]@{ Name = $_.Name; Version = [string]$_.Version; "
            "Dependencies = @($_.Dependencies | ForEach-Object { $_.CanonicalId }) } }"
        )
        items = self._run(_to_json(script))
        if not items:
            return None
        item = items[0]
        return ModuleData(
            name=str(item.get("Name", name)),
            version=str(item.get("Version", version or "")),
            dependencies=[str(dep) for dep in item.get("Dependencies") or [] if dep],
        )

    def install_module(
        self, name: str, constraint: VersionConstraint
    ) -> InstalledModule | None:
        script = (
            f"Install-Module -Name {quote(name)} "
            f"-{constraint.condition.value} {quote(constraint.version)} "
            f"-Scope {self.scope} -Force -AllowClobber -SkipPublisherCheck "
            "-PassThru -ErrorAction Stop | Select-Object -First 1 | ForEach-Object { "
            "[pscustomobject]@{ Name = $_.Name; Version = [string]$_.Version; "
            "ModuleBase = $_.InstalledLocation } }"
        )
        logger.info(f"Installing {name} ({constraint.condition.value} {constraint.version})")
        items = self._run(_to_json(script))
        if not items:
            return None
        return self._installed(items[0])

    def list_local_modules(self, name: str | None = None) -> list[InstalledModule]:
        args = f" -Name {quote(name)}" if name else ""
        script = f"Get-Module -ListAvailable{args} | ForEach-Object {{ {_RECORD} }}"
        return [self._installed(item) for item in self._run(_to_json(script))]

    def list_loaded_modules(self) -> list[InstalledModule]:
        # Profile scripts are what load modules into a session
        script = f"Get-Module | ForEach-Object {{ {_RECORD} }}"
        return [
            self._installed(item)
            for item in self._run(_to_json(script), profile=True)
        ]
