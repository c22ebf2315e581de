"""
Registry module: Access to the runtime's package manager.

Provides:
- RegistryClient: Protocol consumed by the installer and snapshotter
- PowerShellRegistry: PowerShellGet implementation
- create_registry: Build the configured client
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from modctx.registry.base import RegistryClient
from modctx.registry.powershell import PowerShellRegistry

if TYPE_CHECKING:
    from modctx.config import ContextConfig


def create_registry(config: ContextConfig) -> RegistryClient:
    """Create the registry client for *config*'s runtime."""
    return PowerShellRegistry(executable=config.runtime.executable)


__all__ = ["RegistryClient", "PowerShellRegistry", "create_registry"]
