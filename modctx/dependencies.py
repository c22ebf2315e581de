"""
Dependency list construction from registry metadata.

Registries report each dependency as a canonical id of the form::

    <provider>:<name>/<version>#<source>

for example ``powershellget:Az.Accounts/[2.2.3]#PSGallery``. The version
token may be bracketed (``[2.2.3]``) or a range (``[2.0,3.0)``); ranges
resolve to their first non-empty bound.

Only the root module's declared dependencies are flattened. Dependencies of
dependencies are not followed.
"""

from __future__ import annotations

from dataclasses import dataclass

from modctx.errors import ParseError
from modctx.types import ModuleData, ModuleVersion

_BRACKETS = "[]()"


@dataclass(frozen=True)
class CanonicalId:
    """
    A parsed dependency canonical id.

    Attributes:
        provider: Package provider token (e.g. ``powershellget``).
        name: Dependency name.
        version: Dependency version with brackets removed.
        source: Repository token, or ``None`` if absent.
    """

    provider: str
    name: str
    version: str
    source: str | None = None


def _split(value: str, delimiter: str) -> tuple[str, str | None]:
    head, sep, tail = value.partition(delimiter)
    return head, (tail if sep else None)


def _strip_version(token: str) -> str:
    bare = token.strip().strip(_BRACKETS)
    # A range keeps its first bound: "1.0,2.0" -> "1.0", ",2.0" -> "2.0"
    bounds = [bound.strip() for bound in bare.split(",") if bound.strip()]
    return bounds[0] if bounds else ""


def parse_canonical_id(value: str) -> CanonicalId:
    """
    Parse a dependency canonical id.

    Args:
        value: Canonical id string.

    Returns:
        The parsed :class:`CanonicalId`.

    Raises:
        ParseError: If the name or version token is missing or empty.
    """
    provider, rest = _split(value.strip(), ":")
    if rest is None:
        raise ParseError(f"Canonical id has no provider separator ':': {value!r}")

    name, rest = _split(rest, "/")
    if rest is None or not name.strip():
        raise ParseError(f"Canonical id has no module name: {value!r}")

    version_token, source = _split(rest, "#")
    version = _strip_version(version_token)
    if not version:
        raise ParseError(f"Canonical id has no module version: {value!r}")

    return CanonicalId(
        provider=provider.strip(),
        name=name.strip(),
        version=version,
        source=source.strip() if source else None,
    )


def build_dependency_list(data: ModuleData) -> list[ModuleVersion]:
    """
    Flatten a module and its declared dependencies into install order.

    Args:
        data: Registry metadata for the root module.

    Returns:
        The root module at position 0 followed by each declared dependency
        in registry order.

    Raises:
        ParseError: If any dependency canonical id is malformed.
    """
    entries = [ModuleVersion(data.name, data.version)]
    for canonical_id in data.dependencies:
        parsed = parse_canonical_id(canonical_id)
        entries.append(ModuleVersion(parsed.name, parsed.version))
    return entries
