"""
Version parsing, comparison, and manifest version synthesis.

Manifest versions are four-part ``major.minor.build.revision`` strings:

- ``major.minor`` are carried over from the previous manifest (``1.0`` for
  a new one)
- ``build`` is the number of UTC calendar days since 2000-01-01
- ``revision`` is the number of seconds since local midnight, halved and
  rounded

Regenerating a manifest later on the same day, or on a later day, never
yields a smaller version for the same ``major.minor``.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from itertools import zip_longest

from modctx.errors import ParseError

EPOCH = date(2000, 1, 1)

# 2-3 numeric groups, plus an optional 4th (revision) group
VERSION_PATTERN = re.compile(r"^\d+(\.\d+){1,3}$")


def is_version_string(value: str) -> bool:
    """Return ``True`` if *value* looks like a dotted numeric version."""
    return bool(VERSION_PATTERN.match(value))


def parse_version(value: str) -> tuple[int, ...]:
    """
    Parse a dotted numeric version into a tuple of ints.

    Args:
        value: Version string such as ``"2.10.0"``.

    Returns:
        Tuple of version segments, e.g. ``(2, 10, 0)``.

    Raises:
        ParseError: If any segment is not numeric.
    """
    try:
        return tuple(int(part) for part in value.strip().split("."))
    except ValueError:
        raise ParseError(f"Invalid version string: {value!r}") from None


def compare_versions(left: str, right: str) -> int:
    """
    Compare two versions segment by segment.

    Missing trailing segments count as zero, so ``1.0`` equals ``1.0.0``.

    Returns:
        Negative if *left* < *right*, zero if equal, positive otherwise.
    """
    for a, b in zip_longest(parse_version(left), parse_version(right), fillvalue=0):
        if a != b:
            return -1 if a < b else 1
    return 0


def synthesize_version(prior: str | None = None, now: datetime | None = None) -> str:
    """
    Build a new manifest version from the clock.

    Args:
        prior: Version of the manifest being replaced, if any. Its
            ``major.minor`` prefix is kept.
        now: Time of generation. Defaults to the current local time. Naive
            datetimes are interpreted as local time.

    Returns:
        A four-part version string.

    Raises:
        ParseError: If *prior* is given but has fewer than two numeric
            segments.
    """
    major, minor = 1, 0
    if prior:
        parts = parse_version(prior)
        if len(parts) < 2:
            raise ParseError(f"Cannot seed version from {prior!r}")
        major, minor = parts[0], parts[1]

    if now is None:
        now = datetime.now().astimezone()

    build = (now.astimezone(timezone.utc).date() - EPOCH).days
    seconds = now.hour * 3600 + now.minute * 60 + now.second + now.microsecond / 1e6
    revision = round(seconds / 2)

    return f"{major}.{minor}.{build}.{revision}"
