"""Semantic version checks for declared dependency versions."""

import re

import nodesemver

# Range operators and other prefixes like `^3.0.1`, `~2.1.0`, `>=1.0.0`, `v1.2.3`
_PREFIX = re.compile(r"^\D*")


def strip_range_prefix(version: str) -> str:
    """Remove any leading non-digit characters from a version string."""
    return _PREFIX.sub("", version, count=1)


def is_valid_version(declared: str | None, required: str) -> bool:
    """Determine whether a declared version meets or exceeds a requirement.

    Args:
        declared: The version the project declares, possibly with range syntax
        required: A range expression or a bare minimum version

    Returns:
        True if the declared version satisfies ``required`` or is at least
        the version ``required`` names
    """
    if not declared:
        return False

    version = strip_range_prefix(declared)
    if not nodesemver.valid(version, False):
        return False

    if nodesemver.satisfies(version, required, False):
        return True

    floor = strip_range_prefix(required)
    if not nodesemver.valid(floor, False):
        return False

    return nodesemver.gte(version, floor, False)
