"""
Semantic version validation.

Requested versions must match the Semantic Versioning 2.0.0 grammar exactly:
MAJOR.MINOR.PATCH with optional pre-release and build metadata. Inputs are
never trimmed or repaired; the validated string is used verbatim in cache
keys and download URLs.
"""

import re

from pyembedkit.core.exceptions import InvalidVersionError

# ASCII digits only
_NUMERIC = r"0|[1-9][0-9]*"
_PRERELEASE_ID = r"(?:0|[1-9][0-9]*|[0-9]*[a-zA-Z-][0-9a-zA-Z-]*)"
_BUILD_ID = r"[0-9a-zA-Z-]+"

SEMVER_PATTERN = re.compile(
    rf"(?P<major>{_NUMERIC})\.(?P<minor>{_NUMERIC})\.(?P<patch>{_NUMERIC})"
    rf"(?:-(?P<prerelease>{_PRERELEASE_ID}(?:\.{_PRERELEASE_ID})*))?"
    rf"(?:\+(?P<build>{_BUILD_ID}(?:\.{_BUILD_ID})*))?"
)


def is_valid_version(raw: str) -> bool:
    """
    Check whether a string is a valid semantic version.

    Example:
        >>> is_valid_version("3.14.0")
        True
        >>> is_valid_version("3.14")
        False
    """
    if not isinstance(raw, str):
        return False
    return SEMVER_PATTERN.fullmatch(raw) is not None


def validate_version(raw: str) -> str:
    """
    Validate a requested version string.

    Args:
        raw: Version string as supplied by the caller

    Returns:
        The same string, unchanged

    Raises:
        InvalidVersionError: If the string is not a semantic version. The
            exception's ``raw`` attribute holds the input verbatim.
    """
    if not is_valid_version(raw):
        raise InvalidVersionError(raw)
    return raw


__all__ = ["SEMVER_PATTERN", "is_valid_version", "validate_version"]
