"""
Directory layout for pyembedkit.

Resolves where the tool cache and the scratch space for downloads and
extraction live. CI runners advertise both through environment variables;
elsewhere a per-user directory is used.

Directory Structure:
    Tool cache (~/.pyembedkit/tool-cache or $RUNNER_TOOL_CACHE):
        - <tool>/<version>/<arch>/          : Cached artifact contents
        - <tool>/<version>/<arch>.complete  : Completion marker
        - <tool>/.lock/                     : Store lock files

    Scratch (~/.pyembedkit/tmp or $RUNNER_TEMP):
        - <uuid>                            : Downloaded archives
        - <uuid>/                           : Extracted archives
"""

import os
from pathlib import Path
from typing import Mapping, Optional

from pyembedkit.core.exceptions import SettingsError

TOOL_CACHE_ENV_VARS = ("PYEMBEDKIT_TOOL_CACHE", "RUNNER_TOOL_CACHE")
TEMP_ENV_VARS = ("PYEMBEDKIT_TEMP", "RUNNER_TEMP")


def get_home_dir() -> Path:
    """
    Get the pyembedkit home directory.

    Returns:
        Path: %USERPROFILE%\\.pyembedkit on Windows, ~/.pyembedkit elsewhere

    Raises:
        SettingsError: If USERPROFILE is unset on Windows
    """
    if os.name == "nt":
        user_profile = os.environ.get("USERPROFILE")
        if not user_profile:
            raise SettingsError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine pyembedkit home directory."
            )
        return Path(user_profile) / ".pyembedkit"
    return Path.home() / ".pyembedkit"


def _first_env(names, environ: Mapping[str, str]) -> Optional[Path]:
    for name in names:
        value = environ.get(name)
        if value:
            return Path(value)
    return None


def get_tool_cache_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """
    Get the tool cache root.

    Args:
        environ: Environment mapping (defaults to os.environ)

    Example:
        >>> get_tool_cache_dir({"RUNNER_TOOL_CACHE": "/opt/hostedtoolcache"})
        PosixPath('/opt/hostedtoolcache')
    """
    environ = os.environ if environ is None else environ
    return _first_env(TOOL_CACHE_ENV_VARS, environ) or get_home_dir() / "tool-cache"


def get_temp_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """
    Get the scratch directory for downloads and extraction.

    Args:
        environ: Environment mapping (defaults to os.environ)
    """
    environ = os.environ if environ is None else environ
    return _first_env(TEMP_ENV_VARS, environ) or get_home_dir() / "tmp"


__all__ = ["get_home_dir", "get_tool_cache_dir", "get_temp_dir"]
