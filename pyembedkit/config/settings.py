"""Installer settings.

Settings are layered, later layers winning:

1. Built-in defaults
2. YAML file (``pyembedkit.yaml`` in the working directory, or ``--config``)
3. Environment variables
4. Explicit overrides (CLI flags)

Example pyembedkit.yaml::

    version: "3.14.0"
    tool_name: python-embedded
    cache_dir: D:/toolcache
    download_timeout: 60
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from pyembedkit.core.directory import TEMP_ENV_VARS, TOOL_CACHE_ENV_VARS
from pyembedkit.core.exceptions import SettingsError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "pyembedkit.yaml"
DEFAULT_TOOL_NAME = "python-embedded"
DEFAULT_DISPLAY_NAME = "Python"
DEFAULT_URL_TEMPLATE = (
    "https://www.python.org/ftp/python/{version}/python-{version}-embed-{arch}.zip"
)
VERSION_ENV_VARS = ("PYEMBEDKIT_VERSION", "INPUT_VERSION")


@dataclass(frozen=True)
class InstallerSettings:
    """Complete installer configuration."""

    version: Optional[str] = None
    tool_name: str = DEFAULT_TOOL_NAME
    display_name: str = DEFAULT_DISPLAY_NAME
    url_template: str = DEFAULT_URL_TEMPLATE
    cache_dir: Optional[Path] = None  # None: resolved from environment
    temp_dir: Optional[Path] = None
    download_timeout: int = 30
    lock_timeout: int = 30


_STRING_FIELDS = ("version", "tool_name", "display_name", "url_template")
_PATH_FIELDS = ("cache_dir", "temp_dir")
_INT_FIELDS = ("download_timeout", "lock_timeout")


def load_settings(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> InstallerSettings:
    """
    Load installer settings from file, environment and overrides.

    Args:
        config_path: Explicit YAML file (must exist). If None, uses
            ./pyembedkit.yaml when present.
        environ: Environment mapping (defaults to os.environ)
        overrides: Values that take precedence over everything else;
            None values are ignored

    Returns:
        Validated InstallerSettings

    Raises:
        SettingsError: If the file or any value is invalid
    """
    environ = os.environ if environ is None else environ

    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise SettingsError(f"Configuration file not found: {config_path}")
    else:
        default_path = Path.cwd() / DEFAULT_CONFIG_FILE
        config_path = default_path if default_path.exists() else None

    values: Dict[str, Any] = {}
    if config_path is not None:
        values.update(_load_yaml(config_path))
        logger.debug(f"Loaded settings from {config_path}")

    values.update(_from_environment(environ))

    for name, value in (overrides or {}).items():
        if value is not None:
            values[name] = value

    return _build(values)


def _load_yaml(config_path: Path) -> Dict[str, Any]:
    """Parse a YAML settings file into a raw dictionary."""
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SettingsError(f"{config_path} must contain a mapping at top level")
    return data


def _from_environment(environ: Mapping[str, str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for field_name, names in (
        ("version", VERSION_ENV_VARS),
        ("cache_dir", TOOL_CACHE_ENV_VARS),
        ("temp_dir", TEMP_ENV_VARS),
    ):
        for name in names:
            if environ.get(name):
                values[field_name] = environ[name]
                break
    return values


def _build(values: Dict[str, Any]) -> InstallerSettings:
    """Validate raw values and build InstallerSettings."""
    known = {f.name for f in fields(InstallerSettings)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise SettingsError(f"Unknown setting(s): {', '.join(unknown)}")

    parsed: Dict[str, Any] = {}
    for name, value in values.items():
        if name in _STRING_FIELDS:
            # YAML reads unquoted 3.14 as a float; insist on strings
            if not isinstance(value, str):
                raise SettingsError(
                    f"{name} must be a string, got {type(value).__name__}: {value!r}"
                )
            parsed[name] = value
        elif name in _PATH_FIELDS:
            if not isinstance(value, (str, Path)) or not str(value):
                raise SettingsError(f"{name} must be a path, got {value!r}")
            parsed[name] = Path(value).expanduser()
        elif name in _INT_FIELDS:
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise SettingsError(f"{name} must be a positive integer, got {value!r}")
            parsed[name] = value

    settings = replace(InstallerSettings(), **parsed)
    _validate_url_template(settings.url_template)
    return settings


def _validate_url_template(template: str):
    try:
        template.format(version="0.0.0", arch="amd64")
    except (AttributeError, KeyError, IndexError, ValueError) as e:
        raise SettingsError(
            f"Invalid url_template {template!r}: only {{version}} and {{arch}} "
            f"placeholders are allowed ({e})"
        ) from e


__all__ = [
    "DEFAULT_CONFIG_FILE",
    "DEFAULT_TOOL_NAME",
    "DEFAULT_DISPLAY_NAME",
    "DEFAULT_URL_TEMPLATE",
    "VERSION_ENV_VARS",
    "InstallerSettings",
    "load_settings",
]
