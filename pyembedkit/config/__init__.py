"""
Configuration for pyembedkit.

Settings come from an optional pyembedkit.yaml file, the environment, and
command-line overrides.
"""

from pyembedkit.config.settings import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_TOOL_NAME,
    DEFAULT_DISPLAY_NAME,
    DEFAULT_URL_TEMPLATE,
    InstallerSettings,
    load_settings,
)

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "DEFAULT_TOOL_NAME",
    "DEFAULT_DISPLAY_NAME",
    "DEFAULT_URL_TEMPLATE",
    "InstallerSettings",
    "load_settings",
]
