"""
Versions command implementation.

Lists the complete cached versions of the tool for the host architecture.
"""

import logging

from pyembedkit.config.settings import load_settings
from pyembedkit.core.exceptions import SettingsError
from pyembedkit.core.platform import detect_platform_spec, resolve_arch
from pyembedkit.core.tool_cache import ToolCache
from pyembedkit.installer.orchestrator import UNSUPPORTED_OS_MESSAGE

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the versions command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    overrides = {"tool_name": args.tool_name, "cache_dir": args.cache_dir}

    try:
        settings = load_settings(config_path=args.config, overrides=overrides)
    except SettingsError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    spec = detect_platform_spec()
    if not spec.os_supported:
        logger.error(UNSUPPORTED_OS_MESSAGE)
        return 1

    arch = resolve_arch(spec.arch)
    if arch is None:
        logger.error(f"Unsupported architecture: {spec.arch}")
        return 1

    cache = ToolCache(settings.cache_dir, lock_timeout=settings.lock_timeout)
    versions = cache.find_all_versions(settings.tool_name, arch)

    if not versions:
        logger.info(f"No cached {settings.display_name} versions for {arch}")
        return 0

    for version in versions:
        print(version)
    return 0
