"""
Install command implementation.

Looks up or installs one Python version, evicts other cached versions for
the host architecture and publishes the installed location.
"""

import logging

from pyembedkit.config.settings import load_settings
from pyembedkit.core.exceptions import SettingsError
from pyembedkit.installer.orchestrator import RunStatus, build_installer

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 on success or abort, 1 on failure)
    """
    logger.debug(f"Arguments: {args}")

    overrides = {
        "version": args.python_version,
        "tool_name": args.tool_name,
        "cache_dir": args.cache_dir,
        "url_template": args.url_template,
        "download_timeout": args.timeout,
    }

    try:
        settings = load_settings(config_path=args.config, overrides=overrides)
    except SettingsError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    if settings.version is None:
        logger.error(
            "No version given. Pass VERSION, set PYEMBEDKIT_VERSION, "
            "or add 'version' to pyembedkit.yaml"
        )
        return 1

    installer = build_installer(settings)
    outcome = installer.run(settings.version)

    if outcome.status is RunStatus.FAILED:
        return 1

    if outcome.path is not None:
        print(outcome.path)
    return 0
