"""
Command-line entry point for pyembedkit.

    pyembedkit [--verbose | --quiet] [--config PATH] install [VERSION] [...]
    pyembedkit [--config PATH] versions [...]

Each subcommand lives in its own module under ``pyembedkit.cli.commands``
and exposes ``run(args) -> int``.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

try:
    from importlib.metadata import version as _package_version

    __version__ = _package_version("pyembedkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)

COMMAND_MODULES = {
    "install": "pyembedkit.cli.commands.install",
    "versions": "pyembedkit.cli.commands.versions",
}

# (level, format) per verbosity
LOG_SETTINGS = {
    "verbose": (logging.DEBUG, "%(levelname)s [%(name)s] %(message)s"),
    "quiet": (logging.ERROR, "%(levelname)s: %(message)s"),
    "default": (logging.INFO, "%(message)s"),
}


class CLI:
    """pyembedkit command-line interface."""

    def __init__(self):
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="pyembedkit",
            description="Install the Windows embeddable Python through a versioned tool cache",
            epilog='Run "pyembedkit COMMAND --help" for the options of one command',
        )
        parser.add_argument(
            "--version", action="version", version=f"pyembedkit {__version__}"
        )

        verbosity = parser.add_mutually_exclusive_group()
        verbosity.add_argument(
            "--verbose", "-v", action="store_true", help="Log debug details"
        )
        verbosity.add_argument(
            "--quiet", "-q", action="store_true", help="Log errors only"
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Settings file (default: ./pyembedkit.yaml when present)",
        )

        commands = parser.add_subparsers(dest="command", metavar="COMMAND")
        self._add_install_command(commands)
        self._add_versions_command(commands)

        return parser

    @staticmethod
    def _add_cache_options(command):
        command.add_argument(
            "--tool-name",
            metavar="NAME",
            help="Tool identifier used in the cache (default: python-embedded)",
        )
        command.add_argument(
            "--cache-dir",
            type=Path,
            metavar="DIR",
            help="Tool cache root (default: $RUNNER_TOOL_CACHE or ~/.pyembedkit/tool-cache)",
        )

    def _add_install_command(self, commands):
        command = commands.add_parser(
            "install",
            help="Install a Python version",
            description=(
                "Look up VERSION in the tool cache, downloading it on a miss, "
                "then remove other cached versions for this architecture"
            ),
        )
        command.add_argument(
            "python_version",
            nargs="?",
            metavar="VERSION",
            help="Semantic version to install (default: $PYEMBEDKIT_VERSION or $INPUT_VERSION)",
        )
        self._add_cache_options(command)
        command.add_argument(
            "--url-template",
            metavar="TEMPLATE",
            help="Download URL with {version} and {arch} placeholders",
        )
        command.add_argument(
            "--timeout",
            type=int,
            metavar="SECONDS",
            help="Download socket timeout (default: 30)",
        )

    def _add_versions_command(self, commands):
        command = commands.add_parser(
            "versions",
            help="List cached versions",
            description="List the cached versions for this host's architecture",
        )
        self._add_cache_options(command)

    def parse_args(self, argv: Optional[List[str]] = None) -> argparse.Namespace:
        return self.parser.parse_args(argv)

    def run(self, argv: Optional[List[str]] = None) -> int:
        """
        Parse argv, configure logging and run the selected command.

        Args:
            argv: Command-line arguments (sys.argv[1:] if None)

        Returns:
            Process exit code
        """
        args = self.parse_args(argv)
        self._configure_logging(args)

        if args.command is None:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(args)
        except KeyboardInterrupt:
            logger.info("Interrupted")
            return 130
        except Exception as e:
            logger.error(f"Unexpected error: {e}")
            if args.verbose:
                logger.exception("Traceback")
            return 1

    def _configure_logging(self, args):
        if args.verbose:
            level, fmt = LOG_SETTINGS["verbose"]
        elif args.quiet:
            level, fmt = LOG_SETTINGS["quiet"]
        else:
            level, fmt = LOG_SETTINGS["default"]

        # force: replace handlers left by an earlier configuration
        logging.basicConfig(level=level, format=fmt, force=True)

    def _dispatch_command(self, args) -> int:
        module_name = COMMAND_MODULES.get(args.command)
        if module_name is None:
            logger.error(f"Unknown command: {args.command}")
            return 1

        logger.debug(f"Dispatching '{args.command}' to {module_name}")
        return importlib.import_module(module_name).run(args)


def main():
    """Console script entry point."""
    sys.exit(CLI().run())


if __name__ == "__main__":
    main()
