"""
Run reporter backed by the logging module.

Informational events and warnings go to the ``pyembedkit`` loggers. The
terminal failure is recorded on the reporter so the CLI can turn it into an
exit code. Published paths are prepended to the process PATH and, on CI
runners that provide a ``GITHUB_PATH`` file, appended to that file so later
steps inherit them.
"""

import logging
import os
from pathlib import Path
from typing import List, MutableMapping, Optional

from pyembedkit.core.interfaces import RunReporter

logger = logging.getLogger(__name__)

PATH_FILE_ENV = "GITHUB_PATH"


class LoggingReporter(RunReporter):
    """
    Reporter that logs events and publishes paths to the environment.

    Attributes:
        failure: Terminal failure message, if one was reported
        published: Locations published during the run, in order
    """

    def __init__(self, environ: Optional[MutableMapping[str, str]] = None):
        """
        Args:
            environ: Environment to publish into (defaults to os.environ)
        """
        self.environ = os.environ if environ is None else environ
        self.failure: Optional[str] = None
        self.published: List[Path] = []

    @property
    def failed(self) -> bool:
        return self.failure is not None

    def info(self, message: str) -> None:
        logger.info(message)

    def warning(self, message: str) -> None:
        logger.warning(message)

    def set_failed(self, message: str) -> None:
        self.failure = message
        logger.error(message)

    def add_path(self, path: Path) -> None:
        path_str = str(path)

        path_file = self.environ.get(PATH_FILE_ENV)
        if path_file:
            with open(path_file, "a", encoding="utf-8") as f:
                f.write(f"{path_str}{os.linesep}")
            logger.debug(f"Appended {path_str} to {path_file}")

        current = self.environ.get("PATH", "")
        self.environ["PATH"] = (
            f"{path_str}{os.pathsep}{current}" if current else path_str
        )
        self.published.append(Path(path))

        logger.debug(f"Added to PATH: {path_str}")


__all__ = ["LoggingReporter", "PATH_FILE_ENV"]
