"""
Installer run orchestration.

One run moves through a fixed sequence of stages:

    PlatformCheck -> VersionCheck -> ArchCheck -> LookupOrInstall -> Evict -> Publish

Any of the first four stages can end the run with a terminal failure, which
is reported exactly once. Eviction never fails the run, and the installed
location is published only when every earlier stage succeeded.

A lookup/install failure whose string form is empty carries no message to
report. Such a run ends as ABORTED without a reported failure and without
publishing anything.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from pyembedkit.config.settings import (
    DEFAULT_DISPLAY_NAME,
    DEFAULT_TOOL_NAME,
    DEFAULT_URL_TEMPLATE,
    InstallerSettings,
)
from pyembedkit.core.exceptions import (
    ConfigurationError,
    InvalidVersionError,
    UnsupportedArchitectureError,
    UnsupportedPlatformError,
)
from pyembedkit.core.download import HttpDownloader
from pyembedkit.core.filesystem import TreeRemover, ZipExtractor
from pyembedkit.core.interfaces import (
    ArchiveExtractor,
    ArtifactCache,
    Downloader,
    Remover,
    RunReporter,
)
from pyembedkit.core.platform import PlatformSpec, detect_platform_spec, resolve_arch
from pyembedkit.core.reporter import LoggingReporter
from pyembedkit.core.tool_cache import ToolCache
from pyembedkit.core.version import validate_version
from pyembedkit.installer.eviction import EvictionReport, evict_stale
from pyembedkit.installer.pipeline import CacheKey, InstallPipeline

logger = logging.getLogger(__name__)

UNSUPPORTED_OS_MESSAGE = "This installer only supports Windows hosts."


class RunStatus(Enum):
    """Final state of an installer run."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    ABORTED = "aborted"


@dataclass
class RunOutcome:
    """Result of an installer run."""

    status: RunStatus
    path: Optional[Path] = None
    failure: Optional[str] = None
    eviction: Optional[EvictionReport] = None

    @property
    def succeeded(self) -> bool:
        return self.status is RunStatus.SUCCEEDED


def failure_message(error: BaseException) -> Optional[str]:
    """
    Extract a reportable message from a pipeline failure.

    Returns:
        The failure's message, or None if it carries none
    """
    return str(error) or None


class Installer:
    """
    Installs one version of a tool for the host described by a PlatformSpec.

    Example:
        >>> installer = Installer(
        ...     PlatformSpec(os_supported=True, arch="x64"),
        ...     cache=ToolCache(), downloader=HttpDownloader(),
        ...     extractor=ZipExtractor(), remover=TreeRemover(),
        ...     reporter=LoggingReporter(),
        ... )
        >>> outcome = installer.run("3.14.0")
        >>> outcome.path
        PosixPath('/home/user/.pyembedkit/tool-cache/python-embedded/3.14.0/amd64')
    """

    def __init__(
        self,
        platform_spec: PlatformSpec,
        cache: ArtifactCache,
        downloader: Downloader,
        extractor: ArchiveExtractor,
        remover: Remover,
        reporter: RunReporter,
        tool_name: str = DEFAULT_TOOL_NAME,
        url_template: str = DEFAULT_URL_TEMPLATE,
        display_name: str = DEFAULT_DISPLAY_NAME,
    ):
        self.platform_spec = platform_spec
        self.cache = cache
        self.remover = remover
        self.reporter = reporter
        self.tool_name = tool_name
        self.display_name = display_name
        self.pipeline = InstallPipeline(
            cache,
            downloader,
            extractor,
            reporter,
            url_template=url_template,
            display_name=display_name,
        )

    def resolve_key(self, raw_version: str) -> CacheKey:
        """
        Run the platform, version and architecture checks.

        Raises:
            UnsupportedPlatformError: If the host OS is not supported
            InvalidVersionError: If raw_version is not a semantic version
            UnsupportedArchitectureError: If the host arch has no mapping
        """
        if not self.platform_spec.os_supported:
            raise UnsupportedPlatformError(UNSUPPORTED_OS_MESSAGE)

        try:
            version = validate_version(raw_version)
        except InvalidVersionError as e:
            raise InvalidVersionError(
                e.raw, f"Invalid {self.display_name} version input: {e.raw}"
            ) from e

        arch = resolve_arch(self.platform_spec.arch)
        if arch is None:
            raise UnsupportedArchitectureError(self.platform_spec.arch)

        return CacheKey(self.tool_name, version, arch)

    def run(self, raw_version: str) -> RunOutcome:
        """
        Install or look up raw_version, evict stale versions, publish the path.

        Returns:
            RunOutcome describing how the run ended
        """
        try:
            key = self.resolve_key(raw_version)
        except ConfigurationError as e:
            return self._fail(str(e))

        logger.debug(f"Resolved cache key: {key}")

        try:
            tool_path = self.pipeline.install_or_fetch(key)
        except Exception as e:
            message = failure_message(e)
            if message is None:
                logger.debug(f"Install of {key} ended by {e!r} without a message")
                return RunOutcome(status=RunStatus.ABORTED)
            return self._fail(message)

        eviction = evict_stale(
            self.cache,
            self.remover,
            self.reporter,
            key.tool_name,
            key.arch,
            key.version,
            display_name=self.display_name,
        )

        self.reporter.add_path(tool_path)
        return RunOutcome(status=RunStatus.SUCCEEDED, path=tool_path, eviction=eviction)

    def _fail(self, message: str) -> RunOutcome:
        self.reporter.set_failed(message)
        return RunOutcome(status=RunStatus.FAILED, failure=message)


def build_installer(
    settings: InstallerSettings,
    platform_spec: Optional[PlatformSpec] = None,
    reporter: Optional[RunReporter] = None,
) -> Installer:
    """
    Create an Installer wired to the default filesystem and HTTP collaborators.

    Args:
        settings: Installer settings
        platform_spec: Host description (detected if None)
        reporter: Run reporter (LoggingReporter if None)

    Example:
        >>> from pyembedkit.config.settings import load_settings
        >>> installer = build_installer(load_settings())
        >>> installer.run("3.14.0")
    """
    cache = ToolCache(settings.cache_dir, lock_timeout=settings.lock_timeout)
    return Installer(
        platform_spec or detect_platform_spec(),
        cache=cache,
        downloader=HttpDownloader(settings.temp_dir, timeout=settings.download_timeout),
        extractor=ZipExtractor(settings.temp_dir),
        remover=TreeRemover(cache.root),
        reporter=reporter or LoggingReporter(),
        tool_name=settings.tool_name,
        url_template=settings.url_template,
        display_name=settings.display_name,
    )


__all__ = [
    "UNSUPPORTED_OS_MESSAGE",
    "RunStatus",
    "RunOutcome",
    "failure_message",
    "Installer",
    "build_installer",
]
