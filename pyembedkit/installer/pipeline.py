"""
Cache lookup and install pipeline.

On a cache hit the cached location is returned without touching the network
or writing anything. On a miss the distribution archive is downloaded,
extracted and stored in the cache, strictly in that order. Failures from any
step propagate unchanged; intermediate downloads and extraction directories
are left to the collaborators that created them.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from pyembedkit.config.settings import (
    DEFAULT_DISPLAY_NAME,
    DEFAULT_TOOL_NAME,
    DEFAULT_URL_TEMPLATE,
)
from pyembedkit.core.interfaces import (
    ArchiveExtractor,
    ArtifactCache,
    Downloader,
    RunReporter,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheKey:
    """Key for every cache read and write."""

    tool_name: str
    version: str
    arch: str

    def __str__(self) -> str:
        return f"{self.tool_name}-{self.version}-{self.arch}"


def build_download_url(template: str, version: str, arch: str) -> str:
    """
    Build the download URL for a version and resolved architecture.

    Example:
        >>> build_download_url(DEFAULT_URL_TEMPLATE, "3.14.0", "amd64")
        'https://www.python.org/ftp/python/3.14.0/python-3.14.0-embed-amd64.zip'
    """
    return template.format(version=version, arch=arch)


class InstallPipeline:
    """
    Resolves a CacheKey to an installed location.

    Example:
        >>> pipeline = InstallPipeline(cache, downloader, extractor, reporter)
        >>> pipeline.install_or_fetch(CacheKey("python-embedded", "3.14.0", "amd64"))
        PosixPath('/opt/hostedtoolcache/python-embedded/3.14.0/amd64')
    """

    def __init__(
        self,
        cache: ArtifactCache,
        downloader: Downloader,
        extractor: ArchiveExtractor,
        reporter: RunReporter,
        url_template: str = DEFAULT_URL_TEMPLATE,
        display_name: str = DEFAULT_DISPLAY_NAME,
    ):
        self.cache = cache
        self.downloader = downloader
        self.extractor = extractor
        self.reporter = reporter
        self.url_template = url_template
        self.display_name = display_name

    def install_or_fetch(self, key: CacheKey) -> Path:
        """
        Return the cached location for key, installing it first on a miss.

        Raises:
            DownloadError: If the archive cannot be downloaded
            ExtractError: If the archive cannot be extracted
            CacheStoreError: If the extracted files cannot be cached
        """
        cached = self.cache.find(key.tool_name, key.version, key.arch)
        if cached:
            logger.debug(f"Cache hit: {key} -> {cached}")
            return cached

        url = build_download_url(self.url_template, key.version, key.arch)
        self.reporter.info(
            f"Downloading {self.display_name} {key.version} for {key.arch} from {url}"
        )

        download_path = self.downloader.download(url)
        extract_path = self.extractor.extract(download_path)
        tool_path = self.cache.cache_dir(
            extract_path, key.tool_name, key.version, key.arch
        )

        self.reporter.info(
            f"{self.display_name} {key.version} has been installed and cached at {tool_path}"
        )
        return tool_path


__all__ = [
    "CacheKey",
    "build_download_url",
    "InstallPipeline",
]
