"""
Core interfaces for pyembedkit.

This module defines the abstract collaborators the installer core depends on.
The core only ever talks to these interfaces, so tests can substitute fakes
and alternative cache or transport implementations can be plugged in without
touching the install logic.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional


class ArtifactCache(ABC):
    """
    Key-value store of extracted artifacts keyed by (tool, version, arch).
    """

    @abstractmethod
    def find(self, tool_name: str, version: str, arch: str) -> Optional[Path]:
        """
        Look up a cached artifact.

        Args:
            tool_name: Tool identifier (e.g., "python-embedded")
            version: Exact version string
            arch: Resolved architecture token

        Returns:
            Location of the cached artifact, or None on a miss
        """
        pass

    @abstractmethod
    def find_all_versions(self, tool_name: str, arch: str) -> List[str]:
        """
        Enumerate all cached versions of a tool for one architecture.

        Returns:
            Version strings (possibly empty)
        """
        pass

    @abstractmethod
    def cache_dir(
        self, source_dir: Path, tool_name: str, version: str, arch: str
    ) -> Path:
        """
        Store an extracted directory in the cache.

        Returns:
            Final cached location

        Raises:
            CacheStoreError: If the directory cannot be stored
        """
        pass

    @abstractmethod
    def entry_path(self, tool_name: str, version: str, arch: str) -> Path:
        """Location a (tool, version, arch) entry occupies in the cache."""
        pass

    @abstractmethod
    def invalidate(self, tool_name: str, version: str, arch: str) -> None:
        """
        Make an entry absent before its files are removed.

        After this returns, find() misses for the entry even if removing
        its files later fails partway.
        """
        pass

    @abstractmethod
    def prune(self, tool_name: str, version: str) -> None:
        """Drop what is left of a version once it holds no entries."""
        pass


class Downloader(ABC):
    """Fetches a URL to a local file."""

    @abstractmethod
    def download(self, url: str) -> Path:
        """
        Download a URL.

        Returns:
            Location of the downloaded file

        Raises:
            DownloadError: If the download fails
        """
        pass


class ArchiveExtractor(ABC):
    """Unpacks a downloaded archive."""

    @abstractmethod
    def extract(self, archive_path: Path) -> Path:
        """
        Extract an archive.

        Returns:
            Directory holding the extracted contents

        Raises:
            ExtractError: If extraction fails
        """
        pass


class Remover(ABC):
    """Recursively deletes a filesystem location."""

    @abstractmethod
    def remove(self, path: Path) -> None:
        """
        Remove a file or directory tree.

        Raises:
            RemoveError: If the location cannot be removed
        """
        pass


class RunReporter(ABC):
    """
    Diagnostics sink and outcome channel for one installer run.
    """

    @abstractmethod
    def info(self, message: str) -> None:
        """Emit an informational event."""
        pass

    @abstractmethod
    def warning(self, message: str) -> None:
        """Emit a non-fatal warning."""
        pass

    @abstractmethod
    def set_failed(self, message: str) -> None:
        """Record the run's terminal failure."""
        pass

    @abstractmethod
    def add_path(self, path: Path) -> None:
        """Publish an installed location to downstream consumers."""
        pass


__all__ = [
    "ArtifactCache",
    "Downloader",
    "ArchiveExtractor",
    "Remover",
    "RunReporter",
]
