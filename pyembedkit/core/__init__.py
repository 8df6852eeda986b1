"""
Core functionality for pyembedkit.

This package contains the collaborators the installer depends on: platform
and version checks, the tool cache, download, extraction, removal and run
reporting.
"""

from .exceptions import (
    PyEmbedKitError,
    ConfigurationError,
    UnsupportedPlatformError,
    InvalidVersionError,
    UnsupportedArchitectureError,
    SettingsError,
    PipelineError,
    DownloadError,
    ExtractError,
    InsecureArchiveError,
    CacheStoreError,
    EvictionError,
    RemoveError,
)

from .platform import (
    ARCH_MAP,
    PlatformSpec,
    resolve_arch,
    detect_platform_spec,
    clear_platform_cache,
)

from .version import is_valid_version, validate_version

from .interfaces import (
    ArtifactCache,
    Downloader,
    ArchiveExtractor,
    Remover,
    RunReporter,
)

from .tool_cache import ToolCache
from .download import HttpDownloader
from .filesystem import ZipExtractor, TreeRemover
from .reporter import LoggingReporter

__all__ = [
    "PyEmbedKitError",
    "ConfigurationError",
    "UnsupportedPlatformError",
    "InvalidVersionError",
    "UnsupportedArchitectureError",
    "SettingsError",
    "PipelineError",
    "DownloadError",
    "ExtractError",
    "InsecureArchiveError",
    "CacheStoreError",
    "EvictionError",
    "RemoveError",
    "ARCH_MAP",
    "PlatformSpec",
    "resolve_arch",
    "detect_platform_spec",
    "clear_platform_cache",
    "is_valid_version",
    "validate_version",
    "ArtifactCache",
    "Downloader",
    "ArchiveExtractor",
    "Remover",
    "RunReporter",
    "ToolCache",
    "HttpDownloader",
    "ZipExtractor",
    "TreeRemover",
    "LoggingReporter",
]
