"""
Centralized exception hierarchy for pyembedkit.

This module defines all custom exceptions used across the codebase so that
each failure class has one clear meaning:

- ConfigurationError: the run cannot start (platform, version, architecture)
- PipelineError: the lookup/install pipeline failed (download, extract, store)
- EvictionError: removing a stale cached version failed (never fatal)
"""

from typing import Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class PyEmbedKitError(Exception):
    """Base exception for all pyembedkit errors."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigurationError(PyEmbedKitError):
    """Base exception for invalid run inputs. Always terminal."""

    pass


class UnsupportedPlatformError(ConfigurationError):
    """Raised when the host operating system is not supported."""

    pass


class InvalidVersionError(ConfigurationError):
    """Raised when a requested version is not a valid semantic version."""

    def __init__(self, raw: str, message: Optional[str] = None):
        self.raw = raw
        super().__init__(message or f"Invalid version: {raw}")


class UnsupportedArchitectureError(ConfigurationError):
    """Raised when the host architecture token has no artifact mapping."""

    def __init__(self, arch: str):
        self.arch = arch
        super().__init__(f"Unsupported architecture: {arch}")


class SettingsError(ConfigurationError):
    """Configuration file or value could not be parsed."""

    pass


# ============================================================================
# Pipeline Exceptions
# ============================================================================


class PipelineError(PyEmbedKitError):
    """Base exception for cache lookup and install failures."""

    pass


class DownloadError(PipelineError):
    """Exception raised when a download fails."""

    pass


class ExtractError(PipelineError):
    """Exception raised when archive extraction fails."""

    pass


class InsecureArchiveError(ExtractError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


class CacheStoreError(PipelineError):
    """Exception raised when an artifact cannot be stored in the cache."""

    pass


# ============================================================================
# Eviction Exceptions
# ============================================================================


class EvictionError(PyEmbedKitError):
    """Base exception for stale version eviction errors."""

    pass


class RemoveError(EvictionError):
    """Raised when a cache entry cannot be removed."""

    pass
